# library_api/core/security.py
"""
Módulo responsável pelas funcionalidades de segurança da aplicação:
hashing de senhas (bcrypt via passlib) e emissão/validação de tokens JWT
(HMAC-SHA256 via python-jose) para autenticação sem estado.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError

# --- Módulos da Aplicação ---
from library_api.core.config import TokenConfig, settings
from library_api.core.exceptions import AuthenticationError
from library_api.models.token import AuthenticatedUser, TokenPayload

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Configuração Hashing de Senha ---
# ========================
# Contexto Passlib para hashing e verificação de senhas usando bcrypt.
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_BCRYPT_ROUNDS,
)

# ========================
# --- Funções de Senha ---
# ========================
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica se uma senha em texto plano corresponde a um hash armazenado.

    Args:
        plain_password: A senha fornecida pelo usuário (texto plano).
        hashed_password: O hash da senha armazenado.

    Returns:
        True se a senha corresponder ao hash, False caso contrário
        (inclusive quando o hash armazenado está malformado).
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Ocorre se o formato do hash for inválido para o passlib
        logger.warning("Tentativa de verificar senha com hash em formato inválido.")
        return False

def dummy_verify_password() -> None:
    """
    Executa uma verificação bcrypt descartável, com o mesmo custo de uma real.
    Usada quando o usuário não existe, para que o tempo de resposta não o denuncie.
    """
    pwd_context.dummy_verify()

def get_password_hash(password: str) -> str:
    """
    Gera um hash bcrypt (salt aleatório e custo embutidos) para a senha.

    Args:
        password: A senha em texto plano a ser hasheada.

    Returns:
        A string do hash bcrypt gerado.
    """
    return pwd_context.hash(password)

# ========================
# --- Utilitário de Tempo ---
# ========================
def _unix_now(now: Optional[datetime] = None) -> int:
    current = now or datetime.now(timezone.utc)
    return int(current.timestamp())

# ========================
# --- Emissor de Tokens ---
# ========================
class TokenIssuer:
    """
    Emite tokens JWT assinados e com validade limitada.

    Não verifica credenciais: recebe um nome de usuário já autenticado.
    Cada chamada gera um `jti` novo, então vários tokens do mesmo usuário
    podem coexistir e valem até as respectivas expirações.
    """

    def __init__(self, config: TokenConfig):
        self._config = config

    def issue(self, username: str, now: Optional[datetime] = None) -> str:
        """
        Cria um token de acesso para `username`.

        Args:
            username: Usuário autenticado (vira o claim `sub`).
            now: Instante de emissão; padrão é o relógio atual (UTC).

        Returns:
            O token JWT compacto.
        """
        issued_at = _unix_now(now)
        claims = {
            "sub": username,
            "jti": str(uuid.uuid4()),
            "iat": issued_at,
            "exp": issued_at + self._config.ttl_seconds,
            "iss": self._config.issuer,
            "aud": self._config.audience,
        }
        return jwt.encode(
            claims,
            self._config.secret_key.get_secret_value(),
            algorithm=self._config.algorithm,
        )

# ========================
# --- Validador de Tokens ---
# ========================
class TokenValidator:
    """
    Valida tokens JWT: assinatura, emissor, audiência e expiração.

    Um token é válido se e somente se a assinatura confere com a chave
    configurada, `iss`/`aud` coincidem com a configuração e o instante
    atual é estritamente anterior a `exp`.
    """

    _DECODE_OPTIONS = {
        # A expiração é conferida abaixo com comparação estrita (now < exp).
        "verify_exp": False,
        "require_exp": True,
        "require_iat": True,
        "require_sub": True,
        "require_jti": True,
        "require_iss": True,
        "require_aud": True,
    }

    def __init__(self, config: TokenConfig):
        self._config = config

    def decode(self, token: str, now: Optional[datetime] = None) -> TokenPayload:
        """
        Decodifica e valida um token.

        Args:
            token: O token JWT compacto.
            now: Instante de referência para a expiração; padrão é o relógio atual.

        Returns:
            O payload validado.

        Raises:
            AuthenticationError: Para qualquer falha; nenhuma confiança parcial é concedida.
        """
        try:
            claims = jwt.decode(
                token,
                self._config.secret_key.get_secret_value(),
                algorithms=[self._config.algorithm],
                audience=self._config.audience,
                issuer=self._config.issuer,
                options=self._DECODE_OPTIONS,
            )
            payload = TokenPayload.model_validate(claims)
        except (JWTError, ValidationError) as e:
            logger.info(f"Token rejeitado: {type(e).__name__}: {e}")
            raise AuthenticationError()

        if _unix_now(now) >= payload.exp:
            logger.info(f"Token expirado (jti={payload.jti}, sub={payload.sub}).")
            raise AuthenticationError("Token expirado.")

        return payload

    def authenticate(self, token: str, now: Optional[datetime] = None) -> AuthenticatedUser:
        """Valida o token e devolve a identidade derivada dos seus claims."""
        payload = self.decode(token, now=now)
        return AuthenticatedUser(username=payload.sub, token_id=payload.jti, expires_at=payload.exp)
