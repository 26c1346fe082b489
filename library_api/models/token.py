# library_api/models/token.py
"""
Este módulo define os modelos Pydantic relacionados à autenticação por token:
a resposta de login, o payload (claims) do JWT e a identidade exposta
ao restante da requisição após a validação do token.
"""

# ========================
# --- Importações ---
# ========================
from pydantic import BaseModel, ConfigDict, Field

# ========================
# --- Modelos Pydantic Token ---
# ========================
class LoginResponse(BaseModel):
    """
    Modelo de resposta do login bem-sucedido.
    """
    token: str = Field(..., title="Token de Acesso JWT")
    message: str = Field(default="Login realizado com sucesso.", title="Mensagem")

class TokenPayload(BaseModel):
    """
    Claims contidos no token JWT emitido pela aplicação.
    """
    sub: str = Field(..., min_length=1, title="Nome de Usuário (Subject)")
    jti: str = Field(..., min_length=1, title="Identificador Único do Token")
    iat: int = Field(..., title="Timestamp de Emissão (Unix)")
    exp: int = Field(..., title="Timestamp de Expiração (Unix)")
    iss: str = Field(..., title="Emissor")
    aud: str = Field(..., title="Audiência")

class AuthenticatedUser(BaseModel):
    """
    Identidade do chamador durante a requisição: função pura dos claims verificados.
    """
    username: str
    token_id: str
    expires_at: int

    model_config = ConfigDict(frozen=True)

class CurrentUserResponse(BaseModel):
    """
    Resposta de `GET /Auth/me`.
    """
    username: str
    tokenId: str
    message: str = "Token válido."
