# library_api/routers/auth.py
"""
Este módulo define as rotas da API relacionadas à autenticação de usuários:
registro, login (obtenção de token JWT) e consulta da identidade do token.
"""

# ========================
# --- Importações ---
# ========================
import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Body, status

# --- Módulos da Aplicação ---
from library_api.core.dependencies import CurrentUser, DbDep, TokenIssuerDep
from library_api.core.exceptions import AuthenticationError, ConflictError
from library_api.core.security import dummy_verify_password, verify_password
from library_api.db import user_crud
from library_api.models.token import CurrentUserResponse, LoginResponse
from library_api.models.user import RegistrationResponse, UserLogin, UserRegistration

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)

# Mesma resposta para usuário inexistente e senha errada (evita enumeração de usuários).
INVALID_CREDENTIALS_MESSAGE = "Nome de usuário ou senha incorretos."

# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter(
    tags=["Authentication"],
)

# ========================
# --- Rotas da API ---
# ========================

# --- Endpoint de Registro ---
@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registra um novo usuário no sistema",
    response_description="Nome do usuário registrado. Nenhum token é emitido.",
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Dados de registro fora da política."},
        status.HTTP_409_CONFLICT: {"description": "Nome de usuário já existe."},
    },
)
async def register_user(
    db: DbDep,
    user_in: Annotated[UserRegistration, Body(description="Dados do novo usuário para registro.")]
):
    """
    Endpoint para registrar um novo usuário.

    1. A forma da entrada (padrão do username, política de senha, confirmação)
       já foi validada pelo modelo `UserRegistration`.
    2. Username existente → 409 (sem atualização no lugar).
    3. A senha é hasheada e o usuário persistido; uma colisão concorrente na
       chave primária também resulta em 409.
    """
    existing_user = await user_crud.get_user_by_username(db, user_in.username)
    if existing_user:
        logger.warning(f"Registro recusado: username '{user_in.username}' já existe.")
        raise ConflictError(f"O nome de usuário '{user_in.username}' já existe.")

    created_user = await user_crud.create_user(db=db, user_in=user_in)
    logger.info(f"Usuário '{created_user.username}' registrado com sucesso.")
    return RegistrationResponse(username=created_user.username)

# --- Endpoint de Login ---
@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Autentica o usuário e obtém um token de acesso JWT",
    response_description="Token de acesso JWT e mensagem de sucesso.",
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Usuário ou senha ausentes."},
        status.HTTP_401_UNAUTHORIZED: {"description": "Credenciais inválidas."},
    },
)
async def login(
    db: DbDep,
    issuer: TokenIssuerDep,
    credentials: Annotated[UserLogin, Body(description="Nome de usuário e senha.")]
):
    """
    Autentica um usuário e retorna um token de acesso.

    Usuário inexistente e senha incorreta produzem exatamente a mesma
    resposta 401; apenas o log do servidor diferencia os dois casos.
    """
    user = await user_crud.get_user_by_username(db, credentials.username)

    # bcrypt roda fora do event loop; usuário inexistente paga o mesmo custo de hash
    if user is None:
        await asyncio.to_thread(dummy_verify_password)
        logger.warning(f"Falha de login: usuário '{credentials.username}' não encontrado.")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    if not await asyncio.to_thread(verify_password, credentials.password, user.password_hash):
        logger.warning(f"Falha de login: senha incorreta para o usuário '{credentials.username}'.")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    token = issuer.issue(user.username)
    logger.info(f"Usuário '{user.username}' autenticado com sucesso.")
    return LoginResponse(token=token)

# --- Endpoint de Dados do Usuário Autenticado ---
@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Obtém a identidade do token apresentado",
    response_description="Usuário e id do token extraídos dos claims verificados.",
    responses={status.HTTP_401_UNAUTHORIZED: {"description": "Token ausente, inválido ou expirado."}},
)
async def read_current_user(current_user: CurrentUser):
    """
    Retorna a identidade do chamador. A dependência `CurrentUser` valida o token.
    """
    return CurrentUserResponse(username=current_user.username, tokenId=current_user.token_id)
