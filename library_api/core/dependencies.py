# library_api/core/dependencies.py
"""
Define as dependências reutilizáveis para a aplicação FastAPI,
especialmente aquelas relacionadas à autenticação e acesso ao banco de dados.
"""

# ========================
# --- Importações ---
# ========================
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

# --- Módulos da Aplicação ---
from library_api.core.exceptions import AuthenticationError
from library_api.core.security import TokenIssuer, TokenValidator
from library_api.db.database import get_db_session
from library_api.models.token import AuthenticatedUser

# ========================
# --- Esquema Bearer ---
# ========================
# auto_error=False: a ausência do header vira AuthenticationError (401) da taxonomia.
bearer_scheme = HTTPBearer(auto_error=False)

# ========================
# --- Dependências de Serviços ---
# ========================
def get_token_issuer(request: Request) -> TokenIssuer:
    """Retorna o emissor de tokens construído na inicialização da aplicação."""
    return request.app.state.token_issuer

def get_token_validator(request: Request) -> TokenValidator:
    """Retorna o validador de tokens construído na inicialização da aplicação."""
    return request.app.state.token_validator

# ========================
# --- Tipos de Dependência ---
# ========================
DbDep = Annotated[AsyncSession, Depends(get_db_session)]
TokenIssuerDep = Annotated[TokenIssuer, Depends(get_token_issuer)]
TokenValidatorDep = Annotated[TokenValidator, Depends(get_token_validator)]
BearerDep = Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]

# ========================
# --- Dependência: Usuário Atual ---
# ========================
async def get_current_user(
    validator: TokenValidatorDep,
    credentials: BearerDep
) -> AuthenticatedUser:
    """
    Dependência que exige um token Bearer válido.

    A identidade é derivada apenas dos claims verificados; não há consulta
    ao banco (autenticação sem estado).

    Raises:
        AuthenticationError: Header ausente, esquema diferente de Bearer ou token inválido/expirado.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Token de acesso ausente.")
    return validator.authenticate(credentials.credentials)

# ========================
# --- Tipos Anotados para Rotas ---
# ========================
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
