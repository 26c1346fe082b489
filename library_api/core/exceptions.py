# library_api/core/exceptions.py
"""
Taxonomia de erros da aplicação.

Cada categoria carrega o status HTTP correspondente e uma mensagem segura
para o cliente. Os routers e o CRUD levantam estas exceções; a conversão
para resposta HTTP acontece em um único ponto (`core.error_handlers`).
"""

# ========================
# --- Importações ---
# ========================
from typing import Dict, Optional

from fastapi import status

# ========================
# --- Exceção Base ---
# ========================
class AppError(Exception):
    """Base de todos os erros mapeados da aplicação."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Ocorreu um erro inesperado. Tente novamente mais tarde."

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)

# ========================
# --- Categorias ---
# ========================
class InvalidInputError(AppError):
    """Entrada malformada ou fora da política (400)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Dados de entrada inválidos."

class AuthenticationError(AppError):
    """Credenciais ou token ausentes, inválidos ou expirados (401)."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Não foi possível validar as credenciais."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})

class NotFoundError(AppError):
    """Recurso inexistente (404)."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Recurso não encontrado."

class ConflictError(AppError):
    """Username duplicado ou conflito de escrita concorrente (409)."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflito ao gravar o recurso."

class UnexpectedError(AppError):
    """Falha não categorizada (500). A mensagem nunca traz detalhes internos."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
