# library_client/validation.py
"""
Regras de entrada aplicadas no lado do cliente, antes de qualquer requisição.
Cada função retorna a primeira mensagem de erro encontrada ou `None`.
"""

# ========================
# --- Importações ---
# ========================
import re
from typing import Optional

from library_api.models.user import (
    PASSWORD_PATTERN,
    PASSWORD_RULE_MESSAGE,
    USERNAME_PATTERN,
    USERNAME_RULE_MESSAGE,
)

# ========================
# --- Regras de Livro ---
# ========================
TITLE_MAX_LENGTH = 100
AUTHOR_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 250

TITLE_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-\.\,\;\:\!\?\'\/\"]+$")
AUTHOR_PATTERN = re.compile(r"^[a-zA-Z\s\-\.]+$")
DESCRIPTION_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-\.\,\:\;\!\?\'\"\(\)]+$")


def validate_book_input(title: str, author: str, description: str) -> Optional[str]:
    if not title:
        return "O título é obrigatório."
    if len(title) > TITLE_MAX_LENGTH:
        return f"O título deve ter no máximo {TITLE_MAX_LENGTH} caracteres."
    if not TITLE_PATTERN.fullmatch(title):
        return "O título só pode conter letras, números, espaços e pontuação básica."

    if not author:
        return "O autor é obrigatório."
    if len(author) > AUTHOR_MAX_LENGTH:
        return f"O nome do autor deve ter no máximo {AUTHOR_MAX_LENGTH} caracteres."
    if not AUTHOR_PATTERN.fullmatch(author):
        return "O nome do autor só pode conter letras, espaços, hífens e pontos."

    if not description:
        return "A descrição é obrigatória."
    if len(description) > DESCRIPTION_MAX_LENGTH:
        return f"A descrição deve ter no máximo {DESCRIPTION_MAX_LENGTH} caracteres."
    if not DESCRIPTION_PATTERN.fullmatch(description):
        return "A descrição só pode conter letras, números, espaços, hífens e pontuação básica."

    return None

# ========================
# --- Regras de Usuário ---
# ========================
def validate_user_input(
    username: str,
    password: str,
    confirm_password: Optional[str] = None
) -> Optional[str]:
    """
    Aplica o padrão de username e a política de senha usados pelo servidor.

    A confirmação só é comparada quando informada (tela de registro);
    no login ela é omitida.
    """
    if not username or not USERNAME_PATTERN.fullmatch(username):
        return USERNAME_RULE_MESSAGE
    if not password or not PASSWORD_PATTERN.fullmatch(password):
        return PASSWORD_RULE_MESSAGE
    if confirm_password is not None and password != confirm_password:
        return "A senha e a confirmação não conferem."
    return None
