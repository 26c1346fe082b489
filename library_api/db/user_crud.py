# library_api/db/user_crud.py
"""
Módulo contendo as operações de persistência de usuários (Credential Store).
Usuários são apenas criados e consultados; atualização e remoção estão fora do escopo.
"""

# ========================
# --- Importações ---
# ========================
import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

# --- Módulos da Aplicação ---
from library_api.core.exceptions import ConflictError
from library_api.core.security import get_password_hash
from library_api.db.tables import UserRecord
from library_api.models.user import UserInDB, UserRegistration

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Operações CRUD para Usuários ---
# ========================
async def get_user_by_username(db: AsyncSession, username: str) -> Optional[UserInDB]:
    """
    Busca um usuário pelo seu nome de usuário (chave primária).

    Args:
        db: Sessão do banco de dados.
        username: O nome de usuário a ser buscado.

    Returns:
        Um objeto UserInDB se o usuário for encontrado, None caso contrário.
    """
    record = await db.get(UserRecord, username)
    if record is None:
        return None
    return UserInDB.model_validate(record)

async def create_user(db: AsyncSession, user_in: UserRegistration) -> UserInDB:
    """
    Cria um novo usuário, gravando apenas o hash da senha.

    A chave primária garante a unicidade mesmo se duas requisições passarem
    pela checagem prévia ao mesmo tempo: a violação vira `ConflictError`.

    Args:
        db: Sessão do banco de dados.
        user_in: Dados de registro já validados.

    Returns:
        O usuário criado.

    Raises:
        ConflictError: Se o nome de usuário já existir.
    """
    record = UserRecord(
        username=user_in.username,
        password_hash=await asyncio.to_thread(get_password_hash, user_in.password),
    )
    db.add(record)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(f"Violação de chave primária ao criar usuário '{user_in.username}' (registro concorrente).")
        raise ConflictError(f"O nome de usuário '{user_in.username}' já existe.")

    logger.info(f"Usuário '{user_in.username}' persistido.")
    return UserInDB.model_validate(record)
