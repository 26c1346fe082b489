# library_api/db/book_crud.py
"""
Módulo contendo as funções CRUD (Create, Read, Update, Delete) de livros.

As funções devolvem `None`/`False` quando o livro não existe, deixando a
decisão do 404 para o router. Conflitos de escrita concorrente detectados
pelo ORM (UPDATE que não encontra a linha lida) viram `ConflictError`.
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

# --- Módulos da Aplicação ---
from library_api.core.exceptions import ConflictError
from library_api.db.tables import BookRecord
from library_api.models.book import Book, BookCreate, BookUpdate

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Operações CRUD para Livros ---
# ========================
async def list_books(db: AsyncSession) -> List[Book]:
    """
    Lista todos os livros, do mais recente (maior id) para o mais antigo.
    Não há paginação.
    """
    result = await db.execute(select(BookRecord).order_by(BookRecord.id.desc()))
    return [Book.model_validate(record) for record in result.scalars().all()]

async def get_book_by_id(db: AsyncSession, book_id: int) -> Optional[Book]:
    """
    Busca um livro pelo id.

    Returns:
        O livro, ou None se não existir.
    """
    record = await db.get(BookRecord, book_id)
    if record is None:
        return None
    return Book.model_validate(record)

async def create_book(db: AsyncSession, book_in: BookCreate) -> Book:
    """
    Cria um livro; o id é atribuído pelo banco.

    Returns:
        O livro criado, já com id.
    """
    record = BookRecord(**book_in.model_dump())
    db.add(record)
    await db.commit()
    await db.refresh(record)
    logger.info(f"Livro {record.id} criado.")
    return Book.model_validate(record)

async def update_book(db: AsyncSession, book_id: int, book_in: BookUpdate) -> Optional[Book]:
    """
    Sobrescreve título, autor e descrição de um livro existente.

    Returns:
        O livro atualizado, ou None se não existir.

    Raises:
        ConflictError: Se o livro mudou (foi removido) entre a leitura e a escrita.
    """
    record = await db.get(BookRecord, book_id)
    if record is None:
        return None

    record.title = book_in.title
    record.author = book_in.author
    record.description = book_in.description

    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.error(f"Conflito de concorrência ao atualizar o livro {book_id}.")
        raise ConflictError("A atualização não pôde ser feita devido a um conflito de concorrência.")

    logger.info(f"Livro {book_id} atualizado.")
    return Book.model_validate(record)

async def delete_book(db: AsyncSession, book_id: int) -> bool:
    """
    Remove um livro.

    Returns:
        True se o livro existia e foi removido, False se não existia.
    """
    record = await db.get(BookRecord, book_id)
    if record is None:
        return False

    await db.delete(record)
    await db.commit()
    logger.info(f"Livro {book_id} removido.")
    return True
