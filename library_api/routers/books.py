# library_api/routers/books.py
"""
Este módulo define as rotas da API para o catálogo de Livros (Books):
listagem, consulta por id, criação, atualização e remoção.
Todas as rotas exigem um token Bearer válido.
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import Annotated, List

from fastapi import APIRouter, Body, Path, Request, Response, status

# --- Módulos da Aplicação ---
from library_api.core.dependencies import CurrentUser, DbDep
from library_api.core.exceptions import InvalidInputError, NotFoundError
from library_api.db import book_crud
from library_api.models.book import Book, BookCreate, BookUpdate

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)

def _not_found(book_id: int) -> NotFoundError:
    return NotFoundError(f"Livro com ID '{book_id}' não encontrado.")

# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter(
    tags=["Books"],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Não autorizado (token JWT inválido, ausente ou expirado)."},
    },
)

# ========================
# --- Endpoint: Listar Livros ---
# ========================
@router.get(
    "",
    response_model=List[Book],
    summary="Lista todos os livros",
    description="Retorna todos os livros, do maior id para o menor. Sem paginação.",
)
async def list_books(db: DbDep, current_user: CurrentUser):
    books = await book_crud.list_books(db)
    logger.debug(f"{len(books)} livros listados para '{current_user.username}'.")
    return books

# ========================
# --- Endpoint: Obter Livro ---
# ========================
@router.get(
    "/{book_id}",
    response_model=Book,
    summary="Busca um livro pelo seu ID",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Livro não encontrado."}},
)
async def get_book(
    book_id: Annotated[int, Path(description="ID do livro.")],
    db: DbDep,
    current_user: CurrentUser
):
    book = await book_crud.get_book_by_id(db, book_id)
    if book is None:
        raise _not_found(book_id)
    return book

# ========================
# --- Endpoint: Criar Livro ---
# ========================
@router.post(
    "",
    response_model=Book,
    status_code=status.HTTP_201_CREATED,
    summary="Cria um novo livro",
    response_description="O livro criado, com o id atribuído. O header `Location` aponta para ele.",
)
async def create_book(
    book_in: Annotated[BookCreate, Body(description="Dados do novo livro.")],
    request: Request,
    response: Response,
    db: DbDep,
    current_user: CurrentUser
):
    """
    Cria um livro. O id é sempre atribuído pelo servidor.
    """
    created_book = await book_crud.create_book(db, book_in)
    response.headers["Location"] = str(request.url_for("get_book", book_id=created_book.id))
    logger.info(f"Livro {created_book.id} criado por '{current_user.username}'.")
    return created_book

# ========================
# --- Endpoint: Atualizar Livro ---
# ========================
@router.put(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Atualiza um livro existente",
    description="Sobrescreve título, autor e descrição do livro.",
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Corpo inválido ou id do corpo diferente do id da rota."},
        status.HTTP_404_NOT_FOUND: {"description": "Livro não encontrado."},
        status.HTTP_409_CONFLICT: {"description": "Conflito de concorrência ao gravar."},
    },
)
async def update_book(
    book_id: Annotated[int, Path(description="ID do livro a ser atualizado.")],
    book_in: Annotated[BookUpdate, Body(description="Novos valores do livro.")],
    db: DbDep,
    current_user: CurrentUser
):
    if book_in.id is not None and book_in.id != book_id:
        raise InvalidInputError(f"O id do corpo ({book_in.id}) não corresponde ao id da rota ({book_id}).")

    updated_book = await book_crud.update_book(db, book_id, book_in)
    if updated_book is None:
        raise _not_found(book_id)
    logger.info(f"Livro {book_id} atualizado por '{current_user.username}'.")

# ========================
# --- Endpoint: Deletar Livro ---
# ========================
@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove um livro",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Livro não encontrado."}},
)
async def delete_book(
    book_id: Annotated[int, Path(description="ID do livro a ser removido.")],
    db: DbDep,
    current_user: CurrentUser
):
    deleted = await book_crud.delete_book(db, book_id)
    if not deleted:
        raise _not_found(book_id)
    logger.info(f"Livro {book_id} removido por '{current_user.username}'.")
