# tests/test_books.py
"""
Testes de integração dos endpoints de livros (`library_api.routers.books`).

Os testes cobrem o ciclo de vida completo de um livro (criação, consulta,
atualização, remoção), ordenação da listagem, respostas 404/400/409 e a
exigência de token em todas as rotas.
"""

# ========================
# --- Importações ---
# ========================
from typing import Any, Dict, List

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy.orm.exc import StaleDataError

# --- Módulos da Aplicação e Configs de Teste ---
from tests.conftest import BOOKS_URL

# ========================
# --- Marcador Global de Teste ---
# ========================
pytestmark = pytest.mark.asyncio

DUNE = {"title": "Dune", "author": "Frank Herbert", "description": "Desert planet saga"}

# ========================
# --- Ciclo de Vida Completo ---
# ========================
async def test_book_full_lifecycle(test_async_client: AsyncClient, auth_headers_a: Dict[str, str]):
    """
    Cria, consulta, atualiza e remove um livro; após a remoção, consulta e nova remoção dão 404.
    """
    # --- Act: Criar ---
    create_response = await test_async_client.post(BOOKS_URL, json=DUNE, headers=auth_headers_a)

    # --- Assert: Criação ---
    assert create_response.status_code == status.HTTP_201_CREATED
    created = create_response.json()
    book_id = created["id"]
    assert created == {"id": book_id, **DUNE}
    assert create_response.headers["Location"].endswith(f"{BOOKS_URL}/{book_id}")

    # --- Act/Assert: Consultar ---
    get_response = await test_async_client.get(f"{BOOKS_URL}/{book_id}", headers=auth_headers_a)
    assert get_response.status_code == status.HTTP_200_OK
    assert get_response.json() == created

    # --- Act/Assert: Atualizar ---
    update_payload = {"id": book_id, "title": "Dune Messiah", "author": "Frank Herbert", "description": "Sequel"}
    put_response = await test_async_client.put(f"{BOOKS_URL}/{book_id}", json=update_payload, headers=auth_headers_a)
    assert put_response.status_code == status.HTTP_204_NO_CONTENT
    assert put_response.content == b""

    get_after_update = await test_async_client.get(f"{BOOKS_URL}/{book_id}", headers=auth_headers_a)
    assert get_after_update.json() == update_payload

    # --- Act/Assert: Remover ---
    delete_response = await test_async_client.delete(f"{BOOKS_URL}/{book_id}", headers=auth_headers_a)
    assert delete_response.status_code == status.HTTP_204_NO_CONTENT

    get_after_delete = await test_async_client.get(f"{BOOKS_URL}/{book_id}", headers=auth_headers_a)
    assert get_after_delete.status_code == status.HTTP_404_NOT_FOUND

    second_delete = await test_async_client.delete(f"{BOOKS_URL}/{book_id}", headers=auth_headers_a)
    assert second_delete.status_code == status.HTTP_404_NOT_FOUND

async def test_create_book_ignores_client_supplied_id(test_async_client: AsyncClient, auth_headers_a: Dict[str, str]):
    """
    O id é sempre atribuído pelo servidor.
    """
    # --- Act ---
    response = await test_async_client.post(BOOKS_URL, json={"id": 999, **DUNE}, headers=auth_headers_a)

    # --- Assert ---
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["id"] != 999

# ========================
# --- Listagem ---
# ========================
async def test_list_books_empty(test_async_client: AsyncClient, auth_headers_a: Dict[str, str]):
    response = await test_async_client.get(BOOKS_URL, headers=auth_headers_a)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []

async def test_list_books_ordered_by_descending_id(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    created_books: List[Dict[str, Any]]
):
    """
    A listagem traz todos os livros, do maior id para o menor.
    """
    # --- Act ---
    response = await test_async_client.get(BOOKS_URL, headers=auth_headers_a)

    # --- Assert ---
    assert response.status_code == status.HTTP_200_OK
    listed_ids = [book["id"] for book in response.json()]
    assert listed_ids == sorted((book["id"] for book in created_books), reverse=True)
    assert response.json()[0]["title"] == "Foundation"

# ========================
# --- Casos de Erro ---
# ========================
async def test_get_nonexistent_book_returns_404(test_async_client: AsyncClient, auth_headers_a: Dict[str, str]):
    response = await test_async_client.get(f"{BOOKS_URL}/4242", headers=auth_headers_a)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "4242" in response.json()["detail"]

async def test_update_nonexistent_book_returns_404(test_async_client: AsyncClient, auth_headers_a: Dict[str, str]):
    response = await test_async_client.put(f"{BOOKS_URL}/4242", json=DUNE, headers=auth_headers_a)

    assert response.status_code == status.HTTP_404_NOT_FOUND

async def test_update_book_with_mismatched_body_id_returns_400(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    created_books: List[Dict[str, Any]]
):
    """
    Um `id` no corpo diferente do id da rota é rejeitado e nada é alterado.
    """
    # --- Arrange ---
    target = created_books[0]

    # --- Act ---
    response = await test_async_client.put(
        f"{BOOKS_URL}/{target['id']}",
        json={"id": target["id"] + 100, "title": "Other", "author": "Someone", "description": "Changed"},
        headers=auth_headers_a,
    )

    # --- Assert ---
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    unchanged = await test_async_client.get(f"{BOOKS_URL}/{target['id']}", headers=auth_headers_a)
    assert unchanged.json() == target

@pytest.mark.parametrize(
    "payload",
    [
        {"title": "", "author": "Frank Herbert", "description": "Desert planet saga"},
        {"title": "Dune", "author": "Frank Herbert"},
        {"title": "Dune", "author": None, "description": "Desert planet saga"},
    ],
)
async def test_create_book_with_invalid_body_returns_400(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    payload: Dict[str, Any]
):
    """
    Campos obrigatórios ausentes ou vazios resultam em 400 e nenhum livro é criado.
    """
    # --- Act ---
    response = await test_async_client.post(BOOKS_URL, json=payload, headers=auth_headers_a)

    # --- Assert ---
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    listing = await test_async_client.get(BOOKS_URL, headers=auth_headers_a)
    assert listing.json() == []

async def test_update_book_concurrency_conflict_returns_409(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    created_books: List[Dict[str, Any]],
    mocker
):
    """
    Quando o ORM detecta que a linha mudou entre leitura e escrita, a resposta é 409.
    """
    # --- Arrange ---
    target = created_books[0]
    mocker.patch(
        "sqlalchemy.ext.asyncio.AsyncSession.commit",
        side_effect=StaleDataError("UPDATE statement on table 'books' expected to update 1 row(s); 0 were matched."),
    )

    # --- Act ---
    response = await test_async_client.put(
        f"{BOOKS_URL}/{target['id']}",
        json={"title": "Changed", "author": "Someone", "description": "Changed"},
        headers=auth_headers_a,
    )

    # --- Assert ---
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "concorrência" in response.json()["detail"]

# ========================
# --- Exigência de Token ---
# ========================
@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", ""),
        ("GET", "/1"),
        ("POST", ""),
        ("PUT", "/1"),
        ("DELETE", "/1"),
    ],
)
async def test_book_routes_require_token(test_async_client: AsyncClient, method: str, path: str):
    """
    Todas as rotas de livros exigem um token Bearer válido.
    """
    # --- Act ---
    response = await test_async_client.request(method, f"{BOOKS_URL}{path}", json=DUNE)

    # --- Assert ---
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.headers.get("WWW-Authenticate") == "Bearer"

async def test_book_routes_reject_tampered_token(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str]
):
    # --- Arrange ---
    token = auth_headers_a["Authorization"].removeprefix("Bearer ")
    header, payload, signature = token.split(".")
    tampered = f"{header}.{payload}.{signature[:-2]}{'AA' if signature[-2:] != 'AA' else 'BB'}"

    # --- Act ---
    response = await test_async_client.get(BOOKS_URL, headers={"Authorization": f"Bearer {tampered}"})

    # --- Assert ---
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
