# library_client/api.py
"""
Cliente HTTP síncrono (httpx) para a API do catálogo de livros.

As regras de entrada do cliente são aplicadas antes de cada requisição,
o token da sessão é anexado automaticamente e qualquer 401 encerra a
sessão local.
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import Any, List, Optional

import httpx

from library_client.session import SessionStore
from library_client.validation import validate_book_input, validate_user_input

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Exceções do Cliente ---
# ========================
class ClientValidationError(ValueError):
    """Entrada recusada pelas regras do cliente; nenhuma requisição foi enviada."""


class ApiError(Exception):
    """Resposta não-2xx da API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SessionExpiredError(ApiError):
    """O servidor recusou o token (401). A sessão local já foi descartada."""

    def __init__(self, message: str = "Sessão expirada ou inválida. Faça login novamente."):
        super().__init__(401, message)

# ========================
# --- Cliente da API ---
# ========================
def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, list):
        return "; ".join(str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in detail)
    return str(detail) if detail else response.reason_phrase


class CatalogClient:
    """
    Args:
        base_url: URL base do servidor, ex.: `http://localhost:8000`.
        session: Store de sessão compartilhado com a interface. Padrão: um novo `SessionStore`.
        transport: Transporte httpx opcional (ex.: `httpx.MockTransport` nos testes).
        api_prefix: Prefixo das rotas da API.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[SessionStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
        api_prefix: str = "/api"
    ):
        self.session = session if session is not None else SessionStore()
        self.api_prefix = api_prefix.rstrip("/")
        self._http = httpx.Client(base_url=base_url, transport=transport, timeout=10.0)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "CatalogClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, authenticated: bool = True, **kwargs) -> httpx.Response:
        headers = self.session.auth_headers() if authenticated else {}
        response = self._http.request(method, f"{self.api_prefix}{path}", headers=headers, **kwargs)

        if response.status_code == 401:
            message = _error_message(response)
            if authenticated:
                self.session.notify_unauthorized()
                raise SessionExpiredError()
            raise ApiError(401, message)
        if response.is_error:
            message = _error_message(response)
            logger.warning(f"{method} {path} falhou com {response.status_code}: {message}")
            raise ApiError(response.status_code, message)
        return response

    # --- Autenticação ---
    def register(self, username: str, password: str, confirm_password: str) -> dict:
        error = validate_user_input(username, password, confirm_password)
        if error:
            raise ClientValidationError(error)
        response = self._request(
            "POST", "/Auth/register", authenticated=False,
            json={"username": username, "password": password, "confirmPassword": confirm_password},
        )
        return response.json()

    def login(self, username: str, password: str) -> str:
        """Autentica, guarda o token na sessão e agenda o aviso de expiração."""
        error = validate_user_input(username, password)
        if error:
            raise ClientValidationError(error)
        response = self._request(
            "POST", "/Auth/login", authenticated=False,
            json={"username": username, "password": password},
        )
        token = response.json()["token"]
        self.session.set_token(token)
        self.session.start_expiry_timer()
        return token

    def logout(self) -> None:
        self.session.discard()

    def me(self) -> dict:
        return self._request("GET", "/Auth/me").json()

    # --- Livros ---
    def list_books(self) -> List[dict]:
        return self._request("GET", "/Books").json()

    def get_book(self, book_id: int) -> dict:
        return self._request("GET", f"/Books/{book_id}").json()

    def create_book(self, title: str, author: str, description: str) -> dict:
        payload = self._book_payload(title, author, description)
        return self._request("POST", "/Books", json=payload).json()

    def update_book(self, book_id: int, title: str, author: str, description: str) -> None:
        payload = self._book_payload(title, author, description)
        payload["id"] = book_id
        self._request("PUT", f"/Books/{book_id}", json=payload)

    def delete_book(self, book_id: int) -> None:
        self._request("DELETE", f"/Books/{book_id}")

    @staticmethod
    def _book_payload(title: str, author: str, description: str) -> dict[str, Any]:
        error = validate_book_input(title, author, description)
        if error:
            raise ClientValidationError(error)
        return {"title": title, "author": author, "description": description}
