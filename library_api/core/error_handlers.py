# library_api/core/error_handlers.py
"""
Adaptador de fronteira entre a taxonomia de erros e as respostas HTTP.

- `AppError` e subclasses viram `{"detail": <mensagem>}` com o status da categoria.
- Erros de validação do corpo da requisição (FastAPI) viram 400.
- Qualquer exceção não mapeada é capturada pelo middleware de fallback,
  registrada com traceback no servidor e devolvida como 500 genérico.
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# --- Módulos da Aplicação ---
from library_api.core.exceptions import AppError, UnexpectedError

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Funções Auxiliares ---
# ========================
def _validation_messages(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """Reduz os erros do Pydantic a localização + mensagem, sem ecoar a entrada (pode ser senha)."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]

# ========================
# --- Handlers ---
# ========================
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Converte um erro da taxonomia na resposta HTTP correspondente."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"Erro {type(exc).__name__} em {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} ({exc.status_code}) em {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=exc.headers,
    )

async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Rejeita entrada malformada com 400 antes de qualquer acesso à persistência."""
    errors = _validation_messages(exc)
    logger.info(f"Entrada inválida em {request.method} {request.url.path}: {[e['loc'] for e in errors]}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"detail": errors}),
    )

async def unhandled_exception_middleware(request: Request, call_next):
    """
    Rede de segurança do processo: nenhuma falha não tratada chega crua ao cliente.
    O traceback completo fica apenas no log do servidor.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception(f"Exceção não tratada em {request.method} {request.url.path}: {type(exc).__name__}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": UnexpectedError.default_message},
        )

# ========================
# --- Registro na Aplicação ---
# ========================
def register_exception_handlers(app: FastAPI) -> None:
    """Instala os handlers da taxonomia e o middleware de fallback na aplicação."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.middleware("http")(unhandled_exception_middleware)
