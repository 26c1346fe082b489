# library_api/main.py
"""
Ponto de entrada principal e configuração da aplicação FastAPI do catálogo.
Define a instância da aplicação, middlewares, tratamento de erros, rotas,
ciclo de vida (lifespan) e o endpoint raiz. Também inclui o setup de logging inicial.
"""

# ========================
# --- Importações ---
# ========================
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

# --- Módulos da Aplicação ---
from library_api.routers import auth, books, health
from library_api.db.database import create_tables, dispose_engine, init_engine
from library_api.core.config import Settings, TokenConfig, settings
from library_api.core.error_handlers import register_exception_handlers
from library_api.core.logging_config import setup_logging
from library_api.core.security import TokenIssuer, TokenValidator

# ========================
# --- Configuração de Logging ---
# ========================
setup_logging(log_level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# ========================
# --- Função de Setup do Middleware CORS ---
# ========================
def _setup_cors_middleware(app_instance: FastAPI, current_settings: Settings):
    """Configura o middleware CORS para a aplicação."""
    if current_settings.CORS_ALLOWED_ORIGINS:
        logger.info(f"Configurando CORS para origens: {current_settings.CORS_ALLOWED_ORIGINS}")
        app_instance.add_middleware(
            CORSMiddleware,
            allow_origins=current_settings.CORS_ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        logger.warning(
            "Nenhuma origem CORS configurada (settings.CORS_ALLOWED_ORIGINS está vazia). "
            "API pode não ser acessível de frontends em outros domínios."
        )

# ========================
# --- Função de Setup dos Serviços de Token ---
# ========================
def _setup_token_services(app_instance: FastAPI, current_settings: Settings):
    """Constrói a configuração imutável de tokens e injeta emissor e validador em `app.state`."""
    token_config = TokenConfig.from_settings(current_settings)
    app_instance.state.token_issuer = TokenIssuer(token_config)
    app_instance.state.token_validator = TokenValidator(token_config)
    logger.info(
        f"Tokens configurados: emissor='{token_config.issuer}', audiência='{token_config.audience}', "
        f"validade={token_config.ttl_seconds}s."
    )

# ========================
# --- Ciclo de Vida (Lifespan) ---
# ========================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gerencia o ciclo de vida da aplicação.

    Inicializa o engine do banco e cria as tabelas ausentes no startup.
    Descarta o pool de conexões no shutdown.
    """
    logger.info("Iniciando ciclo de vida da aplicação...")
    engine = init_engine()

    try:
        await create_tables(engine)
    except Exception as e:
        logger.critical(f"Falha ao preparar o banco de dados na inicialização: {type(e).__name__}: {e}")
        await dispose_engine()
        raise

    logger.info("Aplicação iniciada e pronta.") # pragma: no cover
    yield # pragma: no cover

    # Código abaixo é executado no shutdown da aplicação
    logger.info("Iniciando processo de encerramento...")
    await dispose_engine()
    logger.info("Aplicação encerrada.")

# ========================
# --- Instância FastAPI ---
# ========================
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API RESTful de catálogo de livros com autenticação por token JWT.",
    version="0.1.0",
    license_info={
        "name": "MIT License",
        "url": "https://opensource.org/licenses/MIT",
    },
    lifespan=lifespan
)

# ========================
# --- Configuração de Middlewares e Serviços ---
# ========================
register_exception_handlers(app)
_setup_cors_middleware(app, settings)
_setup_token_services(app, settings)

# ========================
# --- Rotas (Routers) ---
# ========================
app.include_router(auth.router, prefix=settings.API_PREFIX + "/Auth")
app.include_router(books.router, prefix=settings.API_PREFIX + "/Books")
app.include_router(health.router)

# ========================
# --- Endpoint Raiz ---
# ========================
@app.get("/", tags=["Root"])
async def read_root():
    """Endpoint raiz para verificar se a API está online."""
    return {"message": f"Bem-vindo à {settings.PROJECT_NAME}!"}

# ========================
# --- Execução (Uvicorn) ---
# ========================
if __name__ == "__main__": # pragma: no cover
    import uvicorn # pragma: no cover
    logger.info("Iniciando servidor Uvicorn para desenvolvimento...") # pragma: no cover
    uvicorn.run( # pragma: no cover
        "library_api.main:app", # pragma: no cover
        host="0.0.0.0", # pragma: no cover
        port=8000, # pragma: no cover
        reload=True, # pragma: no cover
        log_level=settings.LOG_LEVEL.lower() # pragma: no cover
    )
