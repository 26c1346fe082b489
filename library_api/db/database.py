# library_api/db/database.py
"""
Este módulo gerencia a conexão com o banco de dados relacional.
Inclui funções para criar e descartar o engine assíncrono do SQLAlchemy,
criar as tabelas, verificar a conectividade e fornecer sessões às rotas.
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

# --- Módulos da Aplicação ---
from library_api.core.config import settings
from library_api.db.tables import Base

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Variáveis Globais de Conexão ---
# ========================
# Estas variáveis mantêm o pool de conexões compartilhado pela aplicação.
engine: Optional[AsyncEngine] = None
session_factory: Optional[async_sessionmaker[AsyncSession]] = None

# ========================
# --- Função de Inicialização ---
# ========================
def init_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Cria o engine assíncrono e a fábrica de sessões.

    Args:
        database_url: URL do banco; padrão é `settings.DATABASE_URL`.

    Returns:
        O `AsyncEngine` criado.
    """
    global engine, session_factory
    url = database_url or settings.DATABASE_URL
    logger.info("Inicializando engine do banco de dados...")
    engine = create_async_engine(url, echo=settings.DATABASE_ECHO, pool_pre_ping=True)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return engine

# ========================
# --- Função de Fechamento ---
# ========================
async def dispose_engine():
    """
    Fecha o pool de conexões, se inicializado.
    """
    global engine, session_factory
    if engine is None:
        logger.warning("Tentativa de fechar o engine do banco, mas ele não estava inicializado.")
        return
    await engine.dispose()
    logger.info("Engine do banco de dados descartado.")
    engine = None
    session_factory = None

# ========================
# --- Criação das Tabelas ---
# ========================
async def create_tables(target_engine: Optional[AsyncEngine] = None):
    """
    Cria as tabelas que ainda não existem. Não faz migrações.
    """
    current_engine = target_engine or engine
    if current_engine is None:
        raise RuntimeError("O engine do banco de dados não foi inicializado.")
    async with current_engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    logger.info("Tabelas 'users' e 'books' verificadas/criadas.")

# ========================
# --- Dependência de Sessão ---
# ========================
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependência FastAPI que fornece uma sessão por requisição.

    O commit é responsabilidade das funções CRUD; aqui só se garante o
    rollback em caso de erro e o fechamento da sessão.

    Raises:
        RuntimeError: Se chamada antes de `init_engine`.
    """
    if session_factory is None:
        logger.error("Tentativa de obter sessão do DB antes da inicialização!")
        raise RuntimeError("A conexão com o banco de dados não foi inicializada.")
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

async def get_optional_db_session() -> AsyncGenerator[Optional[AsyncSession], None]:
    """
    Variante de `get_db_session` para o health check: entrega None em vez de
    falhar quando o engine ainda não foi inicializado.
    """
    if session_factory is None:
        logger.warning("Health check chamado antes da inicialização do banco de dados.")
        yield None
        return
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

# ========================
# --- Verificação de Conectividade ---
# ========================
async def check_database_connection(session: AsyncSession) -> bool:
    """
    Executa `SELECT 1` para confirmar que o banco responde.

    Args:
        session: Sessão da requisição.

    Returns:
        True se a consulta for bem-sucedida, False caso contrário.
    """
    try:
        await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Banco de dados indisponível: {type(e).__name__}")
        return False
