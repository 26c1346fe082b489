# tests/conftest.py
# Inibir warnings de depreciação de bibliotecas
import warnings
warnings.filterwarnings("ignore", category=DeprecationWarning, module="passlib")

# ========================
# --- Configuração .env.test ---
# ========================
from dotenv import load_dotenv
import os
load_dotenv(dotenv_path='.env.test')
# Garante as variáveis obrigatórias mesmo se o pytest for executado fora da raiz
os.environ.setdefault("JWT_SECRET_KEY", "chave-de-teste-com-pelo-menos-32-caracteres")
os.environ.setdefault("JWT_ISSUER", "library-catalog-test")
os.environ.setdefault("JWT_AUDIENCE", "library-catalog-test-clients")
os.environ.setdefault("PASSWORD_BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

"""
Fixtures do Pytest compartilhadas pela suíte de testes do catálogo.

Fixtures incluem:
- Engine SQLite em memória (`db_engine`) com as tabelas criadas do zero a cada teste.
- Sessão de banco (`db_session`) para testes diretos das funções CRUD.
- Cliente HTTP assíncrono (`test_async_client`) ligado à aplicação FastAPI, com a
  dependência de sessão sobrescrita para usar o banco em memória.
- Emissor e validador de tokens com a configuração de teste.
- Usuário registrado + token de acesso + cabeçalhos de autenticação.
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from fastapi import status
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# --- Módulos da Aplicação ---
from library_api.core.config import TokenConfig, settings
from library_api.core.security import TokenIssuer, TokenValidator
from library_api.db.database import get_db_session, get_optional_db_session
from library_api.db.tables import Base
from library_api.main import app as fastapi_app

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)

TEST_DATABASE_URL = "sqlite+aiosqlite://"
AUTH_URL = f"{settings.API_PREFIX}/Auth"
BOOKS_URL = f"{settings.API_PREFIX}/Books"

# ========================
# --- Fixtures de Banco de Dados ---
# ========================
@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine SQLite em memória. O `StaticPool` mantém uma única conexão,
    para que todas as sessões do teste vejam o mesmo banco.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    logger.debug("Fixture 'db_engine': tabelas criadas no banco em memória.")

    yield engine

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
    await engine.dispose()

@pytest.fixture(scope="function")
def db_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

@pytest_asyncio.fixture(scope="function")
async def db_session(db_session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with db_session_factory() as session:
        yield session

# ========================
# --- Fixture Principal: Cliente de Teste HTTP ---
# ========================
@pytest_asyncio.fixture(scope="function")
async def test_async_client(
    db_session_factory: async_sessionmaker[AsyncSession]
) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP (`AsyncClient`) com `ASGITransport`, sem rede real.

    As dependências `get_db_session` e `get_optional_db_session` são sobrescritas para entregar sessões do
    banco em memória; as sobrescritas são removidas ao fim do teste.
    """
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db_session] = override_get_db_session
    fastapi_app.dependency_overrides[get_optional_db_session] = override_get_db_session
    try:
        transport = ASGITransport(app=fastapi_app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        fastapi_app.dependency_overrides.clear()

# ========================
# --- Fixtures de Tokens ---
# ========================
@pytest.fixture(scope="function")
def token_config() -> TokenConfig:
    return TokenConfig.from_settings(settings)

@pytest.fixture(scope="function")
def token_issuer(token_config: TokenConfig) -> TokenIssuer:
    return TokenIssuer(token_config)

@pytest.fixture(scope="function")
def token_validator(token_config: TokenConfig) -> TokenValidator:
    return TokenValidator(token_config)

# ========================
# --- Fixtures para Usuário de Teste ---
# ========================
user_a_data: Dict[str, str] = {
    "username": "alice01",
    "password": "Str0ng!Pass",
    "confirmPassword": "Str0ng!Pass",
}

@pytest_asyncio.fixture(scope="function")
async def registered_user_a(test_async_client: AsyncClient) -> Dict[str, str]:
    """Registra o Usuário A e devolve seus dados de registro."""
    response = await test_async_client.post(f"{AUTH_URL}/register", json=user_a_data)
    if response.status_code != status.HTTP_201_CREATED:
        pytest.fail(f"Falha inesperada ao registrar Usuário A: {response.status_code} - {response.text}")
    return user_a_data

@pytest_asyncio.fixture(scope="function")
async def test_user_a_token(test_async_client: AsyncClient, registered_user_a: Dict[str, str]) -> str:
    """Faz login com o Usuário A e devolve o token de acesso."""
    login_payload = {"username": registered_user_a["username"], "password": registered_user_a["password"]}
    response = await test_async_client.post(f"{AUTH_URL}/login", json=login_payload)
    if response.status_code != status.HTTP_200_OK:
        pytest.fail(f"Falha ao fazer login com Usuário A: {response.status_code} - {response.text}")
    return response.json()["token"]

@pytest.fixture(scope="function")
def auth_headers_a(test_user_a_token: str) -> Dict[str, str]:
    """Cabeçalhos de autenticação (Authorization Bearer) do Usuário A."""
    return {"Authorization": f"Bearer {test_user_a_token}"}

# ========================
# --- Fixture para Criação de Livros ---
# ========================
books_to_create = [
    {"title": "Dune", "author": "Frank Herbert", "description": "Desert planet saga"},
    {"title": "Neuromancer", "author": "William Gibson", "description": "Cyberpunk classic"},
    {"title": "Foundation", "author": "Isaac Asimov", "description": "Psychohistory and the fall of an empire"},
]

@pytest_asyncio.fixture(scope="function")
async def created_books(test_async_client: AsyncClient, auth_headers_a: Dict[str, str]) -> list:
    """Cria os livros de exemplo via API, na ordem de `books_to_create`."""
    created = []
    for payload in books_to_create:
        response = await test_async_client.post(BOOKS_URL, json=payload, headers=auth_headers_a)
        assert response.status_code == status.HTTP_201_CREATED, \
            f"Falha ao criar livro de teste '{payload['title']}'. Resposta: {response.text}"
        created.append(response.json())
    return created
