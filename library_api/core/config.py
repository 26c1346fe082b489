# library_api/core/config.py

# ========================
# --- Importações ---
# ========================
import os
import logging
from typing import List
from pydantic_settings import BaseSettings
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator
from dotenv import load_dotenv

# ===============================
# --- Configuração do Logger ---
# ===============================
logger = logging.getLogger(__name__)

# ===============================
# --- Carregamento do .env ---
# ===============================
# Define o caminho para o arquivo .env na raiz do projeto
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), '.env')
# Carrega as variáveis do arquivo .env para o ambiente, se o arquivo existir
loaded = load_dotenv(dotenv_path=dotenv_path)

# ======================================
# --- Definição das Configurações ---
# ======================================
class Settings(BaseSettings):
    """
    Configurações da aplicação lidas do ambiente usando Pydantic BaseSettings.
    Procura variáveis de ambiente ou variáveis em um arquivo .env.
    Docs Pydantic Settings: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
    """
    # =========================
    # --- Config Gerais ---
    # =========================
    PROJECT_NAME: str = Field("Library Catalog API", description="Nome do Projeto")
    API_PREFIX: str = Field("/api", description="Prefixo comum das rotas da API")

    # ================================
    # --- Configurações do Banco ---
    # ================================
    DATABASE_URL: str = Field(
        "sqlite+aiosqlite:///./books.db",
        description="URL assíncrona do SQLAlchemy para o banco relacional (ex.: sqlite+aiosqlite, postgresql+asyncpg)"
    )
    DATABASE_ECHO: bool = Field(False, description="Loga o SQL emitido pelo SQLAlchemy (apenas para depuração)")

    # ===========================
    # --- Configurações JWT ---
    # ===========================
    JWT_SECRET_KEY: str = Field(..., min_length=32, description="Chave secreta simétrica para assinar tokens JWT (obrigatória)")
    JWT_ALGORITHM: str = Field("HS256", description="Algoritmo de assinatura JWT (apenas HMAC-SHA256)")
    JWT_ISSUER: str = Field(..., min_length=1, description="Emissor (iss) esperado nos tokens (obrigatório)")
    JWT_AUDIENCE: str = Field(..., min_length=1, description="Audiência (aud) esperada nos tokens (obrigatória)")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30, gt=0, description="Validade do token de acesso em minutos")

    # ================================
    # --- Configurações de Senha ---
    # ================================
    PASSWORD_BCRYPT_ROUNDS: int = Field(12, ge=4, le=31, description="Fator de custo do bcrypt")

    # ===============================
    # --- Configuração de Logging ---
    # ===============================
    LOG_LEVEL: str = Field(default="INFO", description="Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)")

    # ===================================
    # --- Configurações CORS ---
    # ===================================
    CORS_ALLOWED_ORIGINS: List[str] = Field(default=[], description="Lista de origens CORS permitidas (JSON no .env)")

    # ====================================================
    # --- Configuração do Modelo Pydantic BaseSettings ---
    # ====================================================
    model_config = {
        "case_sensitive": False,
    }

    # ===============================
    # --- Validadores ---
    # ===============================
    @field_validator("JWT_ALGORITHM")
    @classmethod
    def check_jwt_algorithm(cls, value: str) -> str:
        """Os tokens são sempre assinados com HMAC-SHA256."""
        if value.upper() != "HS256":
            raise ValueError("JWT_ALGORITHM deve ser HS256.")
        return value.upper()

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Normaliza e valida o nível de log."""
        level = value.upper()
        if level not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LOG_LEVEL inválido: '{value}'.")
        return level

# ===========================================
# --- Configuração Imutável dos Tokens ---
# ===========================================
class TokenConfig(BaseModel):
    """
    Valor imutável com tudo o que o emissor e o validador de tokens precisam.
    Construído uma vez na inicialização e injetado; nunca lido de estado global.
    """
    secret_key: SecretStr
    algorithm: str = "HS256"
    issuer: str
    audience: str
    ttl_seconds: int = Field(1800, gt=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, current_settings: "Settings") -> "TokenConfig":
        """Extrai a configuração de tokens das configurações da aplicação."""
        return cls(
            secret_key=SecretStr(current_settings.JWT_SECRET_KEY),
            algorithm=current_settings.JWT_ALGORITHM,
            issuer=current_settings.JWT_ISSUER,
            audience=current_settings.JWT_AUDIENCE,
            ttl_seconds=current_settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

# ================================
# --- Criação da Instância ---
# ================================
try:
    # Pydantic BaseSettings lê do ambiente ou .env na instanciação
    settings = Settings()
except ValidationError as e:
    # Apenas os nomes dos campos: os valores podem conter o segredo JWT
    invalid_fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
    logger.critical(f"Erro fatal de validação ao carregar configurações. Campos inválidos: {invalid_fields}")
    raise e
except Exception as e:
    # Captura outros erros inesperados
    logger.critical(f"Erro inesperado ao carregar configurações: {e}", exc_info=True)
    raise e
