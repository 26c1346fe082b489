# library_api/core/logging_config.py
"""
Este módulo configura o sistema de logging da aplicação utilizando Loguru.
Inclui um InterceptHandler para redirecionar logs do sistema de logging
padrão do Python para o Loguru, garantindo um formato de log consistente.
"""

# ========================
# --- Importações ---
# ========================
import logging
import sys
from loguru import logger as loguru_logger

# ========================
# --- Handler de Intercepção ---
# ========================
class InterceptHandler(logging.Handler):
    """
    Handler do `logging` que redireciona mensagens para o Loguru.
    Os módulos da aplicação continuam usando `logging.getLogger(__name__)`;
    bibliotecas (Uvicorn, SQLAlchemy, passlib) passam pelo mesmo caminho.
    """
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back # pragma: no cover
            depth += 1 # pragma: no cover

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())

# ========================
# --- Função de Setup ---
# ========================
def setup_logging(log_level: str = "INFO"):
    """
    Configura o sistema de logging global da aplicação.

    - Remove handlers padrão do Loguru para evitar duplicação.
    - Adiciona um handler Loguru para `sys.stderr` com formato e nível configuráveis.
    - Canaliza o `logging` padrão do Python para o Loguru via `InterceptHandler`.
    - Silencia o log de acesso do Uvicorn e o SQL do SQLAlchemy (exceto em DEBUG).

    Args:
        log_level: Nível mínimo de log a ser exibido (ex: "INFO", "DEBUG").
    """
    log_level = log_level.upper()

    loguru_logger.remove() # Limpa handlers pré-existentes do Loguru

    loguru_logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        enqueue=True,    # Torna o logging assíncrono e seguro para threads/processos
        diagnose=False   # Não expõe valores de variáveis (senhas, tokens) nos tracebacks
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    logging.getLogger("uvicorn.access").disabled = True
    logging.getLogger("uvicorn.error").propagate = False

    if log_level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    # passlib avisa sobre a versão do bcrypt a cada processo; não é acionável
    logging.getLogger("passlib").setLevel(logging.ERROR)
