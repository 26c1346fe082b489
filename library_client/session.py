# library_client/session.py
"""
Armazenamento da sessão do cliente: guarda o token de acesso, informa se
ele ainda está dentro da validade e avisa os interessados (telas, CLI)
quando a sessão termina por logout, expiração ou rejeição do servidor.

A leitura de `exp` aqui é apenas uma dica de UX. Os claims NÃO são
verificados no cliente; quem decide é sempre o servidor.
"""

# ========================
# --- Importações ---
# ========================
import json
import logging
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from jose import JWTError, jwt

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Eventos de Sessão ---
# ========================
class SessionEvent(str, Enum):
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"
    EXPIRED = "expired"
    REJECTED = "rejected"

SessionListener = Callable[[SessionEvent], None]

# ========================
# --- Armazenamentos de Token ---
# ========================
class MemoryTokenStorage:
    """Guarda o token apenas em memória; some ao fim do processo."""

    def __init__(self):
        self._token: Optional[str] = None

    def load(self) -> Optional[str]:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStorage:
    """
    Persiste o token em um arquivo JSON (`{"token": "..."}`) para que a
    sessão sobreviva a reinícios do cliente.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Arquivo de sessão '{self.path}' ilegível, ignorando: {e}")
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)

# ========================
# --- Store de Sessão ---
# ========================
class SessionStore:
    """
    Ponto único de verdade do cliente sobre o token atual.

    Args:
        storage: Onde o token é guardado. Padrão: `MemoryTokenStorage`.
        clock: Função que retorna o instante atual em segundos Unix. Padrão: `time.time`.
    """

    def __init__(self, storage=None, clock: Optional[Callable[[], float]] = None):
        self.storage = storage if storage is not None else MemoryTokenStorage()
        self.clock = clock or time.time
        self._listeners: List[SessionListener] = []
        self._timer: Optional[threading.Timer] = None

    # --- Token ---
    def set_token(self, token: str) -> None:
        self.storage.save(token)
        logger.info("Token de sessão armazenado.")
        self._emit(SessionEvent.LOGGED_IN)

    def get_token(self) -> Optional[str]:
        return self.storage.load()

    def discard(self, reason: SessionEvent = SessionEvent.LOGGED_OUT) -> None:
        """Remove o token, cancela o timer de expiração e notifica os ouvintes."""
        self.cancel_expiry_timer()
        had_token = self.storage.load() is not None
        self.storage.clear()
        if had_token:
            logger.info(f"Sessão encerrada ({reason.value}).")
            self._emit(reason)

    def _expires_at(self, token: str) -> Optional[float]:
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return None
        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return None
        return float(exp)

    def is_authenticated(self) -> bool:
        """
        True se houver token e o instante atual for anterior ao `exp`.
        Token malformado é descartado.
        """
        token = self.get_token()
        if not token:
            return False

        exp = self._expires_at(token)
        if exp is None:
            logger.warning("Token de sessão malformado; descartando.")
            self.discard(SessionEvent.REJECTED)
            return False
        return self.clock() < exp

    def auth_headers(self) -> dict:
        token = self.get_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    # --- Ouvintes ---
    def subscribe(self, listener: SessionListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Ouvinte de sessão falhou ao tratar o evento '{event.value}'.")

    # --- Fim de Sessão ---
    def notify_unauthorized(self) -> None:
        """Chamado em qualquer resposta 401: o token não serve mais."""
        logger.warning("Servidor rejeitou o token da sessão (401).")
        self.discard(SessionEvent.REJECTED)

    def check_expiry(self) -> bool:
        """
        Encerra a sessão com `EXPIRED` se o token já passou do `exp`.

        Returns:
            True se a sessão foi encerrada por expiração.
        """
        token = self.get_token()
        if not token:
            return False
        exp = self._expires_at(token)
        if exp is not None and self.clock() < exp:
            return False
        self.discard(SessionEvent.EXPIRED)
        return True

    def _on_expiry_timer(self) -> None:
        # Relógio ainda antes do `exp` (despertar adiantado ou ajuste de hora): reagenda
        if not self.check_expiry() and self.get_token():
            self.start_expiry_timer()

    def start_expiry_timer(self) -> Optional[threading.Timer]:
        """Agenda a verificação de expiração para o instante do `exp` do token atual."""
        self.cancel_expiry_timer()
        token = self.get_token()
        exp = self._expires_at(token) if token else None
        if exp is None:
            return None

        delay = max(0.0, exp - self.clock())
        self._timer = threading.Timer(delay, self._on_expiry_timer)
        self._timer.daemon = True
        self._timer.start()
        logger.debug(f"Timer de expiração agendado para daqui a {delay:.0f}s.")
        return self._timer

    def cancel_expiry_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
