"""In-memory session store, keyed by client-chosen session id."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .errors import InvalidRequest, SessionNotFound

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    id: str
    created_at: datetime = field(default_factory=_utcnow)
    initialized: bool = False
    client_info: Optional[Any] = None


class SessionStore:
    """
    Holds every registered session for the lifetime of the process.

    Sessions are never removed. Reads hand out copies so the only way to
    change a record is through ``initialize``.
    """

    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def register(self, session_id: Optional[str]) -> Session:
        if session_id is None or session_id == "":
            raise InvalidRequest("Missing sessionId in request body")
        if not isinstance(session_id, str):
            raise InvalidRequest("sessionId must be a non-empty string")

        session = Session(id=session_id)
        with self._lock:
            if session_id in self._sessions:
                # Re-registration resets the handshake
                logger.warning("Session %s re-registered, previous state discarded", session_id)
            self._sessions[session_id] = session
        logger.info("Registered session %s", session_id)
        return replace(session)

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            session = self._sessions.get(session_id)
            return replace(session) if session is not None else None

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def initialize(self, session_id: str, client_info: Any = None) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFound()
            session.initialized = True
            session.client_info = client_info
            return replace(session)
