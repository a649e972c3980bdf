"""
Session Store
In-memory registry of quiz session controllers (nothing is persisted)
"""
import logging
import uuid
from collections import OrderedDict
from typing import Optional

from quizgen.core.config import settings
from quizgen.services.quiz_session_service import CompletionFunc, QuizSessionController

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """Raised when a session ID is unknown"""
    pass


def new_session_id() -> str:
    return f"session_{uuid.uuid4().hex[:12]}"


class SessionRegistry:
    """Bounded map of session ID -> controller; the oldest session is evicted first"""

    def __init__(
        self,
        max_sessions: Optional[int] = None,
        completion_func: Optional[CompletionFunc] = None
    ):
        self.max_sessions = max_sessions or settings.max_sessions
        self.completion_func = completion_func
        self._sessions: "OrderedDict[str, QuizSessionController]" = OrderedDict()

    def create(self) -> str:
        """Create an empty session and return its ID"""
        session_id = new_session_id()
        self._sessions[session_id] = QuizSessionController(self.completion_func)

        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.warning(f"⚠️ Session limit reached, evicted {evicted}")

        logger.info(f"✅ Created quiz session: {session_id}")
        return session_id

    def get(self, session_id: str) -> QuizSessionController:
        controller = self._sessions.get(session_id)
        if controller is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return controller

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        logger.info(f"🗑️ Deleted quiz session: {session_id}")

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions


# ==================== SINGLETON ====================

_session_registry: Optional[SessionRegistry] = None


def get_session_registry() -> SessionRegistry:
    """Get or create the global SessionRegistry instance"""
    global _session_registry

    if _session_registry is None:
        _session_registry = SessionRegistry()

    return _session_registry
