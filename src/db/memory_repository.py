"""Implementation of (Session)Repository keeping everything in a dictionary"""

from dataclasses import replace
from uuid import UUID, uuid4

from src.core.models import GameSession


class InMemorySessionRepository:
    """Sessions are discarded with the process: there is no game notation to persist beyond the move log"""

    def __init__(self) -> None:
        self._sessions: dict[UUID, GameSession] = {}

    def get_session(self, session_id: UUID) -> GameSession | None:
        """Get session by ID, if it exists."""
        session = self._sessions.get(session_id)
        return None if session is None else self._copy(session)

    def create_session(self, session: GameSession) -> tuple[GameSession, UUID]:
        """Store new session and return the stored data + newly created session ID."""
        new_id = uuid4()
        self._sessions[new_id] = self._copy(session)
        return self._copy(session), new_id

    def update_session(self, session_id: UUID, session: GameSession) -> GameSession | None:
        """Replace the stored session."""
        if session_id not in self._sessions:
            return None
        self._sessions[session_id] = self._copy(session)
        return self._copy(session)

    def delete_session(self, session_id: UUID) -> GameSession | None:
        """Remove a session."""
        return self._sessions.pop(session_id, None)

    def _copy(self, session: GameSession) -> GameSession:
        """Callers get their own record: editing it does not change what is stored until `update_session`"""
        return replace(session, options=dict(session.options))
