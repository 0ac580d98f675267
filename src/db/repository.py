"""Protocol repository: sessions only live as long as the process, but the service does not need to know that."""

from typing import Protocol
from uuid import UUID

from src.core.models import GameSession


class SessionRepository(Protocol):
    """Storage of game sessions"""

    def get_session(self, session_id: UUID) -> GameSession | None:
        """Get session by ID, if it exists."""
        ...

    def create_session(self, session: GameSession) -> tuple[GameSession, UUID]:
        """Store new session and return the stored data + newly created session ID."""
        ...

    def update_session(self, session_id: UUID, session: GameSession) -> GameSession | None:
        """Replace the stored session."""
        ...

    def delete_session(self, session_id: UUID) -> GameSession | None:
        """Remove a session."""
        ...
