"""
Boundary layer data model(s).

A session is what the service layer keeps between two requests: which game is played, against whom, and the current
(immutable) state of the rule engine. The engine state is replaced on every accepted move.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from src.core.shared_types import Difficulty, GameKind

SideName = str


@dataclass
class GameSession:
    """One game in progress. `state` is the GameState of the engine matching `kind`."""

    kind: GameKind
    difficulty: Difficulty
    state: Any
    # side played by the human against the computer; None when both sides are human
    human_side: Optional[SideName] = None
    # engine specific options the session was created with (ex. go board size), reused on reset
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def vs_computer(self) -> bool:
        return self.human_side is not None
