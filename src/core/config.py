"""Runtime configuration. Values can be overridden by environment variables prefixed with BOARDGAMES_"""

from functools import lru_cache
from random import Random
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Knobs for the computer opponents and the session driver."""

    # cosmetic pause before the opponent answers
    opponent_delay_seconds: float = Field(default=0.5, ge=0.0)

    # plies searched by the hard chess / checkers opponents
    chess_search_depth: int = Field(default=4, ge=1)
    checkers_search_depth: int = Field(default=4, ge=1)

    # medium opponents: chance to pick a capturing move when one exists
    capture_preference: float = Field(default=0.6, ge=0.0, le=1.0)

    # hard heuristic opponents: chance to play the second best move for variety
    second_best_chance: float = Field(default=0.1, ge=0.0, le=1.0)

    go_board_size: int = 19
    go_capture_target: Optional[int] = Field(default=None, ge=1)

    # fix to make the opponents deterministic
    random_seed: Optional[int] = None

    model_config = SettingsConfigDict(env_prefix="BOARDGAMES_")


@lru_cache
def get_settings() -> EngineSettings:
    return EngineSettings()


def opponent_rng() -> Random:
    """Random source for the computer opponents (seeded when BOARDGAMES_RANDOM_SEED is set)."""
    return Random(get_settings().random_seed)
