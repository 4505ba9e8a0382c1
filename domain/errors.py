from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class GameLogicError(Enum):
    """User-facing reasons an action was refused."""

    ALREADY_JOINED = "already_joined"
    JOIN_AFTER_START = "join_after_start"
    ALREADY_PLAYING = "already_playing"
    NOT_ENOUGH_PLAYERS = "not_enough_players"
    NOT_PLAYING = "not_playing"
    WRONG_TURN = "wrong_turn"


@dataclass(frozen=True)
class Rejected:
    """
    Result of an action that was not applied.

    The session returned alongside a `Rejected` is always the untouched
    input session. `user_id`/`name` identify who triggered the action so
    the reply can address them; `start()` has no caller identity and
    leaves both as None.
    """

    error: GameLogicError
    user_id: Optional[int] = None
    name: Optional[str] = None
