from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

WIN_SCORE = 100
BUST_FACE = 1
MIN_PLAYERS = 2
DIE_FACES = range(1, 7)


@dataclass(frozen=True)
class Player:
    """
    A participant of one chat's game.

    The model is transport independent: `user_id` is whatever stable
    identifier the chat platform gives us, `username` is the optional
    handle used for mentions.
    """

    user_id: int
    name: str
    username: Optional[str] = None
    score: int = 0

    def mention(self) -> str:
        if self.username:
            return f"@{self.username}"
        return self.name

    def show(self, with_score: bool) -> str:
        name = f"{self.name} ({self.username})" if self.username else self.name
        if with_score:
            return f"{name}: {self.score}"
        return name


@dataclass(frozen=True)
class Lobby:
    """Pre-game phase: players may join, there is no turn order yet."""

    players: Mapping[int, Player] = field(default_factory=dict)
    is_premium: bool = False

    def __post_init__(self) -> None:
        # Freeze the mapping so a Lobby can't be mutated behind the engine's back.
        object.__setattr__(self, "players", MappingProxyType(dict(self.players)))


@dataclass(frozen=True)
class Playing:
    """
    In-game phase with a fixed turn order.

    `turn` indexes into `players`; `turn_score` holds the points rolled in
    the active turn that are not banked yet.
    """

    players: Tuple[Player, ...]
    turn: int = 0
    turn_score: int = 0
    is_premium: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "players", tuple(self.players))
        if len(self.players) < MIN_PLAYERS:
            raise ValueError(f"A game needs at least {MIN_PLAYERS} players.")
        if not 0 <= self.turn < len(self.players):
            raise ValueError(f"Turn index {self.turn} is out of range.")

    @property
    def current_player(self) -> Player:
        return self.players[self.turn]

    def next_turn(self) -> int:
        return (self.turn + 1) % len(self.players)


GameSession = Union[Lobby, Playing]


def new_session() -> Lobby:
    return Lobby()
