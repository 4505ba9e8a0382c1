"""
Pig game state machine.

Every operation is a pure function: it takes the chat's current session
and returns a `(new_session, result)` pair. Nothing is mutated in place, so
a rejected action simply hands back the session it was given.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple, TypeVar, Union

from .errors import GameLogicError, Rejected
from .models import (
    BUST_FACE,
    DIE_FACES,
    MIN_PLAYERS,
    WIN_SCORE,
    GameSession,
    Lobby,
    Player,
    Playing,
)

T = TypeVar("T")


@dataclass(frozen=True)
class Joined:
    player: Player


@dataclass(frozen=True)
class Started:
    first_player: Player


@dataclass(frozen=True)
class TurnLost:
    """The current player rolled a 1 and forfeited `lost_score`."""

    player: Player
    lost_score: int
    next_player: Player


@dataclass(frozen=True)
class Continue:
    """The roll was added to the turn; the same player rolls again."""

    player: Player
    turn_score: int

    @property
    def total(self) -> int:
        return self.player.score + self.turn_score


@dataclass(frozen=True)
class RoundFinished:
    """
    The current player reached the win threshold.

    `standings` is the final scoreboard, captured after the winning points
    were banked. The caller is expected to replace the session with a fresh
    lobby before releasing it.
    """

    winner: Player
    standings: "PlayingSnapshot"


@dataclass(frozen=True)
class Banked:
    player: Player
    turn_score: int
    next_player: Player

    @property
    def total(self) -> int:
        return self.player.score


@dataclass(frozen=True)
class LobbySnapshot:
    names: Tuple[str, ...]


@dataclass(frozen=True)
class ScoreRow:
    text: str
    is_current: bool
    is_winner: bool


@dataclass(frozen=True)
class PlayingSnapshot:
    rows: Tuple[ScoreRow, ...]


JoinResult = Union[Joined, Rejected]
StartResult = Union[Started, Rejected]
RollResult = Union[TurnLost, Continue, RoundFinished, Rejected]
BankResult = Union[Banked, Rejected]
Snapshot = Union[LobbySnapshot, PlayingSnapshot]


def shuffle_players(players: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Return a uniformly random permutation of `players`.

    Fisher-Yates over a copy; `rng` can be a seeded `random.Random` so the
    order is reproducible in tests.
    """

    rng = rng or random.Random()
    result = list(players)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def join(
    session: GameSession,
    user_id: int,
    name: str,
    username: Optional[str] = None,
    is_premium: bool = False,
) -> Tuple[GameSession, JoinResult]:
    if isinstance(session, Playing):
        return session, Rejected(GameLogicError.JOIN_AFTER_START, user_id, name)

    if user_id in session.players:
        return session, Rejected(GameLogicError.ALREADY_JOINED, user_id, name)

    player = Player(user_id=user_id, name=name, username=username)
    players = dict(session.players)
    players[user_id] = player
    lobby = Lobby(players=players, is_premium=session.is_premium or is_premium)
    return lobby, Joined(player)


def start(
    session: GameSession, rng: Optional[random.Random] = None
) -> Tuple[GameSession, StartResult]:
    if isinstance(session, Playing):
        return session, Rejected(GameLogicError.ALREADY_PLAYING)

    if len(session.players) < MIN_PLAYERS:
        return session, Rejected(GameLogicError.NOT_ENOUGH_PLAYERS)

    order = shuffle_players(list(session.players.values()), rng)
    playing = Playing(players=tuple(order), is_premium=session.is_premium)
    return playing, Started(playing.current_player)


def _check_turn(
    session: GameSession, user_id: int, name: Optional[str]
) -> Optional[Rejected]:
    if not isinstance(session, Playing):
        return Rejected(GameLogicError.NOT_PLAYING, user_id, name)
    if session.current_player.user_id != user_id:
        return Rejected(GameLogicError.WRONG_TURN, user_id, name)
    return None


def _with_score(session: Playing, index: int, score: int) -> Tuple[Player, ...]:
    players = list(session.players)
    players[index] = replace(players[index], score=score)
    return tuple(players)


def roll_die(
    session: GameSession, user_id: int, value: int, name: Optional[str] = None
) -> Tuple[GameSession, Optional[RollResult]]:
    """
    Apply one die roll by `user_id`.

    Anything but an integer in 1..6 is ignored: the session is returned
    untouched and the result is None.
    """

    if isinstance(value, bool) or not isinstance(value, int) or value not in DIE_FACES:
        return session, None

    rejected = _check_turn(session, user_id, name)
    if rejected is not None:
        return session, rejected

    player = session.current_player
    if value == BUST_FACE:
        after = replace(session, turn=session.next_turn(), turn_score=0)
        return after, TurnLost(player, session.turn_score, after.current_player)

    turn_score = session.turn_score + value
    if player.score + turn_score >= WIN_SCORE:
        players = _with_score(session, session.turn, player.score + turn_score)
        after = replace(session, players=players, turn_score=0)
        return after, RoundFinished(after.current_player, snapshot(after))

    after = replace(session, turn_score=turn_score)
    return after, Continue(player, turn_score)


def bank(
    session: GameSession, user_id: int, name: Optional[str] = None
) -> Tuple[GameSession, BankResult]:
    rejected = _check_turn(session, user_id, name)
    if rejected is not None:
        return session, rejected

    player = session.current_player
    players = _with_score(session, session.turn, player.score + session.turn_score)
    after = replace(
        session, players=players, turn=session.next_turn(), turn_score=0
    )
    return after, Banked(players[session.turn], session.turn_score, after.current_player)


def reset(session: Optional[GameSession] = None) -> Lobby:
    return Lobby()


def snapshot(session: GameSession) -> Snapshot:
    """
    Read-only view of a session for the results listing.

    In the lobby only names are shown. While playing every player is listed
    in turn order with their score; the player holding the die is flagged as
    current and anyone at or above the win threshold as a winner.
    """

    if isinstance(session, Lobby):
        return LobbySnapshot(tuple(p.show(False) for p in session.players.values()))

    rows = tuple(
        ScoreRow(
            text=player.show(True),
            is_current=index == session.turn,
            is_winner=player.score >= WIN_SCORE,
        )
        for index, player in enumerate(session.players)
    )
    return PlayingSnapshot(rows)
