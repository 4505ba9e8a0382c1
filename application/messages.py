"""
Reply texts and the matching hints.

A hint is free text describing the situation; the delivery layer may use
it to rephrase the reply (e.g. for premium chats). The bot never depends
on it being used.
"""

from __future__ import annotations

from typing import Iterable

from domain.errors import GameLogicError

KING_EMOJI = "\U0001F451"
DICE_EMOJI = "\U0001F3B2"

GREETING = "Add this bot to groups to enjoy the Pig (dice) game!"
JOINED = "You joined the game successfully!"
TURN_LOST = "Oops! You lost your turn :("
RESET_CONFIRM = "Are you sure?"
RESET_DONE = "Game is reset (players should join again)."
NO_PLAYERS = "No players!"

ERROR_TEXTS = {
    GameLogicError.ALREADY_JOINED: "You have joined already, you can't do it again :)",
    GameLogicError.JOIN_AFTER_START: "Game is already started, wait for the next round :(",
    GameLogicError.ALREADY_PLAYING: "Game is already started :(",
    GameLogicError.NOT_ENOUGH_PLAYERS: "Not enough players joined yet :(",
    GameLogicError.NOT_PLAYING: "Game is not started yet :(",
    GameLogicError.WRONG_TURN: "This is not your turn :(",
}

PLAYER_LIST_HINT = (
    "List of the players who joined the game provided. "
    "Each row contains the name and username in the parenthesis."
)

RESULT_HINT = (
    "List of the players in the game and their achieved points provided. "
    "The game is a Pig dice game. "
    "The player with king emoji (if exists) is the winner, "
    "say congratulations to the winner (if exists). "
    "The one with dice emoji (if exists) is the current player who possesses "
    "the turn to roll the dice. "
    "Say your opinion about the current state of the game."
)

RESET_HINT = "The game is a Pig dice game and it's reset."


def audience_hint(name: str) -> str:
    return f"Audience name is {name}."


def error_text(error: GameLogicError) -> str:
    return ERROR_TEXTS[error]


def joined_hint(name: str) -> str:
    return f"The game is a Pig dice game and {name} joined the game."


def started(mention: str) -> str:
    return f"The game has just started. Turn: {mention}."


def started_hint(name: str) -> str:
    return (
        "The game is a Pig dice game. Game has just started. "
        f"{name} is the first player to roll the dice."
    )


def turn_lost_hint(name: str, lost_score: int) -> str:
    return (
        f'{name} lost the turn after rolling a "one" by the dice. '
        "The game is a Pig dice game and the player lost the turn after adding "
        f"{lost_score} by the previous rolled dice results during the turn. "
        "Say your opinion about the player's performance during the last turn "
        "and how lucky the player was."
    )


def next_turn(mention: str) -> str:
    return f"It's {mention} turn to roll the dice."


def next_turn_hint(name: str) -> str:
    return f"The game is a Pig dice game and now it's {name} turn to roll the dice."


def running_total(banked: int, turn_score: int) -> str:
    return f"{banked} + {turn_score} = {banked + turn_score}"


def hold(total: int, next_mention: str) -> str:
    return f"Your total score is {total}. Next turn: {next_mention}"


def hold_hint(name: str, turn_score: int, total: int) -> str:
    return (
        "The game is a Pig dice game. "
        f"{name} decided to hold their achieved points and pass the dice "
        "to the next player. "
        f"The player achieved {turn_score} points during the turn and now got "
        f"{total} points in total. "
        "Tell your opinion about this decision."
    )


def reset_confirm_hint(name: str) -> str:
    return f"{name} wants to reset the game."


def players_list(names: Iterable[str]) -> str:
    lines = [f"\n- {name}" for name in names]
    if not lines:
        return NO_PLAYERS
    return "Players:" + "".join(lines)


def scores_list(rows: Iterable) -> str:
    """Render `ScoreRow`s, crown before dice when a row qualifies for both."""

    lines = []
    for row in rows:
        if row.is_winner:
            lines.append(f"\n- {KING_EMOJI} {row.text}")
        elif row.is_current:
            lines.append(f"\n- {DICE_EMOJI} {row.text}")
        else:
            lines.append(f"\n- {row.text}")
    return "Scores:" + "".join(lines)
