from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from domain.engine import (
    Banked,
    Continue,
    LobbySnapshot,
    RoundFinished,
    Snapshot,
    Started,
    TurnLost,
)
from domain.errors import Rejected

from application import messages

RESET_PAYLOAD = "reset"


@dataclass(frozen=True)
class InlineChoice:
    """
    Interactive buttons attached to a message.

    `rows` is a list of button rows, each button a `(label, payload)` pair.
    An empty choice on an edit means "remove the buttons".
    """

    rows: Tuple[Tuple[Tuple[str, str], ...], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not any(self.rows)


@dataclass(frozen=True)
class SendMessage:
    """A new message for the chat the event came from."""

    text: str
    reply_to_message_id: Optional[int] = None
    choice: Optional[InlineChoice] = None
    hint: Optional[str] = None
    is_premium: bool = False


@dataclass(frozen=True)
class EditMessage:
    """Replace the text (and buttons) of a message the bot sent earlier."""

    message_id: int
    text: str
    choice: Optional[InlineChoice] = None
    hint: Optional[str] = None
    is_premium: bool = False


OutboundEvent = Union[SendMessage, EditMessage]


def greeting(name: Optional[str], is_premium: bool) -> List[OutboundEvent]:
    hint = messages.audience_hint(name) if name else None
    return [SendMessage(messages.GREETING, hint=hint, is_premium=is_premium)]


def rejected(
    result: Rejected, reply_to: int, audience: str, is_premium: bool
) -> List[OutboundEvent]:
    return [
        SendMessage(
            messages.error_text(result.error),
            reply_to_message_id=reply_to,
            hint=messages.audience_hint(audience),
            is_premium=is_premium,
        )
    ]


def joined(reply_to: int, name: str, is_premium: bool) -> List[OutboundEvent]:
    return [
        SendMessage(
            messages.JOINED,
            reply_to_message_id=reply_to,
            hint=messages.joined_hint(name),
            is_premium=is_premium,
        )
    ]


def started(result: Started, reply_to: int, is_premium: bool) -> List[OutboundEvent]:
    first = result.first_player
    return [
        SendMessage(
            messages.started(first.mention()),
            reply_to_message_id=reply_to,
            hint=messages.started_hint(first.name),
            is_premium=is_premium,
        )
    ]


def turn_lost(
    result: TurnLost, reply_to: int, roller_name: str, is_premium: bool
) -> List[OutboundEvent]:
    nxt = result.next_player
    return [
        SendMessage(
            messages.TURN_LOST,
            reply_to_message_id=reply_to,
            hint=messages.turn_lost_hint(roller_name, result.lost_score),
            is_premium=is_premium,
        ),
        SendMessage(
            messages.next_turn(nxt.mention()),
            hint=messages.next_turn_hint(nxt.name),
            is_premium=is_premium,
        ),
    ]


def continued(result: Continue, reply_to: int) -> List[OutboundEvent]:
    # Running totals are sent verbatim, even in premium chats.
    return [
        SendMessage(
            messages.running_total(result.player.score, result.turn_score),
            reply_to_message_id=reply_to,
        )
    ]


def results(snapshot: Snapshot, is_premium: bool) -> List[OutboundEvent]:
    if isinstance(snapshot, LobbySnapshot):
        text = messages.players_list(snapshot.names)
        hint = messages.PLAYER_LIST_HINT
    else:
        text = messages.scores_list(snapshot.rows)
        hint = messages.RESULT_HINT
    return [SendMessage(text, hint=hint, is_premium=is_premium)]


def round_finished(result: RoundFinished, is_premium: bool) -> List[OutboundEvent]:
    return results(result.standings, is_premium)


def banked(
    result: Banked, reply_to: int, holder_name: str, is_premium: bool
) -> List[OutboundEvent]:
    return [
        SendMessage(
            messages.hold(result.total, result.next_player.mention()),
            reply_to_message_id=reply_to,
            hint=messages.hold_hint(holder_name, result.turn_score, result.total),
            is_premium=is_premium,
        )
    ]


def reset_requested(reply_to: int, name: str, is_premium: bool) -> List[OutboundEvent]:
    return [
        SendMessage(
            messages.RESET_CONFIRM,
            reply_to_message_id=reply_to,
            choice=InlineChoice(((("Yes", RESET_PAYLOAD),),)),
            hint=messages.reset_confirm_hint(name),
            is_premium=is_premium,
        )
    ]


def reset_done(message_id: int, is_premium: bool) -> List[OutboundEvent]:
    return [
        EditMessage(
            message_id,
            messages.RESET_DONE,
            choice=InlineChoice(),
            hint=messages.RESET_HINT,
            is_premium=is_premium,
        )
    ]
