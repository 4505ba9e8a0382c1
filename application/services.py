from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional

from application import outcomes
from application.outcomes import RESET_PAYLOAD, OutboundEvent
from domain import engine
from domain.errors import Rejected
from domain.repositories import PremiumLookup, SessionDirectory, SessionHandle

logger = logging.getLogger(__name__)

JOIN = "join"
PLAY = "play"
HOLD = "hold"
RESULT = "result"
RESET = "reset"
COMMANDS = (JOIN, PLAY, HOLD, RESULT, RESET)


@dataclass
class Sender:
    """
    The user behind an inbound update.

    The application layer never depends on concrete SDK types; it only sees
    this small context object.
    """

    user_id: int
    first_name: str
    username: Optional[str] = None


@dataclass
class MessageContext:
    """Where an inbound message came from and who sent it."""

    chat_id: int
    message_id: int
    sender: Optional[Sender] = None


def normalize_command(token: str, bot_username: Optional[str] = None) -> Optional[str]:
    """
    Map a raw command token to one of `COMMANDS`.

    Accepts the bot-addressed form (`/join@somebot`) too, but only when the
    suffix names this bot; commands addressed to another bot in the same
    group return None. Without a `bot_username` the suffix isn't checked.
    Returns None for anything that isn't a known command.
    """

    if not token.startswith("/"):
        return None
    name, _, addressee = token[1:].partition("@")
    if addressee and bot_username and addressee.lower() != bot_username.lstrip("@").lower():
        return None
    name = name.lower()
    return name if name in COMMANDS else None


def greet(sender: Optional[Sender], premium: PremiumLookup) -> List[OutboundEvent]:
    """Reply for a private chat with the bot."""

    if sender is None:
        return outcomes.greeting(None, False)
    return outcomes.greeting(sender.first_name, premium.is_premium(sender.username))


def _dispatch(
    handle: SessionHandle,
    ctx: MessageContext,
    command: str,
    sender_is_premium: bool,
    rng: Optional[random.Random],
) -> List[OutboundEvent]:
    sender = ctx.sender
    state = handle.state

    if command == JOIN:
        state, result = engine.join(
            state, sender.user_id, sender.first_name, sender.username, sender_is_premium
        )
        handle.state = state
        if isinstance(result, Rejected):
            return _rejected(result, ctx, state.is_premium)
        logger.info("Chat %s: %s joined", ctx.chat_id, sender.first_name)
        return outcomes.joined(ctx.message_id, sender.first_name, state.is_premium)

    if command == PLAY:
        state, result = engine.start(state, rng)
        handle.state = state
        if isinstance(result, Rejected):
            return _rejected(result, ctx, state.is_premium)
        logger.info(
            "Chat %s: game started with %d players", ctx.chat_id, len(state.players)
        )
        return outcomes.started(result, ctx.message_id, state.is_premium)

    if command == HOLD:
        state, result = engine.bank(state, sender.user_id, sender.first_name)
        handle.state = state
        if isinstance(result, Rejected):
            return _rejected(result, ctx, state.is_premium)
        return outcomes.banked(
            result, ctx.message_id, sender.first_name, state.is_premium
        )

    if command == RESULT:
        return outcomes.results(engine.snapshot(state), state.is_premium)

    if command == RESET:
        # Only asks for confirmation; see `confirm_reset`.
        return outcomes.reset_requested(
            ctx.message_id, sender.first_name, state.is_premium
        )

    return []


def _rejected(result: Rejected, ctx: MessageContext, is_premium: bool) -> List[OutboundEvent]:
    logger.debug(
        "Chat %s: %s rejected for user %s",
        ctx.chat_id,
        result.error.value,
        ctx.sender.user_id,
    )
    return outcomes.rejected(result, ctx.message_id, ctx.sender.first_name, is_premium)


def handle_commands(
    ctx: MessageContext,
    commands: Iterable[str],
    directory: SessionDirectory,
    premium: PremiumLookup,
    rng: Optional[random.Random] = None,
    bot_username: Optional[str] = None,
) -> List[OutboundEvent]:
    """
    Run every command of one group message against the chat's session.

    All commands are applied under a single hold of the session, in message
    order. Unknown commands, commands addressed to another bot and messages
    without a sender produce nothing.
    """

    if ctx.sender is None:
        return []

    names = [
        name
        for name in (normalize_command(token, bot_username) for token in commands)
        if name
    ]
    if not names:
        return []

    # Resolved before taking the session so the lookup never runs under its lock.
    sender_is_premium = premium.is_premium(ctx.sender.username) if JOIN in names else False

    events: List[OutboundEvent] = []
    with directory.session(ctx.chat_id) as handle:
        for name in names:
            events.extend(_dispatch(handle, ctx, name, sender_is_premium, rng))
    return events


def handle_command(
    ctx: MessageContext,
    command: str,
    directory: SessionDirectory,
    premium: PremiumLookup,
    rng: Optional[random.Random] = None,
    bot_username: Optional[str] = None,
) -> List[OutboundEvent]:
    return handle_commands(ctx, [command], directory, premium, rng, bot_username)


def handle_dice(
    ctx: MessageContext,
    value: int,
    directory: SessionDirectory,
    is_standard_die: bool = True,
    is_forwarded: bool = False,
) -> List[OutboundEvent]:
    """
    Apply a die roll posted in a group chat.

    Only live rolls of the regular six-sided die count: other dice-like
    animations and forwarded rolls are ignored. Rolls that the game refuses
    (not started, not the sender's turn) are ignored silently so that
    casual rolling doesn't flood the chat.
    """

    if ctx.sender is None or not is_standard_die or is_forwarded:
        return []

    sender = ctx.sender
    with directory.session(ctx.chat_id) as handle:
        is_premium = handle.state.is_premium
        state, result = engine.roll_die(
            handle.state, sender.user_id, value, sender.first_name
        )

        if result is None:
            logger.warning("Chat %s: ignoring die value %r", ctx.chat_id, value)
            return []

        if isinstance(result, Rejected):
            logger.debug(
                "Chat %s: roll by %s ignored (%s)",
                ctx.chat_id,
                sender.user_id,
                result.error.value,
            )
            return []

        if isinstance(result, engine.RoundFinished):
            # The winning state is never stored: the next holder sees a new lobby.
            handle.state = engine.reset(state)
            logger.info(
                "Chat %s: %s won with %d points",
                ctx.chat_id,
                result.winner.name,
                result.winner.score,
            )
            return outcomes.round_finished(result, is_premium)

        handle.state = state

    if isinstance(result, engine.TurnLost):
        return outcomes.turn_lost(result, ctx.message_id, sender.first_name, is_premium)
    return outcomes.continued(result, ctx.message_id)


def confirm_reset(
    chat_id: int,
    message_id: int,
    data: Optional[str],
    directory: SessionDirectory,
) -> List[OutboundEvent]:
    """
    Handle a press on the reset confirmation button.

    The chat's session is replaced by an empty lobby and the confirmation
    message is edited to say so, dropping its button. Chats the bot has no
    session for are left alone.
    """

    if data != RESET_PAYLOAD:
        return []

    with directory.existing(chat_id) as handle:
        if handle is None:
            return []
        is_premium = handle.state.is_premium
        handle.state = engine.reset(handle.state)

    logger.info("Chat %s: game reset", chat_id)
    return outcomes.reset_done(message_id, is_premium)
