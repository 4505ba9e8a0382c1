from __future__ import annotations

import logging
import random
import threading
from typing import List, Optional

import requests
import telebot
from telebot.apihelper import ApiException
from telebot.types import InlineKeyboardButton, InlineKeyboardMarkup
from telebot.util import content_type_media

from application.outcomes import EditMessage, InlineChoice, OutboundEvent
from application.services import (
    MessageContext,
    Sender,
    confirm_reset,
    greet,
    handle_commands,
    handle_dice,
)
from domain.repositories import PremiumLookup, SessionDirectory
from interfaces.telegram.callback_data import parse_callback

logger = logging.getLogger(__name__)

GROUP_CHAT_TYPES = ["group", "supergroup"]
STANDARD_DIE_EMOJI = "\U0001F3B2"


def _build_sender(user) -> Optional[Sender]:
    """Extract a channel-agnostic sender from a Telegram user."""

    if user is None:
        return None
    return Sender(
        user_id=user.id,
        first_name=user.first_name or "",
        username=user.username,
    )


def _build_message_context(message) -> MessageContext:
    return MessageContext(
        chat_id=message.chat.id,
        message_id=message.message_id,
        sender=_build_sender(message.from_user),
    )


def extract_commands(message) -> List[str]:
    """
    Return every bot command in the message, in order.

    Telegram reports entity offsets in UTF-16 code units, so the text is
    sliced in that encoding.
    """

    text = message.text or ""
    entities = message.entities or []
    encoded = text.encode("utf-16-le")
    commands = []
    for entity in entities:
        if entity.type != "bot_command":
            continue
        start = entity.offset * 2
        end = (entity.offset + entity.length) * 2
        commands.append(encoded[start:end].decode("utf-16-le"))
    return commands


def is_forwarded(message) -> bool:
    return (
        getattr(message, "forward_origin", None) is not None
        or getattr(message, "forward_date", None) is not None
    )


def build_markup(choice: Optional[InlineChoice]) -> Optional[InlineKeyboardMarkup]:
    if choice is None:
        return None
    markup = InlineKeyboardMarkup()
    for row in choice.rows:
        buttons = [
            InlineKeyboardButton(label, callback_data=payload) for label, payload in row
        ]
        if buttons:
            markup.row(*buttons)
    return markup


def deliver(bot: telebot.TeleBot, chat_id: int, event: OutboundEvent) -> None:
    """
    Send or edit one message. Failures are logged, never raised: by now the
    game state has already changed and there is nothing to roll back.
    """

    markup = build_markup(event.choice)
    try:
        if isinstance(event, EditMessage):
            bot.edit_message_text(
                event.text,
                chat_id=chat_id,
                message_id=event.message_id,
                reply_markup=markup,
            )
        else:
            bot.send_message(
                chat_id,
                event.text,
                reply_to_message_id=event.reply_to_message_id,
                reply_markup=markup,
            )
    except ApiException as exc:
        logger.error("Telegram API call was not successful for chat %s: %s", chat_id, exc)
    except requests.exceptions.RequestException as exc:
        logger.error("Can not send a request to Telegram for chat %s: %s", chat_id, exc)


def deliver_all(bot: telebot.TeleBot, chat_id: int, events: List[OutboundEvent]) -> None:
    for event in events:
        deliver(bot, chat_id, event)


def create_telegram_bot(
    bot_token: str,
    directory: SessionDirectory,
    premium: PremiumLookup,
    rng: Optional[random.Random] = None,
    threaded: bool = True,
    bot_username: Optional[str] = None,
) -> telebot.TeleBot:
    """
    Configure and return a TeleBot instance wired to the application layer.

    This module contains only Telegram-specific concerns: parsing Telegram
    messages/callbacks and mapping them to/from application services.
    Messages are delivered only after the chat's session has been released.

    Commands suffixed with another bot's name are ignored. When
    `bot_username` isn't given it is fetched with `get_me` on first use.
    """

    bot = telebot.TeleBot(bot_token, threaded=threaded)
    username_lock = threading.Lock()
    resolved = {"username": bot_username}

    def own_username() -> Optional[str]:
        with username_lock:
            if resolved["username"] is None:
                resolved["username"] = bot.get_me().username
            return resolved["username"]

    @bot.message_handler(
        chat_types=GROUP_CHAT_TYPES,
        func=lambda message: bool(extract_commands(message)),
    )
    def handle_group_commands(message):
        ctx = _build_message_context(message)
        events = handle_commands(
            ctx, extract_commands(message), directory, premium, rng, own_username()
        )
        deliver_all(bot, ctx.chat_id, events)

    @bot.message_handler(chat_types=GROUP_CHAT_TYPES, content_types=["dice"])
    def handle_group_dice(message):
        ctx = _build_message_context(message)
        events = handle_dice(
            ctx,
            message.dice.value,
            directory,
            is_standard_die=message.dice.emoji == STANDARD_DIE_EMOJI,
            is_forwarded=is_forwarded(message),
        )
        deliver_all(bot, ctx.chat_id, events)

    @bot.message_handler(chat_types=["private"], content_types=content_type_media)
    def handle_private(message):
        events = greet(_build_sender(message.from_user), premium)
        deliver_all(bot, message.chat.id, events)

    @bot.callback_query_handler(func=lambda call: call.message is not None)
    def handle_callback(call):
        try:
            data = parse_callback(call.data or "")
        except ValueError:
            bot.answer_callback_query(call.id, "Invalid selection.")
            return

        chat_id = call.message.chat.id
        events = confirm_reset(chat_id, call.message.message_id, data, directory)
        deliver_all(bot, chat_id, events)
        bot.answer_callback_query(call.id)

    return bot
