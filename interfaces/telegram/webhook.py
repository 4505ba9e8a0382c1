from __future__ import annotations

import logging
from typing import Optional

import telebot
from flask import Flask, abort, request

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def create_webhook_app(
    bot: telebot.TeleBot, secret_token: Optional[str] = None
) -> Flask:
    """
    Flask app that receives Telegram webhook updates and hands them to `bot`.

    When `secret_token` is set, requests without the matching
    `X-Telegram-Bot-Api-Secret-Token` header are refused.
    """

    app = Flask(__name__)

    @app.route("/", methods=["POST"])
    def receive_update():
        if secret_token and request.headers.get(SECRET_HEADER) != secret_token:
            abort(403)
        if not request.is_json:
            abort(415)

        update = telebot.types.Update.de_json(request.get_data(as_text=True))
        if update is None:
            abort(400)
        bot.process_new_updates([update])
        return ""

    @app.route("/health", methods=["GET"])
    def health():
        return {"status": "ok"}

    return app
