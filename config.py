"""Process configuration, read from the environment (and `.env`)."""

import os

from dotenv import load_dotenv

load_dotenv()

# Required; checked at startup in telegram_main.
BOT_TOKEN = os.environ.get("BOT_TOKEN")

# Without "@"; looked up with getMe when unset. Commands addressed to other
# bots (/join@otherbot) are ignored.
BOT_USERNAME = os.environ.get("BOT_USERNAME") or None

# Optional JSON file: {"usernames": ["alice", "bob"]}
PREMIUM_USERS_FILE = os.environ.get("PREMIUM_USERS_FILE")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Webhook mode serves Telegram updates over HTTP instead of long polling.
WEBHOOK_MODE = os.environ.get("WEBHOOK_MODE", "").lower() in ("1", "true", "yes")
WEBHOOK_HOST = os.environ.get("WEBHOOK_HOST", "127.0.0.1")
WEBHOOK_PORT = int(os.environ.get("WEBHOOK_PORT", "32926"))
WEBHOOK_SECRET = os.environ.get("WEBHOOK_SECRET") or None
