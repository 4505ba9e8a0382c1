import logging

import config
from infrastructure.files.premium_lookup_json import JsonPremiumLookup, NoPremiumLookup
from infrastructure.memory.session_directory_memory import InMemorySessionDirectory
from interfaces.telegram.handlers import create_telegram_bot
from interfaces.telegram.webhook import create_webhook_app
from logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    if not config.BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN environment variable is not set.")

    setup_logging(config.LOG_LEVEL)

    directory = InMemorySessionDirectory()
    if config.PREMIUM_USERS_FILE:
        premium = JsonPremiumLookup(config.PREMIUM_USERS_FILE)
    else:
        premium = NoPremiumLookup()

    if config.WEBHOOK_MODE:
        # Flask's threaded server gives one thread per update.
        bot = create_telegram_bot(
            config.BOT_TOKEN,
            directory,
            premium,
            threaded=False,
            bot_username=config.BOT_USERNAME,
        )
        app = create_webhook_app(bot, config.WEBHOOK_SECRET)
        logger.info("Serving webhook on %s:%s", config.WEBHOOK_HOST, config.WEBHOOK_PORT)
        app.run(host=config.WEBHOOK_HOST, port=config.WEBHOOK_PORT, threaded=True)
    else:
        bot = create_telegram_bot(
            config.BOT_TOKEN, directory, premium, bot_username=config.BOT_USERNAME
        )
        logger.info("Starting long polling")
        bot.infinity_polling()


if __name__ == "__main__":
    main()
