"""Entrypoint for running the station bot from the package.

This module builds the model registry from configuration, wires up the
Application, registers handlers and runs polling.
"""

from __future__ import annotations

import logging

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from .logger import setup_logging
from . import config
from .commands import COMMANDS
from .handlers import dispatch
from .models.bot_state import BOT_STATE_KEY, BotState
from .background import ensure_started
from .registry import build_registry

logger = logging.getLogger(__name__)


def build_state() -> BotState:
    registry = build_registry(
        config.SOURCES,
        fetch_timeout_s=config.FETCH_TIMEOUT_S,
        reset_before_fetch=config.RESET_BEFORE_FETCH,
        max_backoff_s=config.MAX_BACKOFF_S,
    )
    return BotState(registry=registry)


def build_application() -> Application:
    if config.TOKEN is None:
        raise RuntimeError("BOT_TOKEN environment variable is not set")

    app = Application.builder().token(config.TOKEN).build()

    app.bot_data[BOT_STATE_KEY] = build_state()

    for spec in COMMANDS:
        fn = getattr(dispatch, spec.handler)
        triggers = [spec.name, *spec.aliases]
        app.add_handler(CommandHandler(triggers, fn))

    return app


async def register_bot_commands(app: Application) -> None:
    """Register bot commands for Telegram autocomplete."""
    try:
        bot_commands = [BotCommand(spec.name, spec.description) for spec in COMMANDS]
        await app.bot.set_my_commands(bot_commands)
        logger.info("Registered %d commands for autocomplete", len(bot_commands))
    except Exception as e:
        logger.warning("Failed to register bot commands: %s", e)


async def post_init(app: Application) -> None:
    try:
        ensure_started(app)
    except Exception as e:
        logger.warning("Failed to start background tasks: %s", e)
    await register_bot_commands(app)


def run() -> None:
    setup_logging()
    logger.info("Starting tele_station with %d source(s)", len(config.SOURCES))
    app = build_application()

    app.post_init = post_init

    # run polling; keep the stop_signals None so container shutdown behaves normally
    app.run_polling(stop_signals=None)


if __name__ == "__main__":
    run()
