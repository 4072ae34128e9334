"""Shared handler helpers: auth guard, rate limit, station lookup."""

from __future__ import annotations

import functools
import html
import logging
import time
from typing import TYPE_CHECKING, Callable

from telegram.constants import ParseMode

from .. import config
from ..models.bot_state import BOT_STATE_KEY, BotState
from ..station import RemoteDataModel

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from telegram import Update
    from telegram.ext import ContextTypes


# Global rate limit (seconds) for all commands.
_last_command_ts = 0.0


def get_state(app) -> BotState:
    """Retrieve or initialize the bot state from application data."""
    return app.bot_data.setdefault(BOT_STATE_KEY, BotState())


def allowed(update: "Update") -> bool:
    """Check if the update sender is authorized to use the bot.

    Note:
        Returns False if ALLOWED_CHAT_IDS is empty or update has no chat.
    """
    if not config.ALLOWED:
        return False
    if not update.effective_chat:
        return False
    chat_id = update.effective_chat.id
    effective_user = getattr(update, "effective_user", None)
    user_id = getattr(effective_user, "id", None)
    # Allow only private chats where chat_id == user_id and user is on the allowlist.
    if user_id is None:
        return chat_id in config.ALLOWED
    return chat_id == user_id and user_id in config.ALLOWED


async def guard(update: "Update", context: "ContextTypes.DEFAULT_TYPE") -> bool:
    """Check authorization before executing commands.

    Sends an unauthorized message on failure.
    """
    if allowed(update):
        return True
    if update and update.effective_chat:
        await update.effective_chat.send_message("⛔ Not authorized")
    return False


def rate_limit(func: Callable, name: str | None = None) -> Callable:
    """Enforce the global RATE_LIMIT_S between any two commands."""

    command_name = name or func.__name__.removeprefix("cmd_")

    @functools.wraps(func)
    async def wrapper(
        update: "Update", context: "ContextTypes.DEFAULT_TYPE", *args, **kwargs
    ):
        global _last_command_ts
        now = time.monotonic()
        elapsed = now - _last_command_ts

        if elapsed < config.RATE_LIMIT_S:
            logger.debug("rate-limited /%s", command_name)
            try:
                if update and getattr(update, "effective_message", None):
                    await update.effective_message.reply_text(
                        f"⏱ Rate limit: please wait {config.RATE_LIMIT_S - elapsed:.1f}s",
                    )
            except Exception as e:
                logger.debug("rate-limit notice failed to send: %s", e)
            return

        _last_command_ts = now
        return await func(update, context, *args, **kwargs)

    return wrapper


def resolve_model(
    state: BotState, args: list[str] | None
) -> tuple[str, RemoteDataModel] | None:
    """Pick the station named in ``args``, or the only/first one."""
    name = " ".join(args or []).strip()
    if name:
        for key, model in state.registry.items():
            if key.lower() == name.lower():
                return key, model
        return None
    items = state.registry.items()
    return items[0] if items else None


async def reply_unknown_station(update: "Update", state: BotState, args) -> None:
    names = state.registry.keys()
    if not names:
        await update.message.reply_text(
            "<i>No station sources configured.</i>", parse_mode=ParseMode.HTML
        )
        return
    hint = "\n".join(f"• <code>{html.escape(n)}</code>" for n in names)
    wanted = html.escape(" ".join(args or []))
    await update.message.reply_text(
        f"Unknown station <code>{wanted}</code>.\n<i>Available:</i>\n{hint}",
        parse_mode=ParseMode.HTML,
    )
