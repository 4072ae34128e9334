from __future__ import annotations

import asyncio
import logging

from telegram.constants import ParseMode

from .. import view
from .common import get_state, guard, reply_unknown_station, resolve_model

logger = logging.getLogger(__name__)


async def cmd_conditions(update, context) -> None:
    if not await guard(update, context):
        return
    state = get_state(context.application)
    found = resolve_model(state, context.args)
    if found is None:
        await reply_unknown_station(update, state, context.args)
        return
    _, model = found
    await update.message.reply_text(
        view.render_conditions(model), parse_mode=ParseMode.HTML
    )


async def cmd_sources(update, context) -> None:
    if not await guard(update, context):
        return
    state = get_state(context.application)
    msg = view.render_sources(state.registry.items(), state.last_outcomes)
    for part in view.chunk(msg):
        await update.message.reply_text(part, parse_mode=ParseMode.HTML)


async def cmd_refresh(update, context) -> None:
    if not await guard(update, context):
        return
    state = get_state(context.application)
    found = resolve_model(state, context.args)
    if found is None:
        await reply_unknown_station(update, state, context.args)
        return
    key, model = found
    try:
        outcome = await asyncio.to_thread(model.refresh)
    except Exception as e:
        logger.exception("Manual refresh of %s failed", key)
        await update.message.reply_text(f"❌ Error: {e}")
        return
    state.last_outcomes[key] = outcome
    lines = [view.render_refresh_result(key, outcome), "", view.render_conditions(model)]
    await update.message.reply_text("\n".join(lines), parse_mode=ParseMode.HTML)
