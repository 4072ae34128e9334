"""Background jobs (started once per Application)."""
from __future__ import annotations

import asyncio
import logging
import time

from telegram.ext import Application

from . import config
from .models.bot_state import BOT_STATE_KEY, BotState

logger = logging.getLogger(__name__)

_TASK_STATION_REFRESH = "station_refresh"


def ensure_started(app: Application) -> None:
    state = _get_state(app)
    task = state.tasks.get(_TASK_STATION_REFRESH)
    if isinstance(task, asyncio.Task) and not task.done():
        return
    state.tasks[_TASK_STATION_REFRESH] = asyncio.create_task(
        _station_refresh_loop(app, config.POLL_INTERVAL_S)
    )


def _get_state(app: Application) -> BotState:
    return app.bot_data.setdefault(BOT_STATE_KEY, BotState())


async def run_refresh_cycle(state: BotState) -> None:
    """Offer every registered model one refresh. Each model's scheduler
    decides whether a fetch actually happens."""
    outcomes = await asyncio.to_thread(state.registry.refresh_all)
    state.record_cycle(outcomes)


async def _station_refresh_loop(app: Application, interval_s: float) -> None:
    logger.info("Starting station refresh loop (interval=%ss)", interval_s)
    while True:
        try:
            start = time.monotonic()
            await run_refresh_cycle(_get_state(app))
            elapsed = time.monotonic() - start
            await asyncio.sleep(max(0.0, interval_s - elapsed))
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Station refresh loop error")
            await asyncio.sleep(interval_s)
