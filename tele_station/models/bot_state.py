"""Bot runtime state (model registry, background tasks, refresh history)."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from ..registry import ModelRegistry
from ..station import RefreshOutcome

logger = logging.getLogger(__name__)

BOT_STATE_KEY = "station_state"


@dataclass
class BotState:
    """Runtime state shared by handlers and the background refresh loop."""

    registry: ModelRegistry = field(default_factory=ModelRegistry)
    tasks: dict[str, object] = field(default_factory=dict)

    # key -> outcome of the most recent refresh cycle
    last_outcomes: dict[str, RefreshOutcome] = field(default_factory=dict)
    last_cycle_ts: float | None = None
    cycles: int = 0

    def record_cycle(self, outcomes: dict[str, RefreshOutcome]) -> None:
        self.last_outcomes.update(outcomes)
        self.last_cycle_ts = time.time()
        self.cycles += 1
        failed = [k for k, v in outcomes.items() if v is RefreshOutcome.FAILED]
        if failed:
            logger.debug("Refresh cycle %d failures: %s", self.cycles, ", ".join(failed))
