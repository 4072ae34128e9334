"""Refresh gating for remote data sources.

A ``RefreshScheduler`` decides whether a source may attempt a fetch now,
based on its expiration period and the outcome of previous attempts. It
never fetches anything itself; the owner records each attempt through
``update_successful()`` or ``update_failed()``.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Time gate for one data source.

    Args:
        expiration_period_s: Minimum seconds between fetch attempts.
            Zero means every call is eligible.
        allow_immediate_first_attempt: Let the very first check pass
            without waiting a full period.
        max_backoff_s: Optional cap enabling exponential backoff after
            consecutive failures. ``None`` keeps the fixed period.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        expiration_period_s: float,
        allow_immediate_first_attempt: bool = True,
        *,
        max_backoff_s: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if expiration_period_s < 0:
            raise ConfigurationError(
                f"expiration period must be >= 0, got {expiration_period_s}",
                details={"expiration_period_s": expiration_period_s},
            )
        if max_backoff_s is not None and max_backoff_s < 0:
            raise ConfigurationError(
                f"max backoff must be >= 0, got {max_backoff_s}",
                details={"max_backoff_s": max_backoff_s},
            )
        self._period = float(expiration_period_s)
        self._allow_first = allow_immediate_first_attempt
        self._max_backoff = max_backoff_s
        self._clock = clock
        self._created_at = clock()
        self._last_attempt_at: float | None = None
        self._last_success_at: float | None = None
        self._failures = 0

    @classmethod
    def from_minutes(
        cls,
        expiration_minutes: float,
        allow_immediate_first_attempt: bool = True,
        **kwargs,
    ) -> "RefreshScheduler":
        if expiration_minutes < 0:
            raise ConfigurationError(
                f"expiration period must be >= 0 minutes, got {expiration_minutes}",
                details={"expiration_minutes": expiration_minutes},
            )
        return cls(expiration_minutes * 60.0, allow_immediate_first_attempt, **kwargs)

    @property
    def expiration_period_s(self) -> float:
        return self._period

    @property
    def allow_immediate_first_attempt(self) -> bool:
        return self._allow_first

    @property
    def last_attempt_at(self) -> float | None:
        return self._last_attempt_at

    @property
    def last_success_at(self) -> float | None:
        return self._last_success_at

    @property
    def consecutive_failures(self) -> int:
        return self._failures

    def effective_period_s(self) -> float:
        """Period currently applied, including any failure backoff."""
        if self._max_backoff is None or self._failures == 0:
            return self._period
        backoff = min(self._max_backoff, self._period * (2 ** (self._failures - 1)))
        return max(self._period, backoff)

    def next_attempt_at(self) -> float:
        if self._last_attempt_at is None:
            if self._allow_first:
                return self._created_at
            return self._created_at + self._period
        return self._last_attempt_at + self.effective_period_s()

    def seconds_until_next_attempt(self) -> float:
        return max(0.0, self.next_attempt_at() - self._clock())

    def should_update_now(self) -> bool:
        """Return True if a fetch attempt is allowed now. Never mutates state."""
        if self._period == 0:
            return True
        if self._last_attempt_at is None and self._allow_first:
            return True
        return self._clock() >= self.next_attempt_at()

    def update_successful(self) -> None:
        now = self._clock()
        self._last_attempt_at = now
        self._last_success_at = now
        self._failures = 0

    def update_failed(self) -> None:
        self._last_attempt_at = self._clock()
        self._failures += 1
        logger.debug(
            "Attempt failed (%d consecutive), next attempt in %.0fs",
            self._failures,
            self.effective_period_s(),
        )


__all__ = ["RefreshScheduler"]
