"""Central configuration for tele_station."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Set, List

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

_DEFAULT_EXPIRATION_MIN = 10


@dataclass(frozen=True)
class SourceConfig:
    """One station endpoint as configured."""

    name: str
    url: str
    expiration_minutes: int = _DEFAULT_EXPIRATION_MIN


def _split_ints(s: str) -> Set[int]:
    """Parse comma-separated string into a set of integers.

    Example:
        >>> _split_ints("123,456,invalid,789")
        {123, 456, 789}
    """
    out = set()
    for part in (s or "").split(","):
        p = part.strip()
        if p.isdigit():
            out.add(int(p))
    return out


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


def _parse_minutes(raw: str, default: int) -> int:
    raw = (raw or "").strip()
    if not raw:
        return default
    try:
        minutes = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"invalid expiration minutes: {raw!r}") from e
    if minutes < 0:
        raise ConfigurationError(
            f"expiration minutes must be >= 0, got {minutes}",
            details={"expiration_minutes": minutes},
        )
    return minutes


def parse_sources(
    raw: str,
    default_minutes: int = _DEFAULT_EXPIRATION_MIN,
) -> List[SourceConfig]:
    """Parse ``name|url[|minutes]`` entries separated by ``;``.

    Args:
        raw: Raw STATION_SOURCES value.
        default_minutes: Expiration period for entries without one.

    Returns:
        List of SourceConfig in declaration order.

    Raises:
        ConfigurationError: On malformed entries or negative periods.

    Example:
        >>> parse_sources("Red Cedars|http://wx.local/data.json|5")
        [SourceConfig(name='Red Cedars', url='http://wx.local/data.json', expiration_minutes=5)]
    """
    out: List[SourceConfig] = []
    for entry in (raw or "").split(";"):
        entry = entry.strip()
        if not entry:
            continue
        parts = [p.strip() for p in entry.split("|")]
        if len(parts) not in (2, 3) or not parts[0] or not parts[1]:
            raise ConfigurationError(f"invalid station source entry: {entry!r}")
        minutes = _parse_minutes(parts[2] if len(parts) == 3 else "", default_minutes)
        out.append(SourceConfig(name=parts[0], url=parts[1], expiration_minutes=minutes))
    return out


@dataclass
class Settings:
    """Configuration settings for tele_station.

    All settings are loaded from environment variables with sensible defaults.
    """

    BOT_TOKEN: str | None
    ALLOWED_CHAT_IDS: Set[int]
    RATE_LIMIT_S: float
    SOURCES: List[SourceConfig]
    EXPIRATION_PERIOD_MIN: int
    FETCH_TIMEOUT_S: float
    POLL_INTERVAL_S: float
    RESET_BEFORE_FETCH: bool
    MAX_BACKOFF_S: float | None


def _read_settings() -> Settings:
    """Read all configuration from environment variables.

    Note:
        Invalid numeric values fall back to defaults. A malformed
        STATION_SOURCES entry or a negative expiration period raises
        ConfigurationError.
    """
    token = os.environ.get("BOT_TOKEN") or None
    allowed = _split_ints(os.environ.get("ALLOWED_CHAT_IDS", ""))
    rate_limit = _float_env("RATE_LIMIT_S", 1.0)

    expiration_min = _parse_minutes(
        os.environ.get("EXPIRATION_PERIOD_MIN", ""), _DEFAULT_EXPIRATION_MIN
    )
    sources = parse_sources(os.environ.get("STATION_SOURCES", ""), expiration_min)
    single_url = (os.environ.get("STATION_URL") or "").strip()
    if single_url:
        name = (os.environ.get("STATION_NAME") or "").strip() or "Station"
        sources.append(SourceConfig(name, single_url, expiration_min))

    fetch_timeout = _float_env("FETCH_TIMEOUT_S", 10.0)
    poll_interval = _float_env("POLL_INTERVAL_S", 30.0)
    reset_before_fetch = _bool_env("RESET_BEFORE_FETCH", False)

    max_backoff_min = _float_env("MAX_BACKOFF_MIN", 0.0)
    max_backoff = max_backoff_min * 60.0 if max_backoff_min > 0 else None

    return Settings(
        BOT_TOKEN=token,
        ALLOWED_CHAT_IDS=allowed,
        RATE_LIMIT_S=rate_limit,
        SOURCES=sources,
        EXPIRATION_PERIOD_MIN=expiration_min,
        FETCH_TIMEOUT_S=fetch_timeout,
        POLL_INTERVAL_S=poll_interval,
        RESET_BEFORE_FETCH=reset_before_fetch,
        MAX_BACKOFF_S=max_backoff,
    )


settings = _read_settings()


def validate_settings() -> None:
    """Log warnings for missing or suspicious configuration."""
    if settings.BOT_TOKEN is None:
        logger.error("BOT_TOKEN environment variable is not set")
    if not settings.ALLOWED_CHAT_IDS:
        logger.warning(
            "ALLOWED_CHAT_IDS is empty; guarded commands will be unauthorized."
        )
    if not settings.SOURCES:
        logger.warning("No station sources configured (STATION_SOURCES/STATION_URL)")
    if settings.RESET_BEFORE_FETCH:
        logger.info("RESET_BEFORE_FETCH enabled; failed fetches show empty readings")


# Exported constants
TOKEN: str | None = settings.BOT_TOKEN
ALLOWED: set[int] = settings.ALLOWED_CHAT_IDS
RATE_LIMIT_S: float = settings.RATE_LIMIT_S
SOURCES: list[SourceConfig] = settings.SOURCES
FETCH_TIMEOUT_S: float = settings.FETCH_TIMEOUT_S
POLL_INTERVAL_S: float = settings.POLL_INTERVAL_S
RESET_BEFORE_FETCH: bool = settings.RESET_BEFORE_FETCH
MAX_BACKOFF_S: float | None = settings.MAX_BACKOFF_S

validate_settings()
