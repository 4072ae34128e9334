"""Remote station data model: gate, fetch, parse and cache readings."""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import replace
from enum import Enum
from typing import Any, Callable

from .errors import FetchFailure, RecordParseFailure
from .fetch import DEFAULT_TIMEOUT_S, fetch_document
from .models.readings import (
    SENTINEL_FLOAT,
    RecordKind,
    StationReadings,
    Trend,
)
from .scheduler import RefreshScheduler

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, float], dict[str, Any]]


class RefreshOutcome(str, Enum):
    UPDATED = "updated"
    FAILED = "failed"
    SKIPPED = "skipped"
    BUSY = "busy"


def _require_float(record: dict[str, Any], key: str) -> float:
    if key not in record:
        raise RecordParseFailure(f"missing '{key}'", record=record)
    value = record[key]
    if isinstance(value, bool):
        raise RecordParseFailure(f"'{key}' is not a number: {value!r}", record=record)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise RecordParseFailure(
            f"'{key}' is not a number: {value!r}", record=record
        ) from e
    if not math.isfinite(number):
        raise RecordParseFailure(f"'{key}' is not finite: {value!r}", record=record)
    return number


def _require_text(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    if value is None:
        raise RecordParseFailure(f"missing '{key}'", record=record)
    return str(value)


def _apply_outside_temp(record: dict[str, Any], fields: dict[str, Any]) -> None:
    temperature = _require_float(record, "temperature")
    data_time = _require_text(record, "time")
    fields["outside_temp"] = temperature
    fields["data_time"] = data_time


def _apply_inside_temp(record: dict[str, Any], fields: dict[str, Any]) -> None:
    fields["inside_temp"] = _require_float(record, "temperature")


def _apply_basement_temp(record: dict[str, Any], fields: dict[str, Any]) -> None:
    fields["basement_temp"] = _require_float(record, "temperature")


def _apply_pressure(record: dict[str, Any], fields: dict[str, Any]) -> None:
    pressure = _require_float(record, "pressure")
    fields["previous_pressure"] = fields["pressure"]
    fields["pressure"] = pressure


_EXTRACTORS: dict[RecordKind, Callable[[dict[str, Any], dict[str, Any]], None]] = {
    RecordKind.OUTSIDE_TEMP: _apply_outside_temp,
    RecordKind.INSIDE_TEMP: _apply_inside_temp,
    RecordKind.BASEMENT_TEMP: _apply_basement_temp,
    RecordKind.PRESSURE: _apply_pressure,
}


class RemoteDataModel:
    """Cached readings for one named station endpoint.

    ``refresh()`` is the only write path. It asks the scheduler for
    permission, fetches the envelope, parses each record and commits the
    result. Fetch and parse problems are logged and absorbed; callers only
    ever see the last committed readings (sentinels until the first
    successful fetch).

    With ``reset_before_fetch`` the fields are cleared before every
    permitted fetch, so a failed fetch leaves sentinels instead of the
    last known values.
    """

    def __init__(
        self,
        friendly_name: str,
        source_url: str,
        scheduler: RefreshScheduler,
        *,
        fetch_timeout_s: float = DEFAULT_TIMEOUT_S,
        reset_before_fetch: bool = False,
        fetcher: Fetcher | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._friendly_name = friendly_name
        self._source_url = source_url
        self._scheduler = scheduler
        self._fetch_timeout_s = fetch_timeout_s
        self._reset_before_fetch = reset_before_fetch
        self._fetcher: Fetcher = fetcher or fetch_document
        self._clock = clock
        self._lock = threading.Lock()
        self._readings = StationReadings()

    @classmethod
    def create(
        cls,
        friendly_name: str,
        source_url: str,
        expiration_minutes: float,
        *,
        max_backoff_s: float | None = None,
        **kwargs,
    ) -> "RemoteDataModel":
        scheduler = RefreshScheduler.from_minutes(
            expiration_minutes, True, max_backoff_s=max_backoff_s
        )
        return cls(friendly_name, source_url, scheduler, **kwargs)

    def __repr__(self) -> str:
        return f"RemoteDataModel({self._friendly_name!r}, {self._source_url!r})"

    @property
    def friendly_name(self) -> str:
        return self._friendly_name

    @property
    def source_url(self) -> str:
        return self._source_url

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    @property
    def outside_temp(self) -> float:
        return self._readings.outside_temp

    @property
    def inside_temp(self) -> float:
        return self._readings.inside_temp

    @property
    def basement_temp(self) -> float:
        return self._readings.basement_temp

    @property
    def pressure(self) -> float:
        return self._readings.pressure

    @property
    def previous_pressure(self) -> float:
        return self._readings.previous_pressure

    @property
    def data_time(self) -> str:
        return self._readings.data_time

    @property
    def trend(self) -> Trend:
        return self._readings.trend

    def snapshot(self) -> StationReadings:
        return self._readings

    def refresh(self) -> RefreshOutcome:
        """Run one refresh cycle if the scheduler allows it. Never raises
        for fetch or parse problems."""
        if not self._lock.acquire(blocking=False):
            logger.debug("%s: refresh already in progress", self._friendly_name)
            return RefreshOutcome.BUSY
        try:
            return self._refresh_locked()
        finally:
            self._lock.release()

    def _refresh_locked(self) -> RefreshOutcome:
        if not self._scheduler.should_update_now():
            return RefreshOutcome.SKIPPED

        if self._reset_before_fetch:
            self._readings = StationReadings(
                previous_pressure=self._readings.previous_pressure,
                updated_at=self._readings.updated_at,
            )

        try:
            document = self._fetcher(self._source_url, self._fetch_timeout_s)
            records = document.get("data") if isinstance(document, dict) else None
            if not isinstance(records, list):
                raise FetchFailure("envelope has no 'data' list", url=self._source_url)
        except (FetchFailure, OSError, ValueError) as e:
            self._scheduler.update_failed()
            logger.error(
                "Unable to get data for %s: %s (failures=%d)",
                self._friendly_name,
                e,
                self._scheduler.consecutive_failures,
            )
            return RefreshOutcome.FAILED
        self._scheduler.update_successful()

        self._readings = self._parse(records)
        r = self._readings
        logger.info(
            "%s: out: %s, in: %s, cel: %s, Pr: %s, PPr: %s",
            self._friendly_name,
            r.outside_temp,
            r.inside_temp,
            r.basement_temp,
            r.pressure,
            r.previous_pressure,
        )
        return RefreshOutcome.UPDATED

    def _parse(self, records: list[Any]) -> StationReadings:
        current = self._readings
        fields: dict[str, Any] = {
            "pressure": current.pressure,
            "previous_pressure": current.previous_pressure,
        }
        seen_pressure = False
        for record in records:
            try:
                if not isinstance(record, dict):
                    raise RecordParseFailure(
                        f"record is not an object: {record!r}", record=record
                    )
                name = _require_text(record, "name")
                try:
                    kind = RecordKind(name)
                except ValueError:
                    logger.warning(
                        "Unexpected record from %s: %s", self._friendly_name, record
                    )
                    continue
                _EXTRACTORS[kind](record, fields)
                if kind is RecordKind.PRESSURE:
                    seen_pressure = True
            except RecordParseFailure as e:
                logger.error("%s: record parse failure: %s", self._friendly_name, e)

        if not seen_pressure:
            fields["pressure"] = SENTINEL_FLOAT
        return replace(StationReadings(), updated_at=self._clock(), **fields)


__all__ = ["RemoteDataModel", "RefreshOutcome"]
