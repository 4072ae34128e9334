"""Station reading dataclasses and record kinds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SENTINEL_FLOAT = 0.0
SENTINEL_TEXT = ""


class RecordKind(str, Enum):
    OUTSIDE_TEMP = "outsideTemp"
    INSIDE_TEMP = "insideTemp"
    BASEMENT_TEMP = "basementTemp"
    PRESSURE = "pressure"


class Trend(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STEADY = "steady"


@dataclass(frozen=True)
class StationReadings:
    """Point-in-time copy of a model's cached fields."""

    outside_temp: float = SENTINEL_FLOAT
    inside_temp: float = SENTINEL_FLOAT
    basement_temp: float = SENTINEL_FLOAT
    pressure: float = SENTINEL_FLOAT
    previous_pressure: float = SENTINEL_FLOAT
    data_time: str = SENTINEL_TEXT
    updated_at: float | None = None

    @property
    def trend(self) -> Trend:
        return classify_trend(self.pressure, self.previous_pressure)


def classify_trend(pressure: float, previous_pressure: float) -> Trend:
    """Compare current pressure against the previous fetch's value."""
    if previous_pressure == SENTINEL_FLOAT or pressure == previous_pressure:
        return Trend.STEADY
    if pressure > previous_pressure:
        return Trend.RISING
    return Trend.FALLING
