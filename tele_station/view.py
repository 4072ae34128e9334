"""View layer for formatting Telegram messages (HTML)."""

from __future__ import annotations

import html
import time

from .models.readings import SENTINEL_FLOAT, Trend
from .station import RefreshOutcome, RemoteDataModel

_TREND_ARROWS = {
    Trend.RISING: "▲",
    Trend.FALLING: "▼",
    Trend.STEADY: "-",
}


def bold(text: str) -> str:
    return f"<b>{html.escape(str(text))}</b>"


def code(text: str) -> str:
    return f"<code>{html.escape(str(text))}</code>"


def chunk(msg: str, size: int = 4000) -> list[str]:
    """Split message into chunks ensuring no chunk exceeds size limit."""
    if len(msg) <= size:
        return [msg]

    lines = msg.splitlines()
    chunks: list[str] = []
    current = ""
    for line in lines:
        if len(line) > size:
            if current:
                chunks.append(current)
                current = ""
            start = 0
            while start < len(line):
                chunks.append(line[start : start + size])
                start += size
            continue
        added_length = len(line) + (1 if current else 0)
        if len(current) + added_length > size and current:
            chunks.append(current)
            current = line
        else:
            current = f"{current}\n{line}" if current else line
    if current:
        chunks.append(current)
    return chunks


def trend_arrow(trend: Trend) -> str:
    return _TREND_ARROWS[trend]


def forecast_label(pressure: float) -> str:
    """Barometer-style forecast from pressure in inHg. Empty when unset."""
    if pressure == SENTINEL_FLOAT:
        return ""
    if pressure > 30.6:
        return "Very dry"
    if pressure >= 30.0:
        return "Fair"
    if pressure > 29.0:
        return "Change"
    if pressure > 28.5:
        return "Rain"
    return "Stormy"


def _format_timestamp(ts: float | None) -> str:
    if not ts:
        return "never"
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(ts))


def _format_duration(seconds: float) -> str:
    seconds = int(round(seconds))
    if seconds <= 0:
        return "now"
    m, s = divmod(seconds, 60)
    h, m = divmod(m, 60)
    if h:
        return f"{h}h {m}m"
    if m:
        return f"{m}m {s}s"
    return f"{s}s"


def render_conditions(model: RemoteDataModel) -> str:
    r = model.snapshot()
    forecast = forecast_label(r.pressure)
    lines = [
        bold(f"Conditions at {model.friendly_name}"),
        f"{bold('Outside temp:')} {r.outside_temp}",
        f"{bold('Inside temp:')} {r.inside_temp}",
        f"{bold('Cellar temp:')} {r.basement_temp}",
        f"{bold('Pressure:')} {r.pressure} {trend_arrow(r.trend)}",
        f"{bold('Forecast:')} {html.escape(forecast) if forecast else '-'}",
    ]
    if r.data_time:
        lines.append(f"<i>{html.escape(r.data_time)}</i>")
    if r.updated_at is None:
        lines.append("<i>No data received yet.</i>")
    return "\n".join(lines)


def render_sources(
    entries: list[tuple[str, RemoteDataModel]],
    outcomes: dict[str, RefreshOutcome] | None = None,
) -> str:
    if not entries:
        return "<i>No station sources configured.</i>"

    outcomes = outcomes or {}
    lines = [bold("Stations:")]
    for key, model in entries:
        sched = model.scheduler
        last = outcomes.get(key)
        period_min = sched.expiration_period_s / 60.0
        lines.append(
            f"{code(key)} every {period_min:g}m • "
            f"updated {html.escape(_format_timestamp(model.snapshot().updated_at))} • "
            f"failures {sched.consecutive_failures} • "
            f"next {html.escape(_format_duration(sched.seconds_until_next_attempt()))}"
            + (f" • last {html.escape(last.value)}" if last else "")
        )
    return "\n".join(lines)


def render_refresh_result(name: str, outcome: RefreshOutcome) -> str:
    messages = {
        RefreshOutcome.UPDATED: "✅ Updated",
        RefreshOutcome.FAILED: "❌ Fetch failed",
        RefreshOutcome.SKIPPED: "⏳ Data is still fresh",
        RefreshOutcome.BUSY: "⏳ Refresh already in progress",
    }
    return f"{messages[outcome]}: {code(name)}"
