"""Command registry (single source of truth for help + wiring)."""

from __future__ import annotations

from .models.command_spec import CommandSpec, Group


_STATION_COMMANDS = (
    CommandSpec(
        "conditions",
        "Station",
        "/conditions [station]",
        "latest readings, pressure trend and forecast",
        "cmd_conditions",
        aliases=("weather", "wx"),
    ),
    CommandSpec(
        "sources",
        "Station",
        "/sources",
        "configured stations and refresh status",
        "cmd_sources",
    ),
    CommandSpec(
        "refresh",
        "Station",
        "/refresh [station]",
        "refresh now if the expiration period allows it",
        "cmd_refresh",
    ),
)

_INFO_COMMANDS = (
    CommandSpec("start", "Info", "/start", "show help", "cmd_start"),
    CommandSpec("help", "Info", "/help", "this menu", "cmd_help"),
    CommandSpec("whoami", "Info", "/whoami", "show chat and user info", "cmd_whoami"),
)



COMMANDS: tuple[CommandSpec, ...] = (
    *_INFO_COMMANDS,
    *_STATION_COMMANDS,
)


GROUP_ORDER: tuple[Group, ...] = (
    "Station",
    "Info",
)
