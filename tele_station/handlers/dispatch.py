"""Dispatch layer: applies rate limiting then calls the real handlers."""

from __future__ import annotations

from .common import rate_limit
from . import meta, station


# Meta
cmd_start = rate_limit(meta.cmd_start, name="start")
cmd_help = rate_limit(meta.cmd_help, name="help")
cmd_whoami = rate_limit(meta.cmd_whoami, name="whoami")

# Station
cmd_conditions = rate_limit(station.cmd_conditions, name="conditions")
cmd_sources = rate_limit(station.cmd_sources, name="sources")
cmd_refresh = rate_limit(station.cmd_refresh, name="refresh")
