"""Logging setup for the station bot.

One stream handler on the root logger, level from ``LOG_LEVEL``. The
HTTP clients used for station fetches (urllib3) and Telegram polling
(httpx, httpcore, telegram) are held at WARNING so per-cycle refresh
summaries from ``tele_station.station`` stay readable.
"""
import logging
import os


def setup_logging() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)

    # Station polling and Telegram long-polling are chatty at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("telegram").setLevel(logging.WARNING)


__all__ = ["setup_logging"]
