"""HTTP retrieval of station envelopes."""

from __future__ import annotations

import logging
from typing import Any

import requests

from .errors import FetchFailure

__all__ = ["fetch_document", "DEFAULT_TIMEOUT_S"]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0
_HEADERS = {"Accept": "application/json", "User-Agent": "tele_station/1.0"}


def fetch_document(url: str, timeout_s: float = DEFAULT_TIMEOUT_S) -> dict[str, Any]:
    """Fetch and decode a station envelope.

    Args:
        url: Source endpoint returning ``{"data": [...]}``.
        timeout_s: Connect/read timeout in seconds.

    Returns:
        The decoded JSON object.

    Raises:
        FetchFailure: On transport errors, timeouts, HTTP error statuses,
            non-JSON bodies or a body without a ``data`` list.
    """
    try:
        resp = requests.get(url, headers=_HEADERS, timeout=timeout_s)
    except requests.exceptions.Timeout as e:
        raise FetchFailure(f"timed out after {timeout_s}s", url=url) from e
    except requests.exceptions.RequestException as e:
        raise FetchFailure(f"request failed: {e}", url=url) from e

    if not resp.ok:
        raise FetchFailure(
            f"HTTP {resp.status_code}", url=url, status_code=resp.status_code
        )

    try:
        data = resp.json()
    except ValueError as e:
        raise FetchFailure("response is not valid JSON", url=url) from e

    if not isinstance(data, dict):
        raise FetchFailure(
            f"expected a JSON object, got {type(data).__name__}", url=url
        )
    if not isinstance(data.get("data"), list):
        raise FetchFailure("envelope has no 'data' list", url=url)

    logger.debug("Fetched %d records from %s", len(data["data"]), url)
    return data
