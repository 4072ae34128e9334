"""Error hierarchy for station refresh, fetch and parse failures."""

from __future__ import annotations

from typing import Any


class StationError(Exception):
    """Base class for tele_station errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def as_dict(self) -> dict[str, Any]:
        """Serializable representation for logs and debug output."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(StationError, ValueError):
    """Invalid construction or configuration parameters."""


class FetchFailure(StationError):
    """Envelope could not be retrieved or decoded."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.url = url
        self.status_code = status_code
        if url is not None:
            self.details["url"] = url
        if status_code is not None:
            self.details["status_code"] = status_code


class RecordParseFailure(StationError):
    """A single record inside an envelope was malformed."""

    def __init__(self, message: str, *, record: object = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.record = record


__all__ = ["StationError", "ConfigurationError", "FetchFailure", "RecordParseFailure"]
