"""Keyed registry that shares one model per source between tiles."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Iterable

from .station import RefreshOutcome, RemoteDataModel

logger = logging.getLogger(__name__)


class ModelRegistry:
    def __init__(self) -> None:
        self._lock = Lock()
        self._models: dict[str, RemoteDataModel] = {}

    def add_model(
        self, model: RemoteDataModel, key: str | None = None
    ) -> RemoteDataModel:
        """Register ``model`` under ``key`` unless the key is taken.

        Returns the stored instance, which is the pre-existing model when
        the key was already registered. Defaults to the friendly name.
        """
        key = key or model.friendly_name
        with self._lock:
            existing = self._models.get(key)
            if existing is not None:
                if existing is not model:
                    logger.debug("Reusing existing model for %s", key)
                return existing
            self._models[key] = model
        logger.info("Registered model %s -> %s", key, model.source_url)
        return model

    def get(self, key: str) -> RemoteDataModel | None:
        with self._lock:
            return self._models.get(key)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._models)

    def models(self) -> list[RemoteDataModel]:
        with self._lock:
            return list(self._models.values())

    def items(self) -> list[tuple[str, RemoteDataModel]]:
        with self._lock:
            return list(self._models.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._models

    def refresh_all(self) -> dict[str, RefreshOutcome]:
        out: dict[str, RefreshOutcome] = {}
        for key, model in self.items():
            out[key] = model.refresh()
        return out


def build_registry(
    sources: Iterable,
    *,
    fetch_timeout_s: float,
    reset_before_fetch: bool = False,
    max_backoff_s: float | None = None,
    registry: ModelRegistry | None = None,
) -> ModelRegistry:
    """Create models for configured sources, sharing duplicates by name."""
    registry = registry or ModelRegistry()
    for source in sources:
        if source.name in registry:
            logger.warning("Duplicate source %s ignored", source.name)
            continue
        model = RemoteDataModel.create(
            source.name,
            source.url,
            source.expiration_minutes,
            max_backoff_s=max_backoff_s,
            fetch_timeout_s=fetch_timeout_s,
            reset_before_fetch=reset_before_fetch,
        )
        registry.add_model(model)
    return registry


__all__ = ["ModelRegistry", "build_registry"]
