"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from yard.application.coordinator import AllocationCoordinator
from yard.config import settings
from yard.infrastructure.persistence.json_store import JsonStore
from yard.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_coordinator(store_path: Path, lock_timeout: float | None = None) -> AllocationCoordinator:
    if lock_timeout is None:
        lock_timeout = settings.lock_timeout
    store = JsonStore(store_path, lock_timeout=lock_timeout)
    return AllocationCoordinator(lambda: JsonUnitOfWork(store))


@lru_cache(maxsize=1)
def coordinator() -> AllocationCoordinator:
    """The process-wide coordinator; its locks must be shared by every caller."""
    return build_coordinator(settings.store_path)
