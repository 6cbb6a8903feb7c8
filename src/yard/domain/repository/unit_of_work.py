"""Abstract unit of work: one transaction over all three tables.

Repositories reached through a unit of work hand out private copies of
the aggregates. Saves are staged and only become visible to other
callers on ``commit()``. Leaving the ``with`` block because of an
exception discards everything staged, so a failed multi-entity
operation never leaves a partial state behind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from yard.domain.repository.dispatch_repository import DispatchRepository
from yard.domain.repository.project_repository import ProjectRepository
from yard.domain.repository.structure_repository import StructureRepository


class UnitOfWork(ABC):

    structures: StructureRepository
    projects: ProjectRepository
    dispatches: DispatchRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Anything not explicitly committed is thrown away.
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every staged change durable and visible."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every staged change. Safe to call after commit."""
