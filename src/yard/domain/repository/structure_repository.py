"""Abstract repository for Structure aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory)
live in the infrastructure layer and the tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from yard.domain.model.structure import Structure


class StructureRepository(ABC):

    @abstractmethod
    def get_by_id(self, structure_id: int) -> Structure | None:
        """Return a structure by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Structure | None:
        """Return a structure by its name (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Structure]:
        """Return every structure."""

    @abstractmethod
    def save(self, structure: Structure) -> None:
        """Persist a new or updated structure, assigning an ID if needed."""
