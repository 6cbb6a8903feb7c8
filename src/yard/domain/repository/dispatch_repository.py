"""Abstract repository for Dispatch aggregate (with its items)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from yard.domain.model.dispatch import Dispatch


class DispatchRepository(ABC):

    @abstractmethod
    def get_by_id(self, dispatch_id: int) -> Dispatch | None:
        """Return a dispatch by its ID, or None if not found."""

    @abstractmethod
    def list_by_project(self, project_id: int) -> list[Dispatch]:
        """Return every dispatch of a project, oldest first."""

    @abstractmethod
    def list_all(self) -> list[Dispatch]:
        """Return every dispatch, oldest first."""

    @abstractmethod
    def save(self, dispatch: Dispatch) -> None:
        """Persist a new or updated dispatch, assigning IDs to it and its items."""

    @abstractmethod
    def delete(self, dispatch_id: int) -> None:
        """Remove a dispatch and its items."""
