"""Abstract repository for Project aggregate (with its allocation lines)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from yard.domain.model.project import Project


class ProjectRepository(ABC):

    @abstractmethod
    def get_by_id(self, project_id: int) -> Project | None:
        """Return a project by its ID, or None if not found."""

    @abstractmethod
    def get_by_line_id(self, line_id: int) -> Project | None:
        """Return the project owning the given allocation line, or None."""

    @abstractmethod
    def list_all(self) -> list[Project]:
        """Return every project, deleted ones included."""

    @abstractmethod
    def save(self, project: Project) -> None:
        """Persist a new or updated project.

        Assigns IDs to the project and to any line that has none.
        """
