"""JSON-file-backed implementation of ProjectRepository.

Allocation lines are stored inside their project's record; line IDs
come from their own sequence so they stay unique across projects.
"""

from __future__ import annotations

from datetime import datetime

from yard.domain.model.project import AllocationLine, Project, ProjectStatus
from yard.domain.model.value_objects import Quantity
from yard.domain.repository.project_repository import ProjectRepository
from yard.infrastructure.persistence.staged_table import StagedTable


class JsonProjectRepository(ProjectRepository):

    def __init__(self, table: StagedTable) -> None:
        self._table = table

    # --- ProjectRepository interface ------------------------------------------

    def get_by_id(self, project_id: int) -> Project | None:
        raw = self._table.get(project_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_line_id(self, line_id: int) -> Project | None:
        for raw in self._table.rows():
            if any(line["id"] == line_id for line in raw["lines"]):
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Project]:
        return [self._to_domain(raw) for raw in self._table.rows()]

    def save(self, project: Project) -> None:
        if project.id is None:
            project.id = self._table.next_id()
        for line in project.lines:
            line.project_id = project.id
            if line.id is None:
                line.id = self._table.next_id("lines")
        self._table.put(self._to_raw(project))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(project: Project) -> dict:
        return {
            "id": project.id,
            "name": project.name,
            "status": project.status.value,
            "created_at": project.created_at.isoformat(),
            "lines": [
                {
                    "id": line.id,
                    "structure_id": line.structure_id,
                    "quantity": line.quantity.value,
                    "dispatched_quantity": line.dispatched_quantity,
                }
                for line in project.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Project:
        lines = [
            AllocationLine(
                id=line["id"],
                project_id=raw["id"],
                structure_id=line["structure_id"],
                quantity=Quantity(line["quantity"]),
                dispatched_quantity=line.get("dispatched_quantity", 0),
            )
            for line in raw["lines"]
        ]
        return Project(
            id=raw["id"],
            name=raw["name"],
            lines=lines,
            status=ProjectStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
