"""Application service: Show Project use case (query)."""

from __future__ import annotations

from yard.application.coordinator import AllocationCoordinator
from yard.application.dto import ProjectDTO, project_to_dto
from yard.domain.exceptions import EntityNotFoundError


class ShowProjectHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, project_id: int) -> ProjectDTO:
        with self._coordinator.read() as uow:
            project = uow.projects.get_by_id(project_id)
            if project is None:
                raise EntityNotFoundError(f"Project #{project_id} not found")
            names = {s.id: s.name for s in uow.structures.list_all()}
        return project_to_dto(project, names)  # type: ignore[arg-type]
