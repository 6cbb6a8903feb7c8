"""Application service: Get Allocation Ceiling use case (query).

Callers rendering a quantity picker ask for the ceiling here instead of
recomputing it from cached figures. The answer is computed from the
current ledger and the project status, so it already includes the
project's own locked quantity when there is one.
"""

from __future__ import annotations

from yard.application.coordinator import AllocationCoordinator, build_services
from yard.domain.exceptions import EntityNotFoundError


class GetAllocationCeilingHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, project_id: int, structure_id: int) -> int:
        with self._coordinator.read() as uow:
            project = uow.projects.get_by_id(project_id)
            if project is None:
                raise EntityNotFoundError(f"Project #{project_id} not found")
            return build_services(uow).allocations.ceiling(project, structure_id)
