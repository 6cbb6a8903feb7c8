"""Application service: Add Allocation Line use case."""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator

logger = logging.getLogger(__name__)


class AddAllocationLineHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, project_id: int, structure_id: int, quantity: int) -> int:
        """Allocate *quantity* units of a structure to a project.

        Returns the new line's ID. On a locked project the units are
        reserved in the same transaction.
        """
        with self._coordinator.transaction(
            project_id=project_id, structure_ids=[structure_id]
        ) as tx:
            project = tx.project(project_id)
            line = tx.services.allocations.add_line(project, structure_id, quantity)

        logger.info(
            "Project #%d: line #%s allocates %d of structure #%d (%s)",
            project_id, line.id, quantity, structure_id, project.status.value,
        )
        return line.id  # type: ignore[return-value]
