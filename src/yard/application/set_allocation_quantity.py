"""Application service: Set Allocation Quantity use case."""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator

logger = logging.getLogger(__name__)


class SetAllocationQuantityHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, line_id: int, quantity: int) -> None:
        # A line never changes project or structure, so the advisory
        # lookup is enough to pick the locks.
        project_id, structure_id = self._coordinator.locate_line(line_id)

        with self._coordinator.transaction(
            project_id=project_id, structure_ids=[structure_id]
        ) as tx:
            project = tx.project(project_id)
            tx.services.allocations.set_quantity(project, line_id, quantity)

        logger.info("Line #%d quantity set to %d", line_id, quantity)
