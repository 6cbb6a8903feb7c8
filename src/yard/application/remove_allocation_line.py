"""Application service: Remove Allocation Line use case.

A line with units already out on site is protected: the caller has to
delete those dispatches first, or explicitly pass ``cascade=True`` to
have the dispatch items behind the line voided in the same transaction.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator

logger = logging.getLogger(__name__)


class RemoveAllocationLineHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, line_id: int, cascade: bool = False) -> None:
        project_id, structure_id = self._coordinator.locate_line(line_id)

        with self._coordinator.transaction(
            project_id=project_id, structure_ids=[structure_id]
        ) as tx:
            project = tx.project(project_id)
            tx.services.allocations.remove_line(project, line_id, cascade=cascade)

        logger.info("Line #%d removed from project #%d (cascade=%s)", line_id, project_id, cascade)
