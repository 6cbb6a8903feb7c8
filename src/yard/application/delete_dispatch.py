"""Application service: Delete Dispatch use case.

The rollback path of a dispatch: every line it consumed gets its
remaining quantity back and the structures' in-use figures drop by the
same amounts. Project reservations (``available``) are not affected.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator

logger = logging.getLogger(__name__)


class DeleteDispatchHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, dispatch_id: int) -> None:
        project_id = self._coordinator.locate_dispatch(dispatch_id)

        with self._coordinator.transaction(project_id=project_id) as tx:
            dispatch = tx.services.dispatches.get(dispatch_id)
            project = tx.project(project_id)
            line_ids = {item.line_id for item in dispatch.items}
            tx.lock_structures(
                line.structure_id for line in project.lines if line.id in line_ids
            )
            tx.services.dispatches.delete(dispatch, project)

        logger.info(
            "Dispatch #%d deleted; %d units back on project #%d",
            dispatch_id, dispatch.total_quantity, project_id,
        )
