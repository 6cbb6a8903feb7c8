"""Application service: Delete Project use case.

Deleting a project voids its dispatches (units out on site are taken
back), releases the stock of a locked project, drops the allocation
lines and marks the project DELETED — in one transaction. DRAFT
projects never held stock, so only the lines go.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator
from yard.domain.model.project import ProjectStatus

logger = logging.getLogger(__name__)


class DeleteProjectHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, project_id: int) -> None:
        with self._coordinator.transaction(project_id=project_id) as tx:
            project = tx.project(project_id)
            tx.lock_structures(project.structure_ids)
            was_locked = project.is_locked

            # Fail on FINISHED / DELETED before touching anything.
            project.ensure_transition(ProjectStatus.DELETED)

            voided = tx.services.dispatches.void_project(project)
            if was_locked:
                tx.services.ledger.release_project(project)
            project.delete()
            tx.uow.projects.save(project)

        logger.info(
            "Project #%d deleted; %d dispatches voided, stock released=%s",
            project_id, voided, was_locked,
        )
