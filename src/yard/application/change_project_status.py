"""Application service: project status transitions.

Only DRAFT -> ACTIVE is a reservation event: every line's quantity is
reserved on its structure, all lines or none. The later transitions
(ACTIVE -> IN_PROGRESS -> FINISHED) only move the status; the stock
stays locked.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator

logger = logging.getLogger(__name__)


class ActivateProjectHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, project_id: int) -> None:
        with self._coordinator.transaction(project_id=project_id) as tx:
            project = tx.project(project_id)
            tx.lock_structures(project.structure_ids)

            # Status check first: activating twice must never reserve twice.
            project.activate()
            tx.services.ledger.lock_project(project)
            tx.uow.projects.save(project)

        logger.info("Project #%d activated; %d lines locked", project_id, len(project.lines))


class StartProjectHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, project_id: int) -> None:
        with self._coordinator.transaction(project_id=project_id) as tx:
            project = tx.project(project_id)
            project.start()
            tx.uow.projects.save(project)

        logger.info("Project #%d is now IN_PROGRESS", project_id)


class FinishProjectHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, project_id: int) -> None:
        with self._coordinator.transaction(project_id=project_id) as tx:
            project = tx.project(project_id)
            project.finish()
            tx.uow.projects.save(project)

        logger.info("Project #%d is now FINISHED", project_id)
