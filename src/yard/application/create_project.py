"""Application service: Create Project use case.

New projects start in DRAFT: structures can be picked for a quote
without holding any stock yet.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator
from yard.domain.model.project import Project

logger = logging.getLogger(__name__)


class CreateProjectHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, name: str) -> int:
        project = Project.create(name)
        with self._coordinator.transaction() as tx:
            tx.uow.projects.save(project)

        logger.info("Project #%s '%s' created as DRAFT", project.id, project.name)
        return project.id  # type: ignore[return-value]
