"""Application service: Create Dispatch use case.

A driver picks up material for a project. Each requested item consumes
part of one allocation line's remaining quantity; if any item asks for
more than its line has left, nothing is recorded.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator
from yard.application.dto import CarrierSpec, DispatchDTO, DispatchItemSpec, dispatch_to_dto
from yard.domain.model.value_objects import Carrier

logger = logging.getLogger(__name__)


class CreateDispatchHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(
        self,
        project_id: int,
        carrier: CarrierSpec,
        items: list[DispatchItemSpec],
    ) -> DispatchDTO:
        driver = Carrier.create(
            first_name=carrier.first_name,
            last_name=carrier.last_name,
            tax_id=carrier.tax_id,
            license_plate=carrier.license_plate,
            notes=carrier.notes,
        )
        requested = {spec.line_id for spec in items}

        with self._coordinator.transaction(project_id=project_id) as tx:
            project = tx.project(project_id)
            tx.lock_structures(
                line.structure_id for line in project.lines if line.id in requested
            )
            dispatch = tx.services.dispatches.create(
                project,
                driver,
                [(spec.line_id, spec.quantity) for spec in items],
            )

        logger.info(
            "Dispatch #%s for project #%d: %d units to %s",
            dispatch.id, project_id, dispatch.total_quantity, driver.full_name,
        )
        return dispatch_to_dto(dispatch)
