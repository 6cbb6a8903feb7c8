"""Application service: Update Dispatch use case.

Only the carrier details can be corrected. Item quantities are fixed
once recorded: to change what left the yard, delete the dispatch and
create a new one.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator
from yard.application.dto import DispatchDTO, dispatch_to_dto

logger = logging.getLogger(__name__)


class UpdateDispatchHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(
        self,
        dispatch_id: int,
        first_name: str | None = None,
        last_name: str | None = None,
        tax_id: str | None = None,
        license_plate: str | None = None,
        notes: str | None = None,
    ) -> DispatchDTO:
        project_id = self._coordinator.locate_dispatch(dispatch_id)

        with self._coordinator.transaction(project_id=project_id) as tx:
            current = tx.services.dispatches.get(dispatch_id)
            carrier = current.carrier.merged(
                first_name=first_name,
                last_name=last_name,
                tax_id=tax_id,
                license_plate=license_plate,
                notes=notes,
            )
            dispatch = tx.services.dispatches.update_carrier(dispatch_id, carrier)

        logger.info("Dispatch #%d carrier updated", dispatch_id)
        return dispatch_to_dto(dispatch)
