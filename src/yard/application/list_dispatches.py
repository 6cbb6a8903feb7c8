"""Application service: List Dispatches use case (query).

Dispatch history, newest first, optionally narrowed down by project,
date range, driver tax ID or license plate.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from yard.application.coordinator import AllocationCoordinator
from yard.application.dto import DispatchDTO, dispatch_to_dto
from yard.domain.model.dispatch import Dispatch


@dataclass(frozen=True)
class DispatchFilters:
    project_id: int | None = None
    date_from: date | None = None
    date_to: date | None = None
    tax_id: str | None = None
    license_plate: str | None = None

    def matches(self, dispatch: Dispatch) -> bool:
        if self.project_id is not None and dispatch.project_id != self.project_id:
            return False
        day = dispatch.created_at.date()
        if self.date_from is not None and day < self.date_from:
            return False
        if self.date_to is not None and day > self.date_to:
            return False
        if self.tax_id and dispatch.carrier.tax_id != self.tax_id.strip():
            return False
        if self.license_plate and (
            dispatch.carrier.license_plate != self.license_plate.strip().upper()
        ):
            return False
        return True


class ListDispatchesHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, filters: DispatchFilters | None = None) -> list[DispatchDTO]:
        filters = filters or DispatchFilters()
        with self._coordinator.read() as uow:
            if filters.project_id is not None:
                dispatches = uow.dispatches.list_by_project(filters.project_id)
            else:
                dispatches = uow.dispatches.list_all()

        selected = [d for d in dispatches if filters.matches(d)]
        selected.sort(key=lambda d: (d.created_at, d.id or 0), reverse=True)
        return [dispatch_to_dto(d) for d in selected]
