"""JSON-file-backed implementation of DispatchRepository."""

from __future__ import annotations

from datetime import datetime

from yard.domain.model.dispatch import Dispatch, DispatchItem
from yard.domain.model.value_objects import Carrier, Quantity
from yard.domain.repository.dispatch_repository import DispatchRepository
from yard.infrastructure.persistence.staged_table import StagedTable


class JsonDispatchRepository(DispatchRepository):

    def __init__(self, table: StagedTable) -> None:
        self._table = table

    # --- DispatchRepository interface -----------------------------------------

    def get_by_id(self, dispatch_id: int) -> Dispatch | None:
        raw = self._table.get(dispatch_id)
        return self._to_domain(raw) if raw is not None else None

    def list_by_project(self, project_id: int) -> list[Dispatch]:
        return [d for d in self.list_all() if d.project_id == project_id]

    def list_all(self) -> list[Dispatch]:
        return [self._to_domain(raw) for raw in self._table.rows()]

    def save(self, dispatch: Dispatch) -> None:
        if dispatch.id is None:
            dispatch.id = self._table.next_id()
        for item in dispatch.items:
            if item.id is None:
                item.id = self._table.next_id("dispatch_items")
        self._table.put(self._to_raw(dispatch))

    def delete(self, dispatch_id: int) -> None:
        self._table.remove(dispatch_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(dispatch: Dispatch) -> dict:
        return {
            "id": dispatch.id,
            "project_id": dispatch.project_id,
            "first_name": dispatch.carrier.first_name,
            "last_name": dispatch.carrier.last_name,
            "tax_id": dispatch.carrier.tax_id,
            "license_plate": dispatch.carrier.license_plate,
            "notes": dispatch.carrier.notes,
            "created_at": dispatch.created_at.isoformat(),
            "updated_at": dispatch.updated_at.isoformat(),
            "items": [
                {"id": item.id, "line_id": item.line_id, "quantity": item.quantity.value}
                for item in dispatch.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Dispatch:
        return Dispatch(
            id=raw["id"],
            project_id=raw["project_id"],
            carrier=Carrier(
                first_name=raw["first_name"],
                last_name=raw["last_name"],
                tax_id=raw.get("tax_id", ""),
                license_plate=raw.get("license_plate", ""),
                notes=raw.get("notes"),
            ),
            items=[
                DispatchItem(
                    id=item["id"],
                    line_id=item["line_id"],
                    quantity=Quantity(item["quantity"]),
                )
                for item in raw["items"]
            ],
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
