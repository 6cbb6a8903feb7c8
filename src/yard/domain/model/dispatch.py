"""Dispatch aggregate — one pick-up of material by a driver.

A dispatch owns its items. Item quantities are fixed once the dispatch
exists: to change what left the yard, delete the dispatch and record a
new one. Only the carrier details can be corrected in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from yard.domain.exceptions import ValidationError
from yard.domain.model.value_objects import Carrier, Quantity


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DispatchItem:
    id: int | None
    line_id: int
    quantity: Quantity


@dataclass
class Dispatch:
    """Aggregate root for dispatches."""

    id: int | None
    project_id: int
    carrier: Carrier
    items: list[DispatchItem]
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @staticmethod
    def create(
        project_id: int,
        carrier: Carrier,
        items: list[DispatchItem],
    ) -> Dispatch:
        """Create a new dispatch, enforcing its own invariants.

        Cross-aggregate checks (remaining quantity on each line) belong to
        the dispatch ledger, not here.
        """
        if not items:
            raise ValidationError("Select at least one structure to dispatch")

        seen: set[int] = set()
        for item in items:
            if item.line_id in seen:
                raise ValidationError(
                    f"Allocation line #{item.line_id} appears more than once"
                )
            seen.add(item.line_id)

        return Dispatch(id=None, project_id=project_id, carrier=carrier, items=list(items))

    def update_carrier(self, carrier: Carrier) -> None:
        self.carrier = carrier
        self.updated_at = _now()

    def remove_items_for_line(self, line_id: int) -> list[DispatchItem]:
        """Drop the items that reference *line_id* and return them."""
        removed = [item for item in self.items if item.line_id == line_id]
        self.items = [item for item in self.items if item.line_id != line_id]
        if removed:
            self.updated_at = _now()
        return removed

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity.value for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items
