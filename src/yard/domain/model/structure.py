"""Structure aggregate — tracks stock, reservations and units out on site.

Each structure type (a scaffolding frame, a platform, a brace...) has one
Structure record that knows how many units the company owns, how many of
them are committed to locked projects and how many are physically
dispatched right now.
"""

from __future__ import annotations

from dataclasses import dataclass

from yard.domain.exceptions import (
    CapacityError,
    OverAllocationError,
    ValidationError,
)


@dataclass
class Structure:
    """Aggregate root for structure stock.

    ``reserved`` and ``in_use`` are maintained aggregates: they are only
    changed by the ledger, in the same transaction that changes the
    allocation lines and dispatch items they summarise.

    Invariants:
    - ``0 <= available <= stock``
    - ``in_use <= reserved <= stock``
    """

    id: int | None
    name: str
    category_id: str | None
    stock: int
    reserved: int = 0
    in_use: int = 0
    measure: str | None = None
    description: str | None = None

    @staticmethod
    def create(
        name: str,
        stock: int,
        category_id: str | None = None,
        measure: str | None = None,
        description: str | None = None,
    ) -> Structure:
        if stock < 0:
            raise ValidationError("Stock cannot be negative")
        return Structure(
            id=None,
            name=_clean_name(name),
            category_id=_optional(category_id),
            stock=stock,
            measure=_optional(measure),
            description=_optional(description),
        )

    @property
    def available(self) -> int:
        return self.stock - self.reserved

    # --- Catalogue details ----------------------------------------------------

    def update_details(
        self,
        name: str | None = None,
        category_id: str | None = None,
        measure: str | None = None,
        description: str | None = None,
    ) -> None:
        """Edit the descriptive fields; ``None`` keeps a field, ``""`` clears it.

        Stock and the ledger figures are never touched here.
        """
        if name is not None:
            self.name = _clean_name(name)
        if category_id is not None:
            self.category_id = _optional(category_id)
        if measure is not None:
            self.measure = _optional(measure)
        if description is not None:
            self.description = _optional(description)

    # --- Stock count ----------------------------------------------------------

    def set_stock(self, new_stock: int) -> None:
        """Replace the stock count after a physical count.

        Stock can never shrink below what is already committed.
        """
        if new_stock < 0:
            raise ValidationError("Stock cannot be negative")
        if new_stock < self.reserved:
            raise CapacityError(
                f"Cannot set stock of {self.name} to {new_stock} "
                f"— {self.reserved} units are committed to projects"
            )
        self.stock = new_stock

    # --- Reservations ---------------------------------------------------------

    def reserve(self, quantity: int) -> None:
        """Commit units to a locked project.

        Raises OverAllocationError if insufficient stock is available.
        """
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available:
            raise OverAllocationError(
                f"Insufficient availability for {self.name} "
                f"(need {quantity}, have {self.available} available)"
            )
        self.reserved += quantity

    def release(self, quantity: int) -> None:
        """Return previously committed units to availability."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        if quantity > self.reserved:
            raise ValidationError(
                f"Cannot release {quantity} of {self.name} "
                f"— only {self.reserved} currently reserved"
            )
        if self.reserved - quantity < self.in_use:
            raise ValidationError(
                f"Cannot release {quantity} of {self.name} "
                f"— {self.in_use} units are still out on site"
            )
        self.reserved -= quantity

    # --- Units out on site ----------------------------------------------------

    def hand_out(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Dispatch quantity must be positive")
        if self.in_use + quantity > self.reserved:
            raise ValidationError(
                f"Cannot dispatch {quantity} of {self.name} "
                f"— only {self.reserved - self.in_use} reserved and not yet out"
            )
        self.in_use += quantity

    def take_back(self, quantity: int) -> None:
        """Record units coming back; never drops below zero."""
        if quantity <= 0:
            raise ValidationError("Return quantity must be positive")
        self.in_use = max(0, self.in_use - quantity)


def _clean_name(name: str) -> str:
    if not name or not name.strip():
        raise ValidationError("Structure name is required")
    return name.strip()


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None
