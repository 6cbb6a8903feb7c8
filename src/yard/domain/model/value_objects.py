"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from yard.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot reserve or dispatch zero or
    negative units.
    """

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True is not a quantity
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Carrier:
    """Identity of the driver who picks up material for a dispatch.

    The allocation rules never look inside it; it only has to be
    complete enough to identify who took the structures away.
    """

    first_name: str
    last_name: str
    tax_id: str = ""
    license_plate: str = ""
    notes: str | None = None

    @staticmethod
    def create(
        first_name: str,
        last_name: str,
        tax_id: str | None = None,
        license_plate: str | None = None,
        notes: str | None = None,
    ) -> Carrier:
        """Build a carrier from raw input, trimming and validating fields."""
        first = (first_name or "").strip()
        last = (last_name or "").strip()
        if not first or not last:
            raise ValidationError("Driver first and last name are required")

        tax = (tax_id or "").strip()
        plate = (license_plate or "").strip().upper()
        if not tax and not plate:
            raise ValidationError("Either a tax ID or a license plate is required")

        cleaned_notes = notes.strip() if notes else None
        return Carrier(
            first_name=first,
            last_name=last,
            tax_id=tax,
            license_plate=plate,
            notes=cleaned_notes or None,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def merged(self, **changes: str | None) -> Carrier:
        """Return a validated copy with the given non-None fields replaced."""
        updates = {k: v for k, v in changes.items() if v is not None}
        draft = replace(self, **updates)
        return Carrier.create(
            first_name=draft.first_name,
            last_name=draft.last_name,
            tax_id=draft.tax_id,
            license_plate=draft.license_plate,
            notes=draft.notes,
        )
