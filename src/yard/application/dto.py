"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from yard.domain.model.dispatch import Dispatch
from yard.domain.model.project import Project
from yard.domain.model.structure import Structure

_TIME_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class StructureDTO:
    id: int
    name: str
    category_id: str | None
    stock: int
    reserved: int
    available: int
    in_use: int
    measure: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class AllocationLineDTO:
    id: int
    structure_id: int
    structure_name: str
    quantity: int
    dispatched_quantity: int
    remaining: int


@dataclass(frozen=True)
class ProjectDTO:
    id: int
    name: str
    status: str
    lines: list[AllocationLineDTO]
    created_at: str

    @property
    def has_dispatches(self) -> bool:
        return any(line.dispatched_quantity > 0 for line in self.lines)


@dataclass(frozen=True)
class DispatchItemSpec:
    """Input: how many units of one allocation line to hand over."""

    line_id: int
    quantity: int


@dataclass(frozen=True)
class CarrierSpec:
    """Input: the driver picking up the material."""

    first_name: str
    last_name: str
    tax_id: str | None = None
    license_plate: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class DispatchItemDTO:
    id: int
    line_id: int
    quantity: int


@dataclass(frozen=True)
class DispatchDTO:
    id: int
    project_id: int
    driver: str
    tax_id: str
    license_plate: str
    notes: str | None
    items: list[DispatchItemDTO]
    created_at: str
    updated_at: str

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)


# --- Mapping ------------------------------------------------------------------


def structure_to_dto(structure: Structure) -> StructureDTO:
    return StructureDTO(
        id=structure.id,  # type: ignore[arg-type]
        name=structure.name,
        category_id=structure.category_id,
        stock=structure.stock,
        reserved=structure.reserved,
        available=structure.available,
        in_use=structure.in_use,
        measure=structure.measure,
        description=structure.description,
    )


def project_to_dto(project: Project, structure_names: dict[int, str]) -> ProjectDTO:
    return ProjectDTO(
        id=project.id,  # type: ignore[arg-type]
        name=project.name,
        status=project.status.value,
        lines=[
            AllocationLineDTO(
                id=line.id,  # type: ignore[arg-type]
                structure_id=line.structure_id,
                structure_name=structure_names.get(line.structure_id, f"#{line.structure_id}"),
                quantity=line.quantity.value,
                dispatched_quantity=line.dispatched_quantity,
                remaining=line.remaining,
            )
            for line in project.lines
        ],
        created_at=project.created_at.strftime(_TIME_FORMAT),
    )


def dispatch_to_dto(dispatch: Dispatch) -> DispatchDTO:
    return DispatchDTO(
        id=dispatch.id,  # type: ignore[arg-type]
        project_id=dispatch.project_id,
        driver=dispatch.carrier.full_name,
        tax_id=dispatch.carrier.tax_id,
        license_plate=dispatch.carrier.license_plate,
        notes=dispatch.carrier.notes,
        items=[
            DispatchItemDTO(
                id=item.id,  # type: ignore[arg-type]
                line_id=item.line_id,
                quantity=item.quantity.value,
            )
            for item in dispatch.items
        ],
        created_at=dispatch.created_at.strftime(_TIME_FORMAT),
        updated_at=dispatch.updated_at.strftime(_TIME_FORMAT),
    )
