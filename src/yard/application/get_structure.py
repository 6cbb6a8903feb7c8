"""Application service: Get / List Structures use cases (queries).

The figures returned here are advisory: they are good for rendering
selection limits, but the authoritative check happens again when the
write is applied.
"""

from __future__ import annotations

from yard.application.coordinator import AllocationCoordinator
from yard.application.dto import StructureDTO, structure_to_dto
from yard.domain.service.structure_ledger import StructureLedger


class GetStructureHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, structure_id: int) -> StructureDTO:
        with self._coordinator.read() as uow:
            structure = StructureLedger(uow.structures).get(structure_id)
            return structure_to_dto(structure)


class ListStructuresHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, category_id: str | None = None) -> list[StructureDTO]:
        with self._coordinator.read() as uow:
            structures = uow.structures.list_all()
        if category_id is not None:
            structures = [s for s in structures if s.category_id == category_id]
        return [structure_to_dto(s) for s in sorted(structures, key=lambda s: s.name.lower())]
