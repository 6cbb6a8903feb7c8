"""JSON-file-backed implementation of StructureRepository."""

from __future__ import annotations

from yard.domain.model.structure import Structure
from yard.domain.repository.structure_repository import StructureRepository
from yard.infrastructure.persistence.staged_table import StagedTable


class JsonStructureRepository(StructureRepository):

    def __init__(self, table: StagedTable) -> None:
        self._table = table

    # --- StructureRepository interface ----------------------------------------

    def get_by_id(self, structure_id: int) -> Structure | None:
        raw = self._table.get(structure_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_name(self, name: str) -> Structure | None:
        for raw in self._table.rows():
            if raw["name"].lower() == name.strip().lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Structure]:
        return [self._to_domain(raw) for raw in self._table.rows()]

    def save(self, structure: Structure) -> None:
        if structure.id is None:
            structure.id = self._table.next_id()
        self._table.put(self._to_raw(structure))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(structure: Structure) -> dict:
        return {
            "id": structure.id,
            "name": structure.name,
            "category_id": structure.category_id,
            "stock": structure.stock,
            "reserved": structure.reserved,
            "in_use": structure.in_use,
            "measure": structure.measure,
            "description": structure.description,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Structure:
        return Structure(
            id=raw["id"],
            name=raw["name"],
            category_id=raw.get("category_id"),
            stock=raw["stock"],
            reserved=raw.get("reserved", 0),
            in_use=raw.get("in_use", 0),
            measure=raw.get("measure"),
            description=raw.get("description"),
        )
