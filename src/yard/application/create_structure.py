"""Application service: Create Structure use case."""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator
from yard.application.dto import StructureDTO, structure_to_dto
from yard.domain.exceptions import ValidationError
from yard.domain.model.structure import Structure

logger = logging.getLogger(__name__)


class CreateStructureHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(
        self,
        name: str,
        stock: int,
        category_id: str | None = None,
        measure: str | None = None,
        description: str | None = None,
    ) -> StructureDTO:
        """Register a new structure type with its initial stock count."""
        structure = Structure.create(
            name=name,
            stock=stock,
            category_id=category_id,
            measure=measure,
            description=description,
        )

        with self._coordinator.transaction() as tx:
            if tx.uow.structures.get_by_name(structure.name) is not None:
                raise ValidationError(f"Structure '{structure.name}' already exists")
            tx.uow.structures.save(structure)

        logger.info("Structure #%s '%s' created with stock %d", structure.id, structure.name, stock)
        return structure_to_dto(structure)
