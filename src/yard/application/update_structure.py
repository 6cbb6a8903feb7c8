"""Application service: Update Structure use case.

Corrects the catalogue details of a structure (name, category, measure,
description). Fields left as ``None`` keep their value; an empty string
clears an optional field. The stock count is not editable here; it only
changes through the Set Stock use case.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator
from yard.application.dto import StructureDTO, structure_to_dto
from yard.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)


class UpdateStructureHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(
        self,
        structure_id: int,
        name: str | None = None,
        category_id: str | None = None,
        measure: str | None = None,
        description: str | None = None,
    ) -> StructureDTO:
        with self._coordinator.transaction(structure_ids=[structure_id]) as tx:
            structure = tx.services.ledger.get(structure_id)
            structure.update_details(
                name=name,
                category_id=category_id,
                measure=measure,
                description=description,
            )

            clash = tx.uow.structures.get_by_name(structure.name)
            if clash is not None and clash.id != structure_id:
                raise ValidationError(f"Structure '{structure.name}' already exists")

            tx.uow.structures.save(structure)

        logger.info("Structure #%d details updated", structure_id)
        return structure_to_dto(structure)
