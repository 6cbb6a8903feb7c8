"""Application service: Set Stock use case.

The only way a structure's stock count changes. Reservations never touch
it; they only move ``available``.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator
from yard.application.dto import StructureDTO, structure_to_dto

logger = logging.getLogger(__name__)


class SetStockHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self, structure_id: int, new_stock: int) -> StructureDTO:
        with self._coordinator.transaction(structure_ids=[structure_id]) as tx:
            structure = tx.services.ledger.set_stock(structure_id, new_stock)

        logger.info("Stock of structure #%d set to %d", structure_id, new_stock)
        return structure_to_dto(structure)
