"""Application service: Audit Ledger use case (query).

Recomputes every maintained figure from first principles and reports
the ones that disagree. An empty result means the ledger is consistent.
"""

from __future__ import annotations

import logging

from yard.application.coordinator import AllocationCoordinator
from yard.domain.service.structure_ledger import LedgerDrift, StructureLedger

logger = logging.getLogger(__name__)


class AuditLedgerHandler:

    def __init__(self, coordinator: AllocationCoordinator) -> None:
        self._coordinator = coordinator

    def handle(self) -> list[LedgerDrift]:
        with self._coordinator.read() as uow:
            drifts = StructureLedger(uow.structures).audit(uow.projects, uow.dispatches)

        for drift in drifts:
            logger.error(
                "Ledger drift on %s (#%s): %s recorded %d, expected %d",
                drift.structure_name, drift.structure_id, drift.figure,
                drift.recorded, drift.expected,
            )
        return drifts
