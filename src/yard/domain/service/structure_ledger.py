"""Domain service: Structure Ledger.

The only component allowed to write a structure's ``stock``,
``reserved`` and ``in_use`` figures. Everything else (allocation set,
dispatch ledger, status transitions) goes through it.

Locking a project uses a two-phase approach (validate-then-mutate) so
stock is never left partially reserved when one line does not fit.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from yard.domain.exceptions import EntityNotFoundError, OverAllocationError
from yard.domain.model.project import Project
from yard.domain.model.structure import Structure
from yard.domain.repository.dispatch_repository import DispatchRepository
from yard.domain.repository.project_repository import ProjectRepository
from yard.domain.repository.structure_repository import StructureRepository


@dataclass(frozen=True)
class LedgerDrift:
    """A maintained figure that disagrees with its recomputation."""

    structure_id: int | None
    structure_name: str
    figure: str
    recorded: int
    expected: int


class StructureLedger:

    def __init__(self, structure_repo: StructureRepository) -> None:
        self._structure_repo = structure_repo

    # --- Queries --------------------------------------------------------------

    def get(self, structure_id: int) -> Structure:
        structure = self._structure_repo.get_by_id(structure_id)
        if structure is None:
            raise EntityNotFoundError(f"Structure #{structure_id} not found")
        return structure

    def available(self, structure_id: int) -> int:
        return self.get(structure_id).available

    def in_use(self, structure_id: int) -> int:
        return self.get(structure_id).in_use

    # --- Stock count ----------------------------------------------------------

    def set_stock(self, structure_id: int, new_stock: int) -> Structure:
        structure = self.get(structure_id)
        structure.set_stock(new_stock)
        self._structure_repo.save(structure)
        return structure

    # --- Reservation deltas ---------------------------------------------------

    def reserve(self, structure_id: int, quantity: int) -> None:
        structure = self.get(structure_id)
        structure.reserve(quantity)
        self._structure_repo.save(structure)

    def release(self, structure_id: int, quantity: int) -> None:
        structure = self.get(structure_id)
        structure.release(quantity)
        self._structure_repo.save(structure)

    def hand_out(self, structure_id: int, quantity: int) -> None:
        structure = self.get(structure_id)
        structure.hand_out(quantity)
        self._structure_repo.save(structure)

    def take_back(self, structure_id: int, quantity: int) -> None:
        structure = self.get(structure_id)
        structure.take_back(quantity)
        self._structure_repo.save(structure)

    # --- Whole-project locking ------------------------------------------------

    def lock_project(self, project: Project) -> None:
        """Reserve stock for every allocation line of a project.

        Phase 1 — load and validate: every line must fit in its
                  structure's current availability. Fails fast before
                  any mutation.
        Phase 2 — mutate and persist.
        """
        # Phase 1: load all structures and validate
        pending: list[tuple[Structure, int]] = []
        for line in project.lines:
            structure = self.get(line.structure_id)
            qty = line.quantity.value
            if qty > structure.available:
                raise OverAllocationError(
                    f"Insufficient availability for {structure.name} "
                    f"(need {qty}, have {structure.available} available)"
                )
            pending.append((structure, qty))

        # Phase 2: mutate and persist
        for structure, qty in pending:
            structure.reserve(qty)
            self._structure_repo.save(structure)

    def release_project(self, project: Project) -> None:
        """Give back the stock held by every line of a locked project."""
        for line in project.lines:
            self.release(line.structure_id, line.quantity.value)

    # --- Audit ----------------------------------------------------------------

    def audit(
        self,
        project_repo: ProjectRepository,
        dispatch_repo: DispatchRepository,
    ) -> list[LedgerDrift]:
        """Recompute ``reserved`` and ``in_use`` from lines and dispatches.

        Also checks that each line's ``dispatched_quantity`` equals the sum
        of the dispatch items that reference it.
        """
        expected_reserved: dict[int, int] = defaultdict(int)
        expected_in_use: dict[int, int] = defaultdict(int)
        line_dispatched: dict[int, tuple[int, int]] = {}

        for project in project_repo.list_all():
            for line in project.lines:
                if project.is_locked:
                    expected_reserved[line.structure_id] += line.quantity.value
                expected_in_use[line.structure_id] += line.dispatched_quantity
                line_dispatched[line.id] = (line.structure_id, line.dispatched_quantity)

        item_totals: dict[int, int] = defaultdict(int)
        for dispatch in dispatch_repo.list_all():
            for item in dispatch.items:
                item_totals[item.line_id] += item.quantity.value

        drifts: list[LedgerDrift] = []
        structures = {s.id: s for s in self._structure_repo.list_all()}
        for structure in structures.values():
            if structure.reserved != expected_reserved[structure.id]:
                drifts.append(LedgerDrift(
                    structure.id, structure.name, "reserved",
                    structure.reserved, expected_reserved[structure.id],
                ))
            if structure.in_use != expected_in_use[structure.id]:
                drifts.append(LedgerDrift(
                    structure.id, structure.name, "in_use",
                    structure.in_use, expected_in_use[structure.id],
                ))

        for line_id, (structure_id, dispatched) in line_dispatched.items():
            if dispatched != item_totals[line_id]:
                structure = structures.get(structure_id)
                drifts.append(LedgerDrift(
                    structure_id,
                    structure.name if structure else "?",
                    f"line #{line_id} dispatched",
                    dispatched,
                    item_totals[line_id],
                ))

        return drifts
