"""Domain service: Project Allocation Set.

Adds, resizes and removes the (structure, quantity) lines of a project.
The ceiling a line may reach depends on the project status:

- DRAFT: the structure's ``available`` figure. Draft lines do not hold
  stock, so nothing is added back.
- locked: ``available`` plus the line's own current quantity, because
  that quantity is already subtracted from ``available``.

While the project is locked every change is mirrored on the structure
ledger straight away. Increases are checked against the ceiling before
the delta is applied; decreases are applied first since they only
loosen the constraint.
"""

from __future__ import annotations

from yard.domain.exceptions import (
    BelowDispatchedError,
    DuplicateAllocationError,
    HasDispatchesError,
    OverAllocationError,
)
from yard.domain.model.project import AllocationLine, Project
from yard.domain.model.structure import Structure
from yard.domain.model.value_objects import Quantity
from yard.domain.repository.project_repository import ProjectRepository
from yard.domain.service.dispatch_ledger import DispatchLedger
from yard.domain.service.structure_ledger import StructureLedger


class AllocationSet:

    def __init__(
        self,
        project_repo: ProjectRepository,
        ledger: StructureLedger,
        dispatch_ledger: DispatchLedger,
    ) -> None:
        self._project_repo = project_repo
        self._ledger = ledger
        self._dispatch_ledger = dispatch_ledger

    def ceiling(self, project: Project, structure_id: int) -> int:
        """Largest quantity the project may hold of a structure right now."""
        structure = self._ledger.get(structure_id)
        line = project.find_line_for_structure(structure_id)
        return self._ceiling(project, structure, line)

    def add_line(
        self,
        project: Project,
        structure_id: int,
        quantity: int,
    ) -> AllocationLine:
        project.ensure_editable()
        structure = self._ledger.get(structure_id)
        if project.find_line_for_structure(structure_id) is not None:
            raise DuplicateAllocationError(
                f"{structure.name} is already allocated to project #{project.id}; "
                f"change its quantity instead"
            )

        qty = Quantity(quantity)
        ceiling = self._ceiling(project, structure, None)
        if qty.value > ceiling:
            raise OverAllocationError(
                f"Cannot allocate {qty.value} of {structure.name} "
                f"— only {ceiling} available"
            )

        line = project.add_line(structure_id, qty)
        if project.is_locked:
            self._ledger.reserve(structure_id, qty.value)

        self._project_repo.save(project)
        return line

    def set_quantity(self, project: Project, line_id: int, new_quantity: int) -> AllocationLine:
        project.ensure_editable()
        line = project.get_line(line_id)
        qty = Quantity(new_quantity)

        if qty.value < line.dispatched_quantity:
            raise BelowDispatchedError(
                f"Cannot reduce line #{line_id} to {qty.value} "
                f"— {line.dispatched_quantity} units already dispatched"
            )

        delta = qty.value - line.quantity.value
        if delta == 0:
            return line

        structure = self._ledger.get(line.structure_id)
        if delta > 0:
            ceiling = self._ceiling(project, structure, line)
            if qty.value > ceiling:
                raise OverAllocationError(
                    f"Cannot raise {structure.name} to {qty.value} "
                    f"— ceiling is {ceiling}"
                )
            if project.is_locked:
                self._ledger.reserve(line.structure_id, delta)
        elif project.is_locked:
            self._ledger.release(line.structure_id, -delta)

        line.quantity = qty
        self._project_repo.save(project)
        return line

    def remove_line(self, project: Project, line_id: int, cascade: bool = False) -> AllocationLine:
        """Drop a line from the project.

        A line with dispatched units can only go when the caller explicitly
        authorises cascading removal of the dispatch items behind it.
        """
        project.ensure_editable()
        line = project.get_line(line_id)

        if line.dispatched_quantity > 0:
            if not cascade:
                raise HasDispatchesError(
                    f"Line #{line_id} has {line.dispatched_quantity} units dispatched; "
                    f"delete those dispatches first"
                )
            self._dispatch_ledger.void_line(project, line)

        project.remove_line(line_id)
        if project.is_locked:
            self._ledger.release(line.structure_id, line.quantity.value)

        self._project_repo.save(project)
        return line

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _ceiling(
        project: Project,
        structure: Structure,
        line: AllocationLine | None,
    ) -> int:
        own = line.quantity.value if (line is not None and project.is_locked) else 0
        return structure.available + own
