"""Domain service: Dispatch Ledger.

Records physical hand-offs of reserved material to a driver and rolls
them back. Every dispatch item consumes part of one allocation line's
remaining quantity and puts the same number of units "in use" on the
structure; deleting the dispatch gives both back.
"""

from __future__ import annotations

from yard.domain.exceptions import EntityNotFoundError, InsufficientRemainingError
from yard.domain.model.dispatch import Dispatch, DispatchItem
from yard.domain.model.project import AllocationLine, Project
from yard.domain.model.value_objects import Carrier, Quantity
from yard.domain.repository.dispatch_repository import DispatchRepository
from yard.domain.repository.project_repository import ProjectRepository
from yard.domain.service.structure_ledger import StructureLedger


class DispatchLedger:

    def __init__(
        self,
        dispatch_repo: DispatchRepository,
        project_repo: ProjectRepository,
        ledger: StructureLedger,
    ) -> None:
        self._dispatch_repo = dispatch_repo
        self._project_repo = project_repo
        self._ledger = ledger

    def get(self, dispatch_id: int) -> Dispatch:
        dispatch = self._dispatch_repo.get_by_id(dispatch_id)
        if dispatch is None:
            raise EntityNotFoundError(f"Dispatch #{dispatch_id} not found")
        return dispatch

    def create(
        self,
        project: Project,
        carrier: Carrier,
        items: list[tuple[int, int]],
    ) -> Dispatch:
        """Hand over ``(line_id, quantity)`` pairs of a project to *carrier*.

        All-or-nothing: every item is checked against its line's remaining
        quantity before any line is touched.
        """
        project.ensure_dispatchable()

        dispatch = Dispatch.create(
            project_id=project.id,  # type: ignore[arg-type]
            carrier=carrier,
            items=[
                DispatchItem(id=None, line_id=line_id, quantity=Quantity(qty))
                for line_id, qty in items
            ],
        )

        # Phase 1: resolve lines and validate remaining quantities
        pending: list[tuple[AllocationLine, int]] = []
        for item in dispatch.items:
            line = project.get_line(item.line_id)
            qty = item.quantity.value
            if qty > line.remaining:
                raise InsufficientRemainingError(
                    f"Cannot dispatch {qty} units on line #{line.id} "
                    f"— only {line.remaining} remaining"
                )
            pending.append((line, qty))

        # Phase 2: mutate and persist
        for line, qty in pending:
            line.dispatch(qty)
            self._ledger.hand_out(line.structure_id, qty)

        self._project_repo.save(project)
        self._dispatch_repo.save(dispatch)
        return dispatch

    def update_carrier(self, dispatch_id: int, carrier: Carrier) -> Dispatch:
        dispatch = self.get(dispatch_id)
        dispatch.update_carrier(carrier)
        self._dispatch_repo.save(dispatch)
        return dispatch

    def delete(self, dispatch: Dispatch, project: Project) -> None:
        """Roll back a dispatch: lines regain their remaining quantity."""
        self._roll_back_items(project, dispatch.items)
        self._dispatch_repo.delete(dispatch.id)  # type: ignore[arg-type]
        self._project_repo.save(project)

    def void_line(self, project: Project, line: AllocationLine) -> int:
        """Remove every dispatch item that references *line*.

        Dispatches left without items are deleted. Returns the number of
        units rolled back. The caller saves the project.
        """
        rolled_back = 0
        for dispatch in self._dispatch_repo.list_by_project(project.id):  # type: ignore[arg-type]
            removed = dispatch.remove_items_for_line(line.id)  # type: ignore[arg-type]
            if not removed:
                continue
            rolled_back += self._roll_back_items(project, removed)
            if dispatch.is_empty:
                self._dispatch_repo.delete(dispatch.id)  # type: ignore[arg-type]
            else:
                self._dispatch_repo.save(dispatch)
        return rolled_back

    def void_project(self, project: Project) -> int:
        """Delete every dispatch of a project. Returns how many were voided.

        The caller saves the project.
        """
        dispatches = self._dispatch_repo.list_by_project(project.id)  # type: ignore[arg-type]
        for dispatch in dispatches:
            self._roll_back_items(project, dispatch.items)
            self._dispatch_repo.delete(dispatch.id)  # type: ignore[arg-type]
        return len(dispatches)

    # --- Internal helpers -----------------------------------------------------

    def _roll_back_items(self, project: Project, items: list[DispatchItem]) -> int:
        total = 0
        for item in items:
            qty = item.quantity.value
            line = next((c for c in project.lines if c.id == item.line_id), None)
            if line is None:
                # The line is gone; its stock was already settled on removal.
                continue
            line.undo_dispatch(qty)
            self._ledger.take_back(line.structure_id, qty)
            total += qty
        return total
