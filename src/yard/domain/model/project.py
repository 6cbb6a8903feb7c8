"""Project aggregate — the status state machine and its allocation set.

The Project is an aggregate root that owns its allocation lines.
Whether those lines hold stock depends on the status: a DRAFT project
only picks structures tentatively, every later status has them locked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from yard.domain.exceptions import (
    DuplicateAllocationError,
    EntityNotFoundError,
    InsufficientRemainingError,
    ProjectStateError,
    ValidationError,
)
from yard.domain.model.value_objects import Quantity


class ProjectStatus(Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    DELETED = "DELETED"


# Statuses in which the lines are subtracted from structure availability.
LOCKED_STATUSES = frozenset(
    {ProjectStatus.ACTIVE, ProjectStatus.IN_PROGRESS, ProjectStatus.FINISHED}
)

# Statuses in which material can be handed to a driver.
DISPATCHABLE_STATUSES = frozenset({ProjectStatus.ACTIVE, ProjectStatus.IN_PROGRESS})

_TRANSITIONS: dict[ProjectStatus, frozenset[ProjectStatus]] = {
    ProjectStatus.DRAFT: frozenset({ProjectStatus.ACTIVE, ProjectStatus.DELETED}),
    ProjectStatus.ACTIVE: frozenset({ProjectStatus.IN_PROGRESS, ProjectStatus.DELETED}),
    ProjectStatus.IN_PROGRESS: frozenset({ProjectStatus.FINISHED, ProjectStatus.DELETED}),
    ProjectStatus.FINISHED: frozenset(),
    ProjectStatus.DELETED: frozenset(),
}


@dataclass
class AllocationLine:
    """A (structure, quantity) reservation on one project.

    ``quantity`` is what the project asked for; ``dispatched_quantity``
    is the sum of every dispatch item handed over against this line.
    """

    id: int | None
    project_id: int | None
    structure_id: int
    quantity: Quantity
    dispatched_quantity: int = 0

    @property
    def remaining(self) -> int:
        return self.quantity.value - self.dispatched_quantity

    def dispatch(self, qty: int) -> None:
        """Record that *qty* units were handed to a driver."""
        if qty <= 0:
            raise ValidationError("Dispatch quantity must be positive")
        if qty > self.remaining:
            raise InsufficientRemainingError(
                f"Cannot dispatch {qty} units on line #{self.id} "
                f"— only {self.remaining} remaining"
            )
        self.dispatched_quantity += qty

    def undo_dispatch(self, qty: int) -> None:
        """Roll back a dispatch; never drops below zero."""
        if qty <= 0:
            raise ValidationError("Dispatch quantity must be positive")
        self.dispatched_quantity = max(0, self.dispatched_quantity - qty)


@dataclass
class Project:
    """Aggregate root for a rental project.

    Use the ``Project.create()`` factory for new projects. The
    ``__init__`` is intentionally simple so the repository can
    reconstitute persisted projects without re-validating.
    """

    id: int | None
    name: str
    lines: list[AllocationLine] = field(default_factory=list)
    status: ProjectStatus = ProjectStatus.DRAFT
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW projects only) ---------------------------------

    @staticmethod
    def create(name: str) -> Project:
        if not name or not name.strip():
            raise ValidationError("Project name is required")
        return Project(id=None, name=name.strip())

    # --- Status ---------------------------------------------------------------

    @property
    def is_locked(self) -> bool:
        """True when the lines are subtracted from structure availability."""
        return self.status in LOCKED_STATUSES

    @property
    def is_closed(self) -> bool:
        return self.status in (ProjectStatus.FINISHED, ProjectStatus.DELETED)

    def ensure_transition(self, target: ProjectStatus) -> None:
        if target not in _TRANSITIONS[self.status]:
            raise ProjectStateError(
                f"Cannot move project #{self.id} from {self.status.value} "
                f"to {target.value}"
            )

    def activate(self) -> None:
        """Transition DRAFT -> ACTIVE.

        Reserving stock for every line must happen *before* calling this
        (coordinated by the application handler via the ledger).
        """
        self._transition(ProjectStatus.ACTIVE)

    def start(self) -> None:
        """Transition ACTIVE -> IN_PROGRESS."""
        self._transition(ProjectStatus.IN_PROGRESS)

    def finish(self) -> None:
        """Transition IN_PROGRESS -> FINISHED."""
        self._transition(ProjectStatus.FINISHED)

    def delete(self) -> None:
        """Transition any non-FINISHED status -> DELETED and drop the lines.

        Releasing locked stock and voiding dispatches must happen *before*
        calling this.
        """
        self._transition(ProjectStatus.DELETED)
        self.lines = []

    def ensure_editable(self) -> None:
        if self.is_closed:
            raise ProjectStateError(
                f"Cannot change allocations of project #{self.id} "
                f"in {self.status.value} status"
            )

    def ensure_dispatchable(self) -> None:
        if self.status not in DISPATCHABLE_STATUSES:
            raise ProjectStateError(
                f"Cannot dispatch material for project #{self.id} "
                f"in {self.status.value} status"
            )

    # --- Allocation set -------------------------------------------------------

    def add_line(self, structure_id: int, quantity: Quantity) -> AllocationLine:
        self.ensure_editable()
        if self.find_line_for_structure(structure_id) is not None:
            raise DuplicateAllocationError(
                f"Structure #{structure_id} is already allocated to project "
                f"#{self.id}; change its quantity instead"
            )
        line = AllocationLine(
            id=None,
            project_id=self.id,
            structure_id=structure_id,
            quantity=quantity,
        )
        self.lines.append(line)
        return line

    def remove_line(self, line_id: int) -> AllocationLine:
        line = self.get_line(line_id)
        self.lines.remove(line)
        return line

    def get_line(self, line_id: int) -> AllocationLine:
        for line in self.lines:
            if line.id == line_id:
                return line
        raise EntityNotFoundError(
            f"Allocation line #{line_id} not found on project #{self.id}"
        )

    def find_line_for_structure(self, structure_id: int) -> AllocationLine | None:
        for line in self.lines:
            if line.structure_id == structure_id:
                return line
        return None

    @property
    def structure_ids(self) -> set[int]:
        return {line.structure_id for line in self.lines}

    @property
    def has_dispatches(self) -> bool:
        return any(line.dispatched_quantity > 0 for line in self.lines)

    # --- Internal helpers -----------------------------------------------------

    def _transition(self, target: ProjectStatus) -> None:
        self.ensure_transition(target)
        self.status = target
