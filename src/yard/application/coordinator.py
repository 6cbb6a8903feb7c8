"""Allocation Coordinator — the single transactional boundary.

Every use case that changes stock, allocation lines or dispatches runs
inside ``AllocationCoordinator.transaction()``:

1. take the project lock (if the operation concerns a project),
2. open a unit of work,
3. take the structure locks before reading those structures,
4. run the domain services,
5. commit — or, on any exception, discard everything.

Business-rule rejections are logged and re-raised unchanged; they are
never retried here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass

from yard.application.locks import KeyedLocks
from yard.domain.exceptions import EntityNotFoundError, ValidationError
from yard.domain.model.project import Project
from yard.domain.repository.unit_of_work import UnitOfWork
from yard.domain.service.allocation_set import AllocationSet
from yard.domain.service.dispatch_ledger import DispatchLedger
from yard.domain.service.structure_ledger import StructureLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    """The domain services bound to one unit of work."""

    ledger: StructureLedger
    allocations: AllocationSet
    dispatches: DispatchLedger


def build_services(uow: UnitOfWork) -> Services:
    ledger = StructureLedger(uow.structures)
    dispatch_ledger = DispatchLedger(uow.dispatches, uow.projects, ledger)
    allocations = AllocationSet(uow.projects, ledger, dispatch_ledger)
    return Services(ledger=ledger, allocations=allocations, dispatches=dispatch_ledger)


class Transaction:
    """An open unit of work plus the locks it holds."""

    def __init__(self, uow: UnitOfWork, locks: KeyedLocks, stack: ExitStack) -> None:
        self.uow = uow
        self.services = build_services(uow)
        self._locks = locks
        self._stack = stack
        self._structures_locked = False

    def lock_structures(self, structure_ids: Iterable[int]) -> None:
        """Take the structure locks; allowed once per transaction."""
        if self._structures_locked:
            raise RuntimeError("Structure locks are already held by this transaction")
        self._stack.enter_context(self._locks.hold("structure", structure_ids))
        self._structures_locked = True

    def project(self, project_id: int) -> Project:
        project = self.uow.projects.get_by_id(project_id)
        if project is None:
            raise EntityNotFoundError(f"Project #{project_id} not found")
        return project


class AllocationCoordinator:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        locks: KeyedLocks | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks if locks is not None else KeyedLocks()

    @contextmanager
    def transaction(
        self,
        project_id: int | None = None,
        structure_ids: Iterable[int] | None = None,
    ) -> Iterator[Transaction]:
        """Run a block atomically; commit on success, discard on error."""
        with ExitStack() as stack:
            if project_id is not None:
                stack.enter_context(self._locks.hold("project", [project_id]))
            uow = stack.enter_context(self._uow_factory())
            tx = Transaction(uow, self._locks, stack)
            if structure_ids is not None:
                tx.lock_structures(structure_ids)
            try:
                yield tx
            except ValidationError as exc:
                logger.warning("Rejected: %s", exc)
                raise
            uow.commit()

    @contextmanager
    def read(self) -> Iterator[UnitOfWork]:
        """Open a unit of work for queries. Nothing is ever committed."""
        with self._uow_factory() as uow:
            yield uow

    # --- Advisory lookups (used to decide which locks to take) ---------------

    def locate_line(self, line_id: int) -> tuple[int, int]:
        """Return ``(project_id, structure_id)`` of an allocation line."""
        with self.read() as uow:
            project = uow.projects.get_by_line_id(line_id)
            if project is None:
                raise EntityNotFoundError(f"Allocation line #{line_id} not found")
            return project.id, project.get_line(line_id).structure_id  # type: ignore[return-value]

    def locate_dispatch(self, dispatch_id: int) -> int:
        """Return the project ID of a dispatch."""
        with self.read() as uow:
            dispatch = uow.dispatches.get_by_id(dispatch_id)
            if dispatch is None:
                raise EntityNotFoundError(f"Dispatch #{dispatch_id} not found")
            return dispatch.project_id
