"""End-to-end allocation scenarios through the application handlers."""

import pytest

from yard.application.add_allocation_line import AddAllocationLineHandler
from yard.application.change_project_status import (
    ActivateProjectHandler,
    FinishProjectHandler,
    StartProjectHandler,
)
from yard.application.create_dispatch import CreateDispatchHandler
from yard.application.create_project import CreateProjectHandler
from yard.application.delete_dispatch import DeleteDispatchHandler
from yard.application.delete_project import DeleteProjectHandler
from yard.application.dto import CarrierSpec, DispatchItemSpec
from yard.application.get_allocation_ceiling import GetAllocationCeilingHandler
from yard.application.get_structure import GetStructureHandler
from yard.application.set_allocation_quantity import SetAllocationQuantityHandler
from yard.application.set_stock import SetStockHandler
from yard.application.show_project import ShowProjectHandler
from yard.domain.exceptions import (
    CapacityError,
    EntityNotFoundError,
    OverAllocationError,
    ProjectStateError,
)
from yard.domain.model.project import ProjectStatus
from tests.fakes import make_coordinator, seed_structure

CARRIER = CarrierSpec(first_name="Ana", last_name="Lopez", tax_id="27-1")


def _setup(stock: int = 10):
    coordinator, store = make_coordinator()
    sid = seed_structure(store, "Frame", stock)
    return coordinator, store, sid


def _available(coordinator, sid: int) -> int:
    return GetStructureHandler(coordinator).handle(sid).available


def _project_with_line(coordinator, sid: int, qty: int, name: str = "Stage"):
    pid = CreateProjectHandler(coordinator).handle(name)
    line_id = AddAllocationLineHandler(coordinator).handle(pid, sid, qty)
    return pid, line_id


class TestProjectLifecycle:

    def test_full_walkthrough(self):
        coordinator, _, sid = _setup()

        # Draft lines do not touch availability
        pid, line_id = _project_with_line(coordinator, sid, 4)
        assert _available(coordinator, sid) == 10

        # Activation locks the line
        ActivateProjectHandler(coordinator).handle(pid)
        assert _available(coordinator, sid) == 6

        # A dispatch consumes remaining, not availability
        dispatch = CreateDispatchHandler(coordinator).handle(
            pid, CARRIER, [DispatchItemSpec(line_id, 3)]
        )
        line = ShowProjectHandler(coordinator).handle(pid).lines[0]
        assert (line.dispatched_quantity, line.remaining) == (3, 1)
        assert _available(coordinator, sid) == 6
        assert GetStructureHandler(coordinator).handle(sid).in_use == 3

        # Deleting the dispatch gives the remaining back
        DeleteDispatchHandler(coordinator).handle(dispatch.id)
        line = ShowProjectHandler(coordinator).handle(pid).lines[0]
        assert (line.dispatched_quantity, line.remaining) == (0, 4)
        assert _available(coordinator, sid) == 6

        # Deleting the project releases the stock
        DeleteProjectHandler(coordinator).handle(pid)
        assert _available(coordinator, sid) == 10
        project = ShowProjectHandler(coordinator).handle(pid)
        assert project.status == "DELETED"
        assert project.lines == []

    def test_start_and_finish_keep_stock_locked(self):
        coordinator, _, sid = _setup()
        pid, _ = _project_with_line(coordinator, sid, 4)
        ActivateProjectHandler(coordinator).handle(pid)
        StartProjectHandler(coordinator).handle(pid)
        FinishProjectHandler(coordinator).handle(pid)

        assert ShowProjectHandler(coordinator).handle(pid).status == "FINISHED"
        assert _available(coordinator, sid) == 6

    def test_finished_project_cannot_be_deleted(self):
        coordinator, _, sid = _setup()
        pid, _ = _project_with_line(coordinator, sid, 4)
        ActivateProjectHandler(coordinator).handle(pid)
        StartProjectHandler(coordinator).handle(pid)
        FinishProjectHandler(coordinator).handle(pid)

        with pytest.raises(ProjectStateError, match="FINISHED to DELETED"):
            DeleteProjectHandler(coordinator).handle(pid)
        assert _available(coordinator, sid) == 6

    def test_delete_draft_project(self):
        coordinator, _, sid = _setup()
        pid, _ = _project_with_line(coordinator, sid, 4)

        DeleteProjectHandler(coordinator).handle(pid)

        assert _available(coordinator, sid) == 10
        assert ShowProjectHandler(coordinator).handle(pid).status == "DELETED"

    def test_delete_project_with_dispatches_voids_them(self):
        coordinator, _, sid = _setup()
        pid, line_id = _project_with_line(coordinator, sid, 4)
        ActivateProjectHandler(coordinator).handle(pid)
        CreateDispatchHandler(coordinator).handle(pid, CARRIER, [DispatchItemSpec(line_id, 2)])

        DeleteProjectHandler(coordinator).handle(pid)

        structure = GetStructureHandler(coordinator).handle(sid)
        assert (structure.available, structure.in_use) == (10, 0)

    def test_unknown_project(self):
        coordinator, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Project #42 not found"):
            ActivateProjectHandler(coordinator).handle(42)


class TestActivation:

    def test_full_reservation_blocks_another_project(self):
        coordinator, _, sid = _setup(stock=5)
        first, _ = _project_with_line(coordinator, sid, 5, "First")
        ActivateProjectHandler(coordinator).handle(first)
        assert _available(coordinator, sid) == 0
        second = CreateProjectHandler(coordinator).handle("Second")
        ActivateProjectHandler(coordinator).handle(second)

        with pytest.raises(OverAllocationError, match="only 0 available"):
            AddAllocationLineHandler(coordinator).handle(second, sid, 1)

        assert ShowProjectHandler(coordinator).handle(second).lines == []
        assert _available(coordinator, sid) == 0

    def test_activation_fails_when_stock_taken(self):
        coordinator, _, sid = _setup()
        p1, _ = _project_with_line(coordinator, sid, 10, "First")
        p2, _ = _project_with_line(coordinator, sid, 1, "Second")
        ActivateProjectHandler(coordinator).handle(p1)

        with pytest.raises(OverAllocationError, match="Insufficient availability for Frame"):
            ActivateProjectHandler(coordinator).handle(p2)

        assert ShowProjectHandler(coordinator).handle(p2).status == "DRAFT"
        assert _available(coordinator, sid) == 0

    def test_activating_twice_reserves_once(self):
        coordinator, _, sid = _setup()
        pid, _ = _project_with_line(coordinator, sid, 4)
        ActivateProjectHandler(coordinator).handle(pid)

        with pytest.raises(ProjectStateError):
            ActivateProjectHandler(coordinator).handle(pid)

        assert _available(coordinator, sid) == 6

    def test_failed_activation_leaves_no_partial_reservation(self):
        coordinator, store, sid = _setup()
        other = seed_structure(store, "Platform", 2)
        pid = CreateProjectHandler(coordinator).handle("Stage")
        AddAllocationLineHandler(coordinator).handle(pid, sid, 4)
        AddAllocationLineHandler(coordinator).handle(pid, other, 2)
        SetStockHandler(coordinator).handle(other, 1)

        with pytest.raises(OverAllocationError, match="Platform"):
            ActivateProjectHandler(coordinator).handle(pid)

        assert _available(coordinator, sid) == 10
        assert _available(coordinator, other) == 1


class TestCeiling:

    def test_ceiling_query(self):
        coordinator, _, sid = _setup()
        other, _ = _project_with_line(coordinator, sid, 3, "Other")
        ActivateProjectHandler(coordinator).handle(other)
        pid, line_id = _project_with_line(coordinator, sid, 2)
        ceiling = GetAllocationCeilingHandler(coordinator)

        assert ceiling.handle(pid, sid) == 7
        ActivateProjectHandler(coordinator).handle(pid)
        assert ceiling.handle(pid, sid) == 7
        assert _available(coordinator, sid) == 5

        SetAllocationQuantityHandler(coordinator).handle(line_id, 7)
        assert _available(coordinator, sid) == 0
        with pytest.raises(OverAllocationError):
            SetAllocationQuantityHandler(coordinator).handle(line_id, 8)


class TestStock:

    def test_stock_cannot_drop_below_reserved(self):
        coordinator, _, sid = _setup()
        pid, _ = _project_with_line(coordinator, sid, 4)
        ActivateProjectHandler(coordinator).handle(pid)

        with pytest.raises(CapacityError):
            SetStockHandler(coordinator).handle(sid, 3)

        dto = SetStockHandler(coordinator).handle(sid, 4)
        assert (dto.stock, dto.available) == (4, 0)


class TestTransactions:

    def test_rejected_operation_commits_nothing(self):
        coordinator, store, sid = _setup()
        pid, _ = _project_with_line(coordinator, sid, 4)
        commits = store.commits

        with pytest.raises(OverAllocationError):
            with coordinator.transaction(project_id=pid, structure_ids=[sid]) as tx:
                tx.services.ledger.reserve(sid, 3)
                tx.services.ledger.reserve(sid, 8)

        assert store.commits == commits
        assert _available(coordinator, sid) == 10

    def test_delete_and_recreate_dispatch_restores_state(self):
        coordinator, _, sid = _setup()
        pid, line_id = _project_with_line(coordinator, sid, 4)
        ActivateProjectHandler(coordinator).handle(pid)
        create = CreateDispatchHandler(coordinator)
        dispatch = create.handle(pid, CARRIER, [DispatchItemSpec(line_id, 3)])
        before = ShowProjectHandler(coordinator).handle(pid).lines

        DeleteDispatchHandler(coordinator).handle(dispatch.id)
        create.handle(pid, CARRIER, [DispatchItemSpec(line_id, 3)])

        assert ShowProjectHandler(coordinator).handle(pid).lines == before
        assert GetStructureHandler(coordinator).handle(sid).in_use == 3

    def test_status_stays_after_rollback(self):
        coordinator, _, sid = _setup()
        pid, _ = _project_with_line(coordinator, sid, 4)

        with pytest.raises(RuntimeError):
            with coordinator.transaction(project_id=pid) as tx:
                project = tx.project(pid)
                project.activate()
                tx.uow.projects.save(project)
                raise RuntimeError("boom")

        assert ShowProjectHandler(coordinator).handle(pid).status == ProjectStatus.DRAFT.value
