"""Integration tests for the dispatch use cases."""

from datetime import datetime, timedelta, timezone

import pytest

from yard.application.add_allocation_line import AddAllocationLineHandler
from yard.application.audit_ledger import AuditLedgerHandler
from yard.application.change_project_status import ActivateProjectHandler
from yard.application.create_dispatch import CreateDispatchHandler
from yard.application.create_project import CreateProjectHandler
from yard.application.delete_dispatch import DeleteDispatchHandler
from yard.application.dto import CarrierSpec, DispatchItemSpec
from yard.application.get_structure import GetStructureHandler
from yard.application.list_dispatches import DispatchFilters, ListDispatchesHandler
from yard.application.remove_allocation_line import RemoveAllocationLineHandler
from yard.application.set_allocation_quantity import SetAllocationQuantityHandler
from yard.application.show_project import ShowProjectHandler
from yard.application.update_dispatch import UpdateDispatchHandler
from yard.domain.exceptions import (
    BelowDispatchedError,
    EntityNotFoundError,
    HasDispatchesError,
    InsufficientRemainingError,
    ValidationError,
)
from tests.fakes import make_coordinator, seed_structure

ANA = CarrierSpec(first_name="Ana", last_name="Lopez", tax_id="27-1", license_plate="aa 111 aa")
LUIS = CarrierSpec(first_name="Luis", last_name="Diaz", license_plate="BB 222 BB")


def _setup():
    """Two active projects sharing a frame stock of 20."""
    coordinator, store = make_coordinator()
    frame = seed_structure(store, "Frame", 20)
    platform = seed_structure(store, "Platform", 6)
    add = AddAllocationLineHandler(coordinator)

    first = CreateProjectHandler(coordinator).handle("First")
    frame_line = add.handle(first, frame, 8)
    platform_line = add.handle(first, platform, 4)
    second = CreateProjectHandler(coordinator).handle("Second")
    other_line = add.handle(second, frame, 5)
    for pid in (first, second):
        ActivateProjectHandler(coordinator).handle(pid)

    return coordinator, (first, frame_line, platform_line), (second, other_line), frame


class TestCreateDispatch:

    def test_multi_item_dispatch(self):
        coordinator, (pid, frame_line, platform_line), _, _ = _setup()

        dto = CreateDispatchHandler(coordinator).handle(
            pid, ANA, [DispatchItemSpec(frame_line, 5), DispatchItemSpec(platform_line, 4)]
        )

        assert dto.driver == "Ana Lopez"
        assert dto.license_plate == "AA 111 AA"
        assert dto.total_quantity == 9
        remaining = {line.id: line.remaining for line in ShowProjectHandler(coordinator).handle(pid).lines}
        assert remaining == {frame_line: 3, platform_line: 0}

    def test_line_of_another_project_rejected(self):
        coordinator, (pid, _, _), (_, other_line), _ = _setup()
        with pytest.raises(EntityNotFoundError, match=f"#{other_line}"):
            CreateDispatchHandler(coordinator).handle(pid, ANA, [DispatchItemSpec(other_line, 1)])

    def test_carrier_needs_tax_id_or_plate(self):
        coordinator, (pid, frame_line, _), _, _ = _setup()
        with pytest.raises(ValidationError, match="tax ID or a license plate"):
            CreateDispatchHandler(coordinator).handle(
                pid, CarrierSpec("Ana", "Lopez"), [DispatchItemSpec(frame_line, 1)]
            )

    def test_second_dispatch_limited_by_remaining(self):
        coordinator, (pid, frame_line, _), _, _ = _setup()
        create = CreateDispatchHandler(coordinator)
        create.handle(pid, ANA, [DispatchItemSpec(frame_line, 6)])

        with pytest.raises(InsufficientRemainingError, match="only 2 remaining"):
            create.handle(pid, LUIS, [DispatchItemSpec(frame_line, 3)])


class TestUpdateDispatch:

    def test_update_carrier_keeps_items(self):
        coordinator, (pid, frame_line, _), _, _ = _setup()
        dto = CreateDispatchHandler(coordinator).handle(pid, ANA, [DispatchItemSpec(frame_line, 2)])

        updated = UpdateDispatchHandler(coordinator).handle(
            dto.id, last_name="Gomez", notes="back gate"
        )

        assert updated.driver == "Ana Gomez"
        assert updated.notes == "back gate"
        assert updated.tax_id == "27-1"
        assert updated.items == dto.items

    def test_unknown_dispatch(self):
        coordinator, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Dispatch #99"):
            UpdateDispatchHandler(coordinator).handle(99, first_name="X")

    def test_delete_unknown_dispatch(self):
        coordinator, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            DeleteDispatchHandler(coordinator).handle(99)


class TestLinesWithDispatches:

    def test_quantity_cannot_drop_below_dispatched(self):
        coordinator, (pid, frame_line, _), _, _ = _setup()
        CreateDispatchHandler(coordinator).handle(pid, ANA, [DispatchItemSpec(frame_line, 5)])

        with pytest.raises(BelowDispatchedError):
            SetAllocationQuantityHandler(coordinator).handle(frame_line, 4)

    def test_remove_line_requires_cascade(self):
        coordinator, (pid, frame_line, platform_line), _, frame = _setup()
        dto = CreateDispatchHandler(coordinator).handle(
            pid, ANA, [DispatchItemSpec(frame_line, 5), DispatchItemSpec(platform_line, 1)]
        )
        remove = RemoveAllocationLineHandler(coordinator)

        with pytest.raises(HasDispatchesError):
            remove.handle(frame_line)

        remove.handle(frame_line, cascade=True)

        structure = GetStructureHandler(coordinator).handle(frame)
        assert structure.in_use == 0
        assert structure.available == 15
        [left] = ListDispatchesHandler(coordinator).handle(DispatchFilters(project_id=pid))
        assert left.id == dto.id
        assert [i.line_id for i in left.items] == [platform_line]
        assert AuditLedgerHandler(coordinator).handle() == []


class TestListDispatches:

    def _history(self):
        coordinator, (first, frame_line, _), (second, other_line), _ = _setup()
        create = CreateDispatchHandler(coordinator)
        a = create.handle(first, ANA, [DispatchItemSpec(frame_line, 1)])
        b = create.handle(second, LUIS, [DispatchItemSpec(other_line, 1)])
        c = create.handle(first, LUIS, [DispatchItemSpec(frame_line, 2)])
        return coordinator, first, (a, b, c)

    def test_newest_first(self):
        coordinator, _, (a, b, c) = self._history()
        ids = [d.id for d in ListDispatchesHandler(coordinator).handle()]
        assert ids == [c.id, b.id, a.id]

    def test_filter_by_project(self):
        coordinator, first, (a, _, c) = self._history()
        ids = [d.id for d in ListDispatchesHandler(coordinator).handle(DispatchFilters(project_id=first))]
        assert ids == [c.id, a.id]

    def test_filter_by_carrier(self):
        coordinator, _, (a, b, c) = self._history()
        handler = ListDispatchesHandler(coordinator)

        by_tax = handler.handle(DispatchFilters(tax_id="27-1"))
        assert [d.id for d in by_tax] == [a.id]

        by_plate = handler.handle(DispatchFilters(license_plate="bb 222 bb"))
        assert [d.id for d in by_plate] == [c.id, b.id]

    def test_filter_by_date(self):
        coordinator, _, _ = self._history()
        today = datetime.now(timezone.utc).date()
        handler = ListDispatchesHandler(coordinator)

        assert len(handler.handle(DispatchFilters(date_from=today, date_to=today))) == 3
        assert handler.handle(DispatchFilters(date_to=today - timedelta(days=1))) == []
        assert handler.handle(DispatchFilters(date_from=today + timedelta(days=1))) == []
