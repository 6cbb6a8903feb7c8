"""Unit tests for the StructureLedger domain service."""

import pytest

from yard.application.coordinator import build_services
from yard.domain.exceptions import EntityNotFoundError, OverAllocationError
from yard.domain.model.project import Project
from yard.domain.model.value_objects import Carrier
from tests.fakes import FakeStore, FakeUnitOfWork, seed_structure


def _setup(*stocks: int):
    store = FakeStore()
    ids = [seed_structure(store, f"Structure {i}", stock) for i, stock in enumerate(stocks)]
    uow = FakeUnitOfWork(store)
    return uow, build_services(uow), ids


def _draft(uow, services, lines: list[tuple[int, int]]) -> Project:
    project = Project.create("Test")
    uow.projects.save(project)
    for structure_id, qty in lines:
        services.allocations.add_line(project, structure_id, qty)
    return project


class TestLockProject:

    def test_reserves_every_line(self):
        uow, services, (a, b) = _setup(10, 5)
        project = _draft(uow, services, [(a, 4), (b, 5)])

        services.ledger.lock_project(project)

        assert services.ledger.available(a) == 6
        assert services.ledger.available(b) == 0

    def test_one_line_short_reserves_nothing(self):
        uow, services, (a, b) = _setup(10, 5)
        project = _draft(uow, services, [(a, 4), (b, 5)])
        services.ledger.reserve(b, 1)

        with pytest.raises(OverAllocationError, match="Structure 1"):
            services.ledger.lock_project(project)

        assert services.ledger.available(a) == 10
        assert services.ledger.available(b) == 4

    def test_release_project(self):
        uow, services, (a,) = _setup(10)
        project = _draft(uow, services, [(a, 4)])
        services.ledger.lock_project(project)

        services.ledger.release_project(project)

        assert services.ledger.available(a) == 10

    def test_unknown_structure(self):
        _, services, _ = _setup(10)
        with pytest.raises(EntityNotFoundError, match="#99 not found"):
            services.ledger.available(99)


class TestAudit:

    def test_consistent_state_has_no_drift(self):
        uow, services, (a, b) = _setup(10, 5)
        project = _draft(uow, services, [(a, 4), (b, 2)])
        services.ledger.lock_project(project)
        project.activate()
        line = project.find_line_for_structure(a)
        services.dispatches.create(project, Carrier.create("A", "B", tax_id="1"), [(line.id, 3)])

        assert services.ledger.audit(uow.projects, uow.dispatches) == []

    def test_draft_lines_do_not_count_as_reserved(self):
        uow, services, (a,) = _setup(10)
        _draft(uow, services, [(a, 4)])

        assert services.ledger.audit(uow.projects, uow.dispatches) == []

    def test_detects_tampered_reserved(self):
        uow, services, (a,) = _setup(10)
        structure = services.ledger.get(a)
        structure.reserved = 3
        uow.structures.save(structure)

        drifts = services.ledger.audit(uow.projects, uow.dispatches)

        assert len(drifts) == 1
        assert drifts[0].figure == "reserved"
        assert drifts[0].recorded == 3
        assert drifts[0].expected == 0

    def test_detects_line_out_of_step_with_items(self):
        uow, services, (a,) = _setup(10)
        project = _draft(uow, services, [(a, 4)])
        project.lines[0].dispatched_quantity = 2
        uow.projects.save(project)

        figures = {d.figure for d in services.ledger.audit(uow.projects, uow.dispatches)}

        assert figures == {"in_use", f"line #{project.lines[0].id} dispatched"}
