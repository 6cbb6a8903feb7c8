"""Integration tests for the structure catalogue use cases."""

import pytest

from yard.application.add_allocation_line import AddAllocationLineHandler
from yard.application.change_project_status import ActivateProjectHandler
from yard.application.create_project import CreateProjectHandler
from yard.application.create_structure import CreateStructureHandler
from yard.application.get_structure import GetStructureHandler, ListStructuresHandler
from yard.application.set_stock import SetStockHandler
from yard.application.update_structure import UpdateStructureHandler
from yard.domain.exceptions import EntityNotFoundError, ValidationError
from tests.fakes import make_coordinator, seed_structure


class TestCreateStructure:

    def test_create(self):
        coordinator, _ = make_coordinator()
        dto = CreateStructureHandler(coordinator).handle("Frame 2m", 40, category_id="frames")

        assert dto.id is not None
        assert (dto.stock, dto.reserved, dto.available, dto.in_use) == (40, 0, 40, 0)
        assert GetStructureHandler(coordinator).handle(dto.id) == dto

    def test_duplicate_name_rejected(self):
        coordinator, store = make_coordinator()
        handler = CreateStructureHandler(coordinator)
        handler.handle("Frame", 10)

        with pytest.raises(ValidationError, match="already exists"):
            handler.handle("frame", 5)
        assert len(store.tables["structures"]) == 1

    def test_unknown_structure(self):
        coordinator, _ = make_coordinator()
        with pytest.raises(EntityNotFoundError):
            GetStructureHandler(coordinator).handle(7)


class TestListStructures:

    def test_sorted_by_name_and_filtered(self):
        coordinator, _ = make_coordinator()
        create = CreateStructureHandler(coordinator)
        create.handle("Platform", 5, category_id="decks")
        create.handle("brace", 8, category_id="frames")
        create.handle("Frame", 10, category_id="frames")

        names = [s.name for s in ListStructuresHandler(coordinator).handle()]
        assert names == ["brace", "Frame", "Platform"]

        frames = ListStructuresHandler(coordinator).handle(category_id="frames")
        assert [s.name for s in frames] == ["brace", "Frame"]


class TestSetStock:

    def test_set_stock(self):
        coordinator, _ = make_coordinator()
        dto = CreateStructureHandler(coordinator).handle("Frame", 10)

        updated = SetStockHandler(coordinator).handle(dto.id, 25)

        assert updated.stock == 25
        assert GetStructureHandler(coordinator).handle(dto.id).available == 25

    def test_negative_rejected(self):
        coordinator, _ = make_coordinator()
        dto = CreateStructureHandler(coordinator).handle("Frame", 10)
        with pytest.raises(ValidationError, match="cannot be negative"):
            SetStockHandler(coordinator).handle(dto.id, -1)


class TestUpdateStructure:

    def test_update_details(self):
        coordinator, _ = make_coordinator()
        dto = CreateStructureHandler(coordinator).handle("Frame", 10, category_id="frames")

        updated = UpdateStructureHandler(coordinator).handle(
            dto.id, name="Frame 2m", measure="2m x 1m", description="Galvanised"
        )

        assert (updated.name, updated.category_id) == ("Frame 2m", "frames")
        assert (updated.measure, updated.description) == ("2m x 1m", "Galvanised")
        assert GetStructureHandler(coordinator).handle(dto.id) == updated

    def test_stock_and_reservations_untouched(self):
        coordinator, store = make_coordinator()
        sid = seed_structure(store, "Frame", 10)
        pid = CreateProjectHandler(coordinator).handle("Stage")
        AddAllocationLineHandler(coordinator).handle(pid, sid, 4)
        ActivateProjectHandler(coordinator).handle(pid)

        updated = UpdateStructureHandler(coordinator).handle(sid, category_id="frames")

        assert (updated.stock, updated.reserved, updated.available) == (10, 4, 6)

    def test_rename_to_existing_name_rejected(self):
        coordinator, _ = make_coordinator()
        create = CreateStructureHandler(coordinator)
        create.handle("Frame", 10)
        platform = create.handle("Platform", 5)

        with pytest.raises(ValidationError, match="already exists"):
            UpdateStructureHandler(coordinator).handle(platform.id, name="FRAME")
        assert GetStructureHandler(coordinator).handle(platform.id).name == "Platform"

    def test_keeping_own_name_allowed(self):
        coordinator, _ = make_coordinator()
        dto = CreateStructureHandler(coordinator).handle("Frame", 10)
        updated = UpdateStructureHandler(coordinator).handle(dto.id, name="frame")
        assert updated.name == "frame"

    def test_unknown_structure(self):
        coordinator, _ = make_coordinator()
        with pytest.raises(EntityNotFoundError, match="#9 not found"):
            UpdateStructureHandler(coordinator).handle(9, name="Frame")
