"""JSON-store-backed implementation of UnitOfWork.

Repositories stage their writes here; ``commit()`` merges the staged
rows into a fresh copy of the document in one atomic file replacement.
Inside a ``with`` block the unit of work holds the store's
inter-process lock, so nothing another process commits can slip in
between its reads and its commit.
"""

from __future__ import annotations

from contextlib import ExitStack

from yard.domain.repository.unit_of_work import UnitOfWork
from yard.infrastructure.persistence.json_dispatch_repository import JsonDispatchRepository
from yard.infrastructure.persistence.json_project_repository import JsonProjectRepository
from yard.infrastructure.persistence.json_store import TABLES, JsonStore
from yard.infrastructure.persistence.json_structure_repository import JsonStructureRepository
from yard.infrastructure.persistence.staged_table import StagedTable


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, store: JsonStore) -> None:
        self._store = store
        self._stack = ExitStack()
        self._tables = {name: StagedTable(store, name) for name in TABLES}
        self.structures = JsonStructureRepository(self._tables["structures"])
        self.projects = JsonProjectRepository(self._tables["projects"])
        self.dispatches = JsonDispatchRepository(self._tables["dispatches"])

    def __enter__(self) -> JsonUnitOfWork:
        self._stack.enter_context(self._store.exclusive())
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self._stack.close()

    def commit(self) -> None:
        changes = {
            name: dict(table.staged)
            for name, table in self._tables.items()
            if table.staged
        }
        if changes:
            self._store.apply(changes)
        self.rollback()

    def rollback(self) -> None:
        for table in self._tables.values():
            table.staged.clear()
