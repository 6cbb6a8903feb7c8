"""One table of the JSON store as seen from inside a unit of work.

Reads go to the file on every call, with the rows staged by the current
unit of work laid on top. Writes only touch the staging area.
"""

from __future__ import annotations

from yard.infrastructure.persistence.json_store import JsonStore


class StagedTable:

    def __init__(self, store: JsonStore, name: str) -> None:
        self.store = store
        self.name = name
        self.staged: dict[int, dict | None] = {}

    def get(self, row_id: int) -> dict | None:
        if row_id in self.staged:
            return self.staged[row_id]
        for raw in self.store.read_table(self.name):
            if raw["id"] == row_id:
                return raw
        return None

    def rows(self) -> list[dict]:
        records = {raw["id"]: raw for raw in self.store.read_table(self.name)}
        for row_id, raw in self.staged.items():
            if raw is None:
                records.pop(row_id, None)
            else:
                records[row_id] = raw
        return sorted(records.values(), key=lambda r: r["id"])

    def put(self, raw: dict) -> None:
        self.staged[raw["id"]] = raw

    def remove(self, row_id: int) -> None:
        self.staged[row_id] = None

    def next_id(self, sequence: str | None = None) -> int:
        return self.store.next_id(sequence or self.name)
