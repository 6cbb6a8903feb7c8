"""JSON-file-backed store holding every table in one document.

All tables live in one JSON document so a commit is a single atomic
file replacement: either every change of a transaction is on disk or
none is.

Every ``yard`` command is its own process over the same file, so the
store also owns an inter-process lock (``<store>.lock``). A unit of work
holds it from before its first read until after its commit; two
processes can therefore never both pass a check against the same stale
figures.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock

TABLES = ("structures", "projects", "dispatches")


class JsonStore:

    def __init__(self, file_path: Path, lock_timeout: float = -1) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        # Reentrant within a thread; each thread gets its own lock handle.
        self._file_lock = FileLock(
            str(file_path.with_name(file_path.name + ".lock")),
            timeout=lock_timeout,
        )
        with self.exclusive():
            self._ensure_file()

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the inter-process lock; nestable within one thread."""
        with self._file_lock:
            yield

    def read_table(self, table: str) -> list[dict]:
        with self._lock:
            return self._load()[table]

    def next_id(self, sequence: str) -> int:
        """Hand out the next ID of a sequence; IDs are never reused."""
        with self.exclusive(), self._lock:
            data = self._load()
            value = data["sequences"].get(sequence, 0) + 1
            data["sequences"][sequence] = value
            self._persist(data)
            return value

    def apply(self, changes: dict[str, dict[int, dict | None]]) -> None:
        """Upsert (or, for ``None`` rows, delete) staged rows atomically."""
        with self.exclusive(), self._lock:
            data = self._load()
            for table, rows in changes.items():
                records = {raw["id"]: raw for raw in data[table]}
                for row_id, raw in rows.items():
                    if raw is None:
                        records.pop(row_id, None)
                    else:
                        records[row_id] = raw
                data[table] = sorted(records.values(), key=lambda r: r["id"])
            self._persist(data)

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> dict:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist(self, data: dict) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            empty = {table: [] for table in TABLES}
            empty["sequences"] = {}
            self._persist(empty)
