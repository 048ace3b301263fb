"""
Task Store — In-Memory Task Collection
========================================
Holds every task created during the life of the server process.

Components:
    TaskRecord — One to-do item (title + description). Immutable.
    TaskStore  — Append-only, lock-guarded sequence of TaskRecords.

The store is created once by the application factory and handed to the
handlers that need it. Nothing is persisted: a restart starts empty.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, asdict


# ─────────────────────────────────────────────────────────────
#  Task Record
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TaskRecord:
    """A single task. No identifier: records are ordered by position only."""

    title: str = ""
    description: str = ""

    def to_dict(self) -> dict:
        """Serialize to the public JSON shape ``{title, description}``."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> TaskRecord:
        """Deserialize from dict, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items()
                      if k in cls.__dataclass_fields__})


# ─────────────────────────────────────────────────────────────
#  Task Store
# ─────────────────────────────────────────────────────────────

class TaskStore:
    """Append-only collection of TaskRecords, safe to share between requests.

    Every append is serialized by an internal lock, so concurrent POSTs
    never lose a record. ``snapshot()`` copies under the same lock and
    therefore always sees a complete prefix of the appends.
    """

    def __init__(self, records: tuple[TaskRecord, ...] | list[TaskRecord] = ()):
        self._lock = threading.Lock()
        self._records: list[TaskRecord] = list(records)

    def append(self, record: TaskRecord) -> int:
        """Add a record to the end. Returns the new length of the store."""
        with self._lock:
            self._records.append(record)
            return len(self._records)

    def snapshot(self) -> tuple[TaskRecord, ...]:
        """All records in creation order (a copy, never a live view)."""
        with self._lock:
            return tuple(self._records)

    def to_json_list(self) -> list[dict]:
        """Snapshot rendered as a list of ``{title, description}`` dicts."""
        return [record.to_dict() for record in self.snapshot()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __repr__(self) -> str:
        return f"TaskStore(records={len(self)})"
