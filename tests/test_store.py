"""
Task Manager Test Suite — Task Store
======================================
Tests for TaskRecord and the append-only, lock-guarded TaskStore.

Usage:
    python -m pytest tests/test_store.py -v
"""
import sys
import os
import json
import threading
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from taskmanager.store import TaskRecord, TaskStore


# ─────────────────────────────────────────────
#  TaskRecord Tests
# ─────────────────────────────────────────────

class TestTaskRecord(unittest.TestCase):

    def test_defaults_are_empty_text(self):
        record = TaskRecord()
        self.assertEqual(record.title, "")
        self.assertEqual(record.description, "")

    def test_to_dict_uses_public_field_names(self):
        record = TaskRecord(title="Learn Go", description="Complete tutorials.")
        self.assertEqual(record.to_dict(),
                         {"title": "Learn Go", "description": "Complete tutorials."})

    def test_from_dict_ignores_unknown_keys(self):
        record = TaskRecord.from_dict({"title": "A", "description": "B", "id": 7})
        self.assertEqual(record, TaskRecord("A", "B"))

    def test_immutable(self):
        record = TaskRecord("A", "B")
        with self.assertRaises(AttributeError):
            record.title = "changed"


# ─────────────────────────────────────────────
#  TaskStore Tests
# ─────────────────────────────────────────────

class TestTaskStore(unittest.TestCase):

    def test_starts_empty(self):
        store = TaskStore()
        self.assertEqual(len(store), 0)
        self.assertEqual(store.snapshot(), ())
        self.assertEqual(store.to_json_list(), [])

    def test_append_preserves_order(self):
        store = TaskStore()
        store.append(TaskRecord("first", ""))
        store.append(TaskRecord("second", ""))
        store.append(TaskRecord("third", ""))
        self.assertEqual([r.title for r in store.snapshot()],
                         ["first", "second", "third"])

    def test_append_returns_new_length(self):
        store = TaskStore()
        self.assertEqual(store.append(TaskRecord("a", "")), 1)
        self.assertEqual(store.append(TaskRecord("b", "")), 2)

    def test_duplicates_allowed(self):
        store = TaskStore()
        store.append(TaskRecord("same", "same"))
        store.append(TaskRecord("same", "same"))
        self.assertEqual(len(store), 2)

    def test_snapshot_is_not_a_live_view(self):
        store = TaskStore()
        store.append(TaskRecord("a", ""))
        before = store.snapshot()
        store.append(TaskRecord("b", ""))
        self.assertEqual(len(before), 1)
        self.assertEqual(len(store.snapshot()), 2)

    def test_json_roundtrip_keeps_order(self):
        store = TaskStore()
        for i in range(5):
            store.append(TaskRecord(f"t{i}", f"d{i}"))
        encoded = json.dumps(store.to_json_list())
        decoded = [TaskRecord.from_dict(item) for item in json.loads(encoded)]
        self.assertEqual(tuple(decoded), store.snapshot())

    def test_concurrent_appends_lose_nothing(self):
        store = TaskStore()
        workers, per_worker = 8, 250

        def add_many(worker):
            for i in range(per_worker):
                store.append(TaskRecord(f"w{worker}", str(i)))

        threads = [threading.Thread(target=add_many, args=(w,)) for w in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        records = store.snapshot()
        self.assertEqual(len(records), workers * per_worker)
        self.assertEqual(len(set(records)), workers * per_worker)
        # Each worker's records keep their own relative order
        for w in range(workers):
            mine = [int(r.description) for r in records if r.title == f"w{w}"]
            self.assertEqual(mine, list(range(per_worker)))

    def test_snapshot_during_appends_sees_a_prefix(self):
        store = TaskStore()
        stop = threading.Event()
        seen = []

        def reader():
            while not stop.is_set():
                seen.append(store.snapshot())

        t = threading.Thread(target=reader)
        t.start()
        for i in range(500):
            store.append(TaskRecord(str(i), ""))
        stop.set()
        t.join()

        final = store.snapshot()
        for snap in seen:
            self.assertEqual(snap, final[:len(snap)])


if __name__ == "__main__":
    unittest.main()
