"""Unit tests for tasklist.services.todo_store: id assignment, owner scoping, persistence."""

import json
import tempfile
import threading
import unittest
from datetime import datetime
from pathlib import Path

from tasklist.core.errors import InvalidInputError, PersistenceError
from tasklist.models.todo import TodoItem
from tasklist.schemas.todo import TodoWrite
from tasklist.services.todo_store import TodoStore


def _item(title: str = "buy milk", owner: str | None = "alice", **kwargs: object) -> TodoItem:
    return TodoItem(title=title, user_id=owner, **kwargs)


class TodoStoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "data.json"
        self.store = TodoStore(self.path)

    def tearDown(self) -> None:
        self._tmp.cleanup()


class TestCreate(TodoStoreTestCase):
    def test_ids_start_at_one_and_increase(self) -> None:
        ids = [self.store.create(_item(f"task {n}")).id for n in range(5)]
        self.assertEqual(ids, [1, 2, 3, 4, 5])

    def test_create_sets_creation_time_and_owner(self) -> None:
        created = self.store.create(_item(description="2 litres"))
        self.assertEqual(created.user_id, "alice")
        self.assertEqual(created.description, "2 litres")
        self.assertFalse(created.completed)
        self.assertIsNotNone(created.created_at.tzinfo)

    def test_owner_is_required(self) -> None:
        for owner in (None, ""):
            with self.subTest(owner=owner):
                with self.assertRaises(InvalidInputError):
                    self.store.create(_item(owner=owner))

    def test_deleted_ids_are_not_reused(self) -> None:
        for n in range(3):
            self.store.create(_item(f"task {n}"))
        self.assertTrue(self.store.delete(3, "alice"))
        self.assertEqual(self.store.create(_item("next")).id, 4)
        self.assertTrue(self.store.delete(2, "alice"))
        self.assertEqual(self.store.create(_item("after")).id, 5)

    def test_next_id_after_restart_follows_max_on_disk(self) -> None:
        for n in range(3):
            self.store.create(_item(f"task {n}"))
        self.assertEqual(TodoStore(self.path).create(_item("next")).id, 4)

    def test_concurrent_creates_get_distinct_ids(self) -> None:
        def worker(n: int) -> None:
            for i in range(10):
                self.store.create(_item(f"w{n}-{i}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        ids = sorted(t.id for t in TodoStore(self.path).snapshot())
        self.assertEqual(ids, list(range(1, 81)))


class TestOwnerScoping(TodoStoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.todo = self.store.create(_item("buy milk", owner="alice"))

    def test_get_by_id_requires_owner(self) -> None:
        self.assertEqual(self.store.get_by_id(self.todo.id, "alice").title, "buy milk")
        self.assertIsNone(self.store.get_by_id(self.todo.id, "bob"))
        self.assertIsNone(self.store.get_by_id(999, "alice"))

    def test_update_merges_fields_for_owner_only(self) -> None:
        due = datetime(2030, 1, 15, 9, 30)
        self.assertFalse(self.store.update(self.todo.id, TodoWrite(title="hijack"), "bob"))
        self.assertTrue(
            self.store.update(self.todo.id, TodoWrite(title="buy oat milk", completed=True, due_date=due), "alice")
        )
        updated = self.store.get_by_id(self.todo.id, "alice")
        self.assertEqual(updated.title, "buy oat milk")
        self.assertTrue(updated.completed)
        self.assertEqual(updated.due_date, due)
        self.assertEqual(updated.created_at, self.todo.created_at)

    def test_update_overwrites_completed_and_due_date(self) -> None:
        self.store.update(self.todo.id, TodoWrite(title="x", completed=True, due_date=datetime(2030, 1, 1)), "alice")
        self.store.update(self.todo.id, TodoWrite(), "alice")
        updated = self.store.get_by_id(self.todo.id, "alice")
        self.assertEqual(updated.title, "x")
        self.assertFalse(updated.completed)
        self.assertIsNone(updated.due_date)

    def test_mark_completed(self) -> None:
        self.assertIsNone(self.store.mark_completed(self.todo.id, "bob"))
        completed = self.store.mark_completed(self.todo.id, "alice")
        self.assertTrue(completed.completed)
        self.assertTrue(TodoStore(self.path).get_by_id(self.todo.id, "alice").completed)

    def test_delete_requires_owner(self) -> None:
        self.assertFalse(self.store.delete(self.todo.id, "bob"))
        self.assertTrue(self.store.delete(self.todo.id, "alice"))
        self.assertFalse(self.store.delete(self.todo.id, "alice"))

    def test_delete_for_admin_ignores_owner(self) -> None:
        self.assertTrue(self.store.delete_for_admin(self.todo.id))
        self.assertFalse(self.store.delete_for_admin(self.todo.id))
        self.assertEqual(self.store.snapshot(), [])


class TestPersistence(TodoStoreTestCase):
    def test_file_uses_camel_case_keys(self) -> None:
        self.store.create(_item(due_date=datetime(2030, 5, 1)))
        record = json.loads(self.path.read_text(encoding="utf-8"))[0]
        self.assertEqual(
            set(record),
            {"id", "title", "description", "dueDate", "completed", "createdAt", "userId"},
        )
        self.assertEqual(record["userId"], "alice")

    def test_round_trip_through_file(self) -> None:
        created = self.store.create(_item(description="d", due_date=datetime(2030, 5, 1, 12)))
        reloaded = TodoStore(self.path).get_by_id(created.id, "alice")
        self.assertEqual(reloaded, created)

    def test_write_failure_raises_persistence_error(self) -> None:
        # A directory where the data file should be cannot be replaced by a file.
        self.path.mkdir()
        with self.assertRaises(PersistenceError):
            self.store.create(_item())


if __name__ == "__main__":
    unittest.main()
