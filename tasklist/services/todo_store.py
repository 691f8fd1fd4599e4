"""Task record store: id -> TodoItem, persisted to one JSON file, owner-scoped access."""

import logging
import os
from datetime import datetime, timezone

from tasklist.core.errors import InvalidInputError
from tasklist.core.storage import JsonFileStore
from tasklist.models.todo import TodoItem
from tasklist.schemas.todo import TodoWrite

logger = logging.getLogger(__name__)


class TodoStore:
    """
    CRUD over task records. Lookups that take a user_id only match records owned by that user;
    delete_for_admin matches by id alone and relies on the caller to have checked the role.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._store: JsonFileStore[TodoItem] = JsonFileStore(path, TodoItem)
        # Highest id handed out by this process, so ids of deleted records are not reissued.
        self._last_id = 0

    @property
    def backing_store(self) -> JsonFileStore[TodoItem]:
        return self._store

    def snapshot(self) -> list[TodoItem]:
        """Copies of every record, in storage order."""
        with self._store.transaction() as todos:
            return [t.model_copy() for t in todos]

    def create(self, item: TodoItem) -> TodoItem:
        """Assign the next id and creation time, append and persist."""
        if not item.user_id:
            raise InvalidInputError("User ID is required when creating a todo item.")
        if not item.title or not item.title.strip():
            raise InvalidInputError("Title is required.")

        with self._store.transaction() as todos:
            current_max = max((t.id for t in todos), default=0)
            self._last_id = max(self._last_id, current_max) + 1
            record = item.model_copy(
                update={"id": self._last_id, "created_at": datetime.now(timezone.utc)}
            )
            todos.append(record)
            self._store.save()
            logger.info("Todo created: id=%s owner=%s", record.id, record.user_id)
            return record.model_copy()

    def get_by_id(self, todo_id: int, user_id: str) -> TodoItem | None:
        with self._store.transaction() as todos:
            item = _find(todos, todo_id, user_id)
            return item.model_copy() if item is not None else None

    def update(self, todo_id: int, changes: TodoWrite, user_id: str) -> bool:
        """
        Merge title (when given), completed and due_date into the owned record.
        completed and due_date are always overwritten, so an omitted value resets them.
        """
        with self._store.transaction() as todos:
            item = _find(todos, todo_id, user_id)
            if item is None:
                return False
            if changes.title is not None:
                item.title = changes.title
            item.completed = changes.completed
            item.due_date = changes.due_date
            self._store.save()
            logger.info("Todo updated: id=%s owner=%s", todo_id, user_id)
            return True

    def mark_completed(self, todo_id: int, user_id: str) -> TodoItem | None:
        with self._store.transaction() as todos:
            item = _find(todos, todo_id, user_id)
            if item is None:
                return None
            item.completed = True
            self._store.save()
            logger.info("Todo completed: id=%s owner=%s", todo_id, user_id)
            return item.model_copy()

    def delete(self, todo_id: int, user_id: str) -> bool:
        with self._store.transaction() as todos:
            item = _find(todos, todo_id, user_id)
            if item is None:
                return False
            todos.remove(item)
            self._store.save()
            logger.info("Todo deleted: id=%s owner=%s", todo_id, user_id)
            return True

    def delete_for_admin(self, todo_id: int) -> bool:
        with self._store.transaction() as todos:
            item = next((t for t in todos if t.id == todo_id), None)
            if item is None:
                return False
            todos.remove(item)
            self._store.save()
            logger.info("Todo deleted by admin: id=%s owner=%s", todo_id, item.user_id)
            return True


def _find(todos: list[TodoItem], todo_id: int, user_id: str) -> TodoItem | None:
    return next((t for t in todos if t.id == todo_id and t.user_id == user_id), None)
