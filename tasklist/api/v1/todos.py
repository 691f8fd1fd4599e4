"""Task record routes: owner-scoped CRUD, filtered listing and admin search."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status

from tasklist.api.v1.auth import require_admin, require_member
from tasklist.core.dependencies import get_todo_store
from tasklist.core.errors import InvalidInputError, NotFoundError
from tasklist.models.todo import TodoItem
from tasklist.schemas.auth import CurrentUser
from tasklist.schemas.todo import MessageResponse, TodoWrite
from tasklist.services.query import TodoQuery, list_todos
from tasklist.services.todo_store import TodoStore

router = APIRouter()


def _require_title(body: TodoWrite) -> str:
    if body.title is None or not body.title.strip():
        raise InvalidInputError("Title is required.")
    return body.title


@router.get("", response_model=list[TodoItem])
def get_todos(
    store: Annotated[TodoStore, Depends(get_todo_store)],
    user: Annotated[CurrentUser, Depends(require_member)],
    completed: Annotated[str | None, Query()] = None,
    due_date: Annotated[str | None, Query(alias="dueDate")] = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    title_filter: Annotated[str | None, Query(alias="titleFilter")] = None,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
    descending: bool = False,
) -> list[TodoItem]:
    """
    List to-do items with optional filters and sorting.

    Non-admins only ever see their own items (userId is ignored for them); admins may pass
    userId to narrow to one owner. Responds 404 when nothing matches.
    """
    query = TodoQuery(
        completed=completed,
        due_date=due_date,
        sort_by=sort_by,
        descending=descending,
        title_filter=title_filter,
        user_id=user_id,
    )
    todos = list_todos(store, query, caller_id=user.username, is_admin=user.is_admin)
    if not todos:
        raise NotFoundError("No to-do items found.")
    return todos


@router.get("/admin/search", response_model=list[TodoItem])
def admin_search(
    store: Annotated[TodoStore, Depends(get_todo_store)],
    admin: Annotated[CurrentUser, Depends(require_admin)],
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> list[TodoItem]:
    """All items owned by userId (admin only)."""
    if user_id is None or not user_id.strip():
        raise InvalidInputError("User ID is required for search.")
    todos = list_todos(store, TodoQuery(user_id=user_id), caller_id=admin.username, is_admin=True)
    if not todos:
        raise NotFoundError("No items found for the specified user.")
    return todos


@router.get("/{todo_id}", response_model=TodoItem)
def get_todo(
    todo_id: int,
    store: Annotated[TodoStore, Depends(get_todo_store)],
    user: Annotated[CurrentUser, Depends(require_member)],
) -> TodoItem:
    item = store.get_by_id(todo_id, user.username)
    if item is None:
        raise NotFoundError("Item not found or you don't have access to this item.")
    return item


@router.post("", response_model=TodoItem, status_code=status.HTTP_201_CREATED)
def create_todo(
    body: TodoWrite,
    request: Request,
    response: Response,
    store: Annotated[TodoStore, Depends(get_todo_store)],
    user: Annotated[CurrentUser, Depends(require_member)],
) -> TodoItem:
    """Create an item owned by the caller. Returns 201 with a Location header."""
    title = _require_title(body)
    created = store.create(
        TodoItem(
            title=title,
            description=body.description,
            due_date=body.due_date,
            completed=body.completed,
            user_id=user.username,
        )
    )
    response.headers["Location"] = str(request.url_for("get_todo", todo_id=created.id))
    return created


@router.put("/{todo_id}", response_model=TodoItem)
def update_todo(
    todo_id: int,
    body: TodoWrite,
    store: Annotated[TodoStore, Depends(get_todo_store)],
    user: Annotated[CurrentUser, Depends(require_member)],
) -> TodoItem:
    """
    Replace title, completed and dueDate on an item the caller owns.
    Omitted completed/dueDate reset to false/none.
    """
    _require_title(body)
    if not store.update(todo_id, body, user.username):
        raise NotFoundError("Item not found or you don't have permission to edit it.")
    updated = store.get_by_id(todo_id, user.username)
    if updated is None:
        raise NotFoundError("Item not found or you don't have permission to edit it.")
    return updated


@router.put("/{todo_id}/complete", response_model=TodoItem)
def complete_todo(
    todo_id: int,
    store: Annotated[TodoStore, Depends(get_todo_store)],
    user: Annotated[CurrentUser, Depends(require_member)],
) -> TodoItem:
    item = store.mark_completed(todo_id, user.username)
    if item is None:
        raise NotFoundError("Item not found or you don't have permission to complete this item.")
    return item


@router.delete("/{todo_id}", response_model=MessageResponse)
def delete_todo(
    todo_id: int,
    store: Annotated[TodoStore, Depends(get_todo_store)],
    user: Annotated[CurrentUser, Depends(require_member)],
) -> MessageResponse:
    """Owners delete their own items; admins may delete any item."""
    if user.is_admin:
        deleted = store.delete_for_admin(todo_id)
    else:
        deleted = store.delete(todo_id, user.username)
    if not deleted:
        raise NotFoundError("Item not found or you don't have permission to delete.")
    return MessageResponse(message="Item deleted successfully.")
