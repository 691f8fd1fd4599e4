"""Query engine: role-scoped filtering and sorting of task records."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from tasklist.models.todo import TodoItem, naive_utc
from tasklist.services.todo_store import TodoStore

SORT_KEYS = frozenset({"duedate", "title", "creationdate", "completed"})
# Non-ISO date forms accepted by the dueDate filter, tried in order.
FALLBACK_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%Y %H:%M:%S")


@dataclass(frozen=True)
class TodoQuery:
    """Raw list filters as they arrive on the query string; all optional."""

    completed: str | None = None
    due_date: str | None = None
    sort_by: str | None = None
    descending: bool = False
    title_filter: str | None = None
    user_id: str | None = None


def parse_date(value: str | None) -> date | None:
    """
    Calendar date from an ISO date/datetime string or a US-style "MM/DD/YYYY" date;
    None when missing or unparsable.
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    try:
        return naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00"))).date()
    except ValueError:
        pass
    for fmt in FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def scope_owner(requested: str | None, caller_id: str, is_admin: bool) -> str | None:
    """
    Owner the listing is restricted to. Non-admins are always pinned to themselves,
    whatever they asked for; admins see the requested owner, or everyone when none is given.
    """
    if not is_admin:
        return caller_id
    return requested or None


def filter_todos(
    todos: Iterable[TodoItem],
    owner: str | None = None,
    completed: str | None = None,
    due_date: str | None = None,
    title_filter: str | None = None,
) -> list[TodoItem]:
    """Apply every given filter (AND). Unparsable due dates are ignored rather than rejected."""
    result = list(todos)
    if owner:
        result = [t for t in result if t.user_id == owner]
    if completed:
        wanted = completed.strip().lower() == "true"
        result = [t for t in result if t.completed == wanted]
    due = parse_date(due_date)
    if due is not None:
        result = [t for t in result if t.due_date is not None and t.due_date.date() == due]
    if title_filter:
        needle = title_filter.casefold()
        result = [t for t in result if t.title and needle in t.title.casefold()]
    return result


def sort_todos(todos: list[TodoItem], sort_by: str | None, descending: bool = False) -> list[TodoItem]:
    """
    Stable sort by dueDate, title, creationDate or completed (key name case-insensitive).
    Unknown keys leave the order unchanged. Missing due dates sort first in either direction
    (minimum date ascending, maximum date descending).
    """
    key = (sort_by or "").strip().lower()
    if key not in SORT_KEYS:
        return list(todos)
    if key == "duedate":
        missing = datetime.max if descending else datetime.min
        return sorted(todos, key=lambda t: t.due_date or missing, reverse=descending)
    if key == "title":
        return sorted(todos, key=lambda t: (t.title.casefold(), t.title), reverse=descending)
    if key == "creationdate":
        return sorted(todos, key=lambda t: t.created_at, reverse=descending)
    return sorted(todos, key=lambda t: t.completed, reverse=descending)


def list_todos(store: TodoStore, query: TodoQuery, caller_id: str, is_admin: bool) -> list[TodoItem]:
    """
    Records visible to the caller that match the query, in the requested order.
    An empty list is a normal result; callers decide whether that is a 404.
    """
    owner = scope_owner(query.user_id, caller_id, is_admin)
    matches = filter_todos(
        store.snapshot(),
        owner=owner,
        completed=query.completed,
        due_date=query.due_date,
        title_filter=query.title_filter,
    )
    return sort_todos(matches, query.sort_by, query.descending)
