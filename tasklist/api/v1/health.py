"""Health check endpoint with a data-file writability check."""

from typing import Annotated

from fastapi import APIRouter, Depends

from tasklist.core.config import settings
from tasklist.core.dependencies import get_account_store, get_todo_store
from tasklist.schemas.health import HealthResponse
from tasklist.services.account_store import AccountStore
from tasklist.services.todo_store import TodoStore

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    accounts: Annotated[AccountStore, Depends(get_account_store)],
    todos: Annotated[TodoStore, Depends(get_todo_store)],
) -> HealthResponse:
    """
    Return service health status and whether both JSON data files can be written.
    Used by load balancers and monitoring.
    """
    writable = accounts.backing_store.is_writable() and todos.backing_store.is_writable()
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        storage="writable" if writable else "read-only",
    )
