"""Process-wide stores and services, exposed as FastAPI dependencies."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from tasklist.core.config import get_settings
from tasklist.core.security import TokenService
from tasklist.services.account_store import AccountStore
from tasklist.services.session import SessionService
from tasklist.services.todo_store import TodoStore


@lru_cache
def get_account_store() -> AccountStore:
    return AccountStore(get_settings().ACCOUNTS_FILE)


@lru_cache
def get_todo_store() -> TodoStore:
    return TodoStore(get_settings().TODOS_FILE)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService.from_settings(get_settings())


def get_session_service(
    accounts: Annotated[AccountStore, Depends(get_account_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> SessionService:
    """Session flow over the shared account store and token service."""
    return SessionService(accounts, tokens)
