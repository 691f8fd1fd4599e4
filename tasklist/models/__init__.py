"""Persisted entities (accounts and task records)."""

from tasklist.models.account import Account, Role
from tasklist.models.base import CamelModel
from tasklist.models.todo import TodoItem

__all__ = ["Account", "CamelModel", "Role", "TodoItem"]
