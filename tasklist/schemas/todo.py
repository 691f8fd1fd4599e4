"""Request/response schemas for task record endpoints."""

from datetime import datetime

from pydantic import Field, field_validator

from tasklist.models.base import CamelModel
from tasklist.models.todo import naive_utc

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 4_000


class TodoWrite(CamelModel):
    """
    Body for POST /todos and PUT /todos/{id}.

    title is required by both routes (checked there so a blank title is a 400, not a schema error).
    On update, completed and dueDate replace the stored values; description is only used on create.
    """

    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    due_date: datetime | None = None
    completed: bool = False

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime | None) -> datetime | None:
        return naive_utc(v)


class MessageResponse(CamelModel):
    """Plain acknowledgement (e.g. after delete)."""

    message: str
