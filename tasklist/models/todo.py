"""Task record entity."""

from datetime import datetime, timezone

from pydantic import Field, field_validator

from tasklist.models.base import CamelModel


def naive_utc(value: datetime | None) -> datetime | None:
    """Drop tzinfo after converting to UTC so due dates compare and sort uniformly."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class TodoItem(CamelModel):
    """
    One task owned by the account that created it.

    id is assigned by the store (max existing + 1); user_id is the owner's username.
    """

    id: int = 0
    title: str = ""
    description: str | None = None
    due_date: datetime | None = None
    completed: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime | None) -> datetime | None:
        return naive_utc(v)
