"""Update models for database operations."""

import datetime as dt

from pydantic import Field, field_validator

from src.core.config import Constants
from src.domain.base import CamelModel
from src.domain.task import TaskCategory


class TaskUpdate(CamelModel):
    """Partial update payload for a quest. Unset fields are left untouched."""

    title: str | None = None
    description: str | None = None
    date: dt.date | None = None
    category: TaskCategory | None = None
    estimated_time: int | None = Field(
        default=None, ge=Constants.ESTIMATED_MINUTES_MIN, le=Constants.ESTIMATED_MINUTES_MAX
    )
    elapsed_time: int | None = Field(default=None, ge=0)
    progress: int | None = None
    completed: bool | None = None

    @field_validator("title")
    @classmethod
    def validate_title_usable(cls, v: str | None) -> str | None:
        """Validate title is non-empty after trimming."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        if len(v) > Constants.TITLE_MAX_LENGTH:
            raise ValueError(f"Title too long (max {Constants.TITLE_MAX_LENGTH} characters)")
        return v

    @field_validator("progress")
    @classmethod
    def clamp_progress(cls, v: int | None) -> int | None:
        """Clamp progress into [0, 100]."""
        if v is None:
            return v
        return max(Constants.PROGRESS_MIN, min(Constants.PROGRESS_MAX, v))
