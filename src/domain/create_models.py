"""Pydantic models for creating records in database."""

import datetime as dt

from pydantic import Field, field_validator

from src.core.config import Constants, settings
from src.domain.base import CamelModel
from src.domain.task import TaskCategory


class TaskCreate(CamelModel):
    """Pydantic model for creating a quest record."""

    title: str = Field(..., description="Quest title")
    description: str = Field(default="", description="Optional quest description")
    date: dt.date = Field(..., description="Calendar date (YYYY-MM-DD)")
    category: TaskCategory = Field(default=TaskCategory.GENERAL, description="Quest category")
    estimated_time: int = Field(
        default_factory=lambda: settings.default_estimated_minutes,
        ge=Constants.ESTIMATED_MINUTES_MIN,
        le=Constants.ESTIMATED_MINUTES_MAX,
        description="Estimated effort in minutes",
    )
    elapsed_time: int = Field(default=0, ge=0, description="Seconds already spent")

    @field_validator("title")
    @classmethod
    def validate_title_usable(cls, v: str) -> str:
        """Validate title is non-empty after trimming and not too long."""
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        if len(v) > Constants.TITLE_MAX_LENGTH:
            raise ValueError(f"Title too long (max {Constants.TITLE_MAX_LENGTH} characters)")
        return v
