"""Task (quest) domain models and enums."""

import datetime as dt
from enum import StrEnum

from pydantic import Field

from src.domain.base import CamelModel
from src.domain.reward import Reward


class TaskCategory(StrEnum):
    """Fixed set of quest categories."""

    GENERAL = "general"
    LEARNING = "learning"
    FITNESS = "fitness"
    CREATIVE = "creative"
    WORK = "work"
    PERSONAL = "personal"


class TaskState(StrEnum):
    """Completion lifecycle state, derived from ``Task.completed``."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class Task(CamelModel):
    """Task data transfer object."""

    id: str = Field(..., description="Opaque task ID, unique per user")
    user_id: str = Field(..., description="Owner user ID")
    title: str = Field(..., min_length=1, description="Quest title")
    description: str = Field(default="", description="Optional quest description")
    date: dt.date = Field(..., description="Calendar date the quest belongs to")
    category: TaskCategory = Field(default=TaskCategory.GENERAL, description="Quest category")
    estimated_time: int = Field(default=25, ge=1, description="Estimated effort in minutes")
    elapsed_time: int = Field(default=0, ge=0, description="Timer seconds spent so far")
    progress: int = Field(default=0, ge=0, le=100, description="Completion percentage")
    completed: bool = Field(default=False, description="Whether the quest is completed")
    completed_at: str | None = Field(default=None, description="Completion timestamp (ISO format)")
    reward: Reward | None = Field(default=None, description="Reward drawn on completion")
    created_at: str = Field(..., description="Creation timestamp (ISO format)")
    legacy_id: str | None = Field(default=None, exclude=True, description="ID from the legacy JSON store")

    @property
    def state(self) -> TaskState:
        return TaskState.COMPLETED if self.completed else TaskState.ACTIVE
