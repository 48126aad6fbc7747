"""Timer session models (in-memory, never persisted on their own)."""

import math

from pydantic import Field

from src.core.config import Constants
from src.domain.base import CamelModel


class TimerSession(CamelModel):
    """Per-task countdown state mirrored from the stored task."""

    task_id: str
    elapsed: int = Field(default=0, ge=0, description="Seconds elapsed, mirrors Task.elapsed_time")
    is_running: bool = False
    estimated_time: int = Field(default=25, ge=1, description="Minutes, mirrors Task.estimated_time")


def compute_progress(elapsed: int, estimated_minutes: int) -> int:
    """Progress percentage for elapsed seconds against an estimate, rounded half up and capped at 100."""
    ratio = elapsed / (estimated_minutes * 60) * 100
    return min(Constants.PROGRESS_MAX, math.floor(ratio + 0.5))
