"""Pydantic models for service layer return types.

These models provide type safety at service boundaries and double as the
JSON shapes returned by the HTTP layer.
"""

from src.domain.base import CamelModel
from src.domain.reward import Badge, Unlockable
from src.domain.timer import TimerSession


class TimerProjection(CamelModel):
    """Read-only view of a user's timer sessions."""

    running_task_id: str | None = None
    sessions: list[TimerSession]


class UserStats(CamelModel):
    """Progress summary for a user."""

    user_id: str
    points: int
    total_tasks: int
    completed_tasks: int
    completion_rate: int
    badges: list[Badge]
    unlocked_rewards: list[Unlockable]
    badges_earned: int
    badges_total: int
