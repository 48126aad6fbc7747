"""Domain models and DTOs."""

from src.domain.create_models import TaskCreate
from src.domain.reward import Badge, Reward, RewardPool, RewardState, RewardType, Unlockable
from src.domain.reward_catalog import DEFAULT_REWARD_POOL
from src.domain.task import Task, TaskCategory, TaskState
from src.domain.update_models import TaskUpdate


__all__ = [
    "DEFAULT_REWARD_POOL",
    "Badge",
    "Reward",
    "RewardPool",
    "RewardState",
    "RewardType",
    "Task",
    "TaskCategory",
    "TaskCreate",
    "TaskState",
    "TaskUpdate",
    "Unlockable",
]
