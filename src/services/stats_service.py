"""Stats service: progress summary for the stats panel.

Key Concepts:
- Completion rate: completed quests over all quests, as a whole percentage
  rounded half up; 0 when the user has no quests.
- Badges and unlocks are resolved against the reward catalog so the caller
  receives names and icons rather than bare ids.
"""

import logging
import math

from src.core.logging import span
from src.domain.reward import RewardState
from src.domain.task import Task
from src.models.service_models import UserStats
from src.services import ledger_store, task_store


logger = logging.getLogger(__name__)


def completion_rate(*, total: int, completed: int) -> int:
    """Whole-number completion percentage."""
    if total == 0:
        return 0
    return math.floor(completed / total * 100 + 0.5)


def summarize(*, user_id: str, tasks: list[Task], ledger: RewardState) -> UserStats:
    """Build the stats summary from already loaded tasks and ledger."""
    completed = sum(1 for task in tasks if task.completed)
    pool = ledger.reward_pool
    badges_by_id = {badge.id: badge for badge in pool.badges}
    unlockables_by_id = {item.id: item for item in pool.unlockables}

    return UserStats(
        user_id=user_id,
        points=ledger.points,
        total_tasks=len(tasks),
        completed_tasks=completed,
        completion_rate=completion_rate(total=len(tasks), completed=completed),
        badges=[badges_by_id[badge_id] for badge_id in ledger.badges],
        unlocked_rewards=[unlockables_by_id[item_id] for item_id in ledger.unlocked_rewards],
        badges_earned=len(ledger.badges),
        badges_total=len(pool.badges),
    )


async def get_user_stats(*, user_id: str) -> UserStats:
    """Get the stats summary for a user.

    Raises:
        StoreUnavailableError: If tasks or the ledger cannot be read
    """
    with span("stats_service.get_user_stats"):
        tasks = await task_store.list_tasks(user_id=user_id)
        ledger = await ledger_store.get_ledger(user_id=user_id)
        stats = summarize(user_id=user_id, tasks=tasks, ledger=ledger)
        logger.debug("Computed user stats", extra={"user_id": user_id, "total_tasks": stats.total_tasks})
        return stats
