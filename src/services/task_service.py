"""Task service: CRUD plus the completion state machine and reward award."""

import asyncio
import datetime as dt
import logging
import weakref
from typing import TYPE_CHECKING

from src.core.errors import StoreUnavailableError
from src.core.logging import log_with_user_context, span
from src.domain.create_models import TaskCreate
from src.domain.reward import Reward
from src.domain.task import Task
from src.domain.update_models import TaskUpdate
from src.services import ledger_store, reward_service, task_state_machine, task_store
from src.services.reward_service import RandomSource


if TYPE_CHECKING:
    from src.services.timer_service import TimerEngine


logger = logging.getLogger(__name__)

# Serializes writers of the same task and of the same ledger within this process.
# Entries disappear once no coroutine holds or awaits the lock.
_task_locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = weakref.WeakValueDictionary()
_ledger_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()


def _lock_for(locks: weakref.WeakValueDictionary, key: object) -> asyncio.Lock:
    lock = locks.get(key)
    if lock is None:
        lock = locks[key] = asyncio.Lock()
    return lock


async def create_task(*, user_id: str, data: TaskCreate) -> Task:
    """Create a new quest for the user."""
    with span("task_service.create_task"):
        task = await task_store.create_task(user_id=user_id, data=data)
        log_with_user_context(logger, "info", "Quest created", user_id=user_id, task_id=task.id)
        return task


async def list_tasks(*, user_id: str, date: dt.date | None = None) -> list[Task]:
    """List the user's quests, optionally for a single date."""
    if date is None:
        return await task_store.list_tasks(user_id=user_id)
    return await task_store.list_tasks_by_date(user_id=user_id, date=date)


async def get_task(*, user_id: str, task_id: str) -> Task:
    """Get one of the user's quests.

    Raises:
        NotFoundError: If the quest is unknown to this user
    """
    return await task_store.get_task(user_id=user_id, task_id=task_id)


async def award_reward(*, user_id: str, rng: RandomSource | None = None) -> Reward:
    """Draw one reward for the user and persist the updated ledger.

    A ledger that cannot be read yields the default reward without touching
    the store. A ledger that cannot be written raises StoreUnavailableError so
    the completing task is not persisted either.
    """
    async with _lock_for(_ledger_locks, user_id):
        try:
            ledger = await ledger_store.get_ledger(user_id=user_id)
        except StoreUnavailableError as e:
            log_with_user_context(
                logger, "error", "Ledger unreadable, awarding default reward", user_id=user_id, error=str(e)
            )
            return reward_service.default_reward()

        reward, updated = reward_service.generate_reward(ledger, rng)
        if updated is not ledger:
            await ledger_store.put_ledger(user_id=user_id, ledger=updated)
        return reward


async def update_task(
    *,
    user_id: str,
    task_id: str,
    changes: TaskUpdate,
    allow_rewind: bool = False,
    rng: RandomSource | None = None,
) -> Task:
    """Apply an update through the completion state machine.

    When the update takes an active task to 100% progress, the task is marked
    completed, exactly one reward is drawn, and the ledger is written before
    the task. Updates to an already completed task never draw again.

    Args:
        user_id: Owner of the task
        task_id: Task to update
        changes: Fields to change
        allow_rewind: Permit elapsed time to decrease (timer reset)
        rng: Random source for the reward draw

    Returns:
        The stored task after the update

    Raises:
        NotFoundError: If the task is unknown to this user
        StoreUnavailableError: If the store fails; nothing is considered applied
    """
    with span("task_service.update_task"):
        async with _lock_for(_task_locks, (user_id, task_id)):
            task = await task_store.get_task(user_id=user_id, task_id=task_id)
            merged, needs_reward = task_state_machine.resolve_update(
                task,
                changes,
                now=task_store.now_iso(),
                allow_rewind=allow_rewind,
            )

            if needs_reward:
                reward = await award_reward(user_id=user_id, rng=rng)
                merged = task_state_machine.attach_reward(merged, reward)
                log_with_user_context(
                    logger,
                    "info",
                    "Quest completed",
                    user_id=user_id,
                    task_id=task_id,
                    reward_type=str(reward.type),
                )

            await task_store.put_task(user_id=user_id, task_id=task_id, task=merged)
            return merged


async def delete_task(*, user_id: str, task_id: str, timers: "TimerEngine | None" = None) -> None:
    """Delete a quest, force-pausing its timer first."""
    with span("task_service.delete_task"):
        if timers is not None:
            await timers.discard(task_id)

        async with _lock_for(_task_locks, (user_id, task_id)):
            await task_store.delete_task(user_id=user_id, task_id=task_id)
        log_with_user_context(logger, "info", "Quest deleted", user_id=user_id, task_id=task_id)
