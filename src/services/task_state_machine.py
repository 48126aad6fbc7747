"""Pure state transition functions for quest completion.

A task is ACTIVE until it is COMPLETED; COMPLETED is terminal. Resolving an
update merges the changed fields and reports whether the update crosses the
completion threshold, in which case the caller draws exactly one reward and
attaches it with ``attach_reward`` before persisting.
"""

import logging

from src.core.config import Constants
from src.domain.reward import Reward
from src.domain.task import Task, TaskState
from src.domain.update_models import TaskUpdate


logger = logging.getLogger(__name__)

# Fields frozen once a task is completed
_PROGRESS_FIELDS = {"progress", "elapsed_time", "completed"}


def _clamp_progress(value: int) -> int:
    return max(Constants.PROGRESS_MIN, min(Constants.PROGRESS_MAX, value))


def resolve_update(
    task: Task,
    changes: TaskUpdate,
    *,
    now: str,
    allow_rewind: bool = False,
) -> tuple[Task, bool]:
    """Merge an update into a task and decide whether it completes the task.

    Args:
        task: Current stored task
        changes: Fields explicitly set by the caller
        now: Timestamp to stamp on completion (ISO format)
        allow_rewind: Permit ``elapsed_time`` to decrease (timer reset)

    Returns:
        Tuple of (merged task, needs_reward). When ``needs_reward`` is True the
        merged task is already marked completed and awaits its reward.
    """
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)

    if task.state == TaskState.COMPLETED:
        ignored = sorted(_PROGRESS_FIELDS & fields.keys())
        if ignored:
            logger.debug("Ignoring progress fields on completed task", extra={"task_id": task.id, "fields": ignored})
        merged = task.model_copy(update={k: v for k, v in fields.items() if k not in _PROGRESS_FIELDS})
        return merged, False

    if "progress" in fields:
        fields["progress"] = _clamp_progress(fields["progress"])

    if not allow_rewind and fields.get("elapsed_time", task.elapsed_time) < task.elapsed_time:
        logger.debug("Ignoring elapsed time rewind", extra={"task_id": task.id})
        fields.pop("elapsed_time")

    manually_completed = fields.pop("completed", False) is True
    merged = task.model_copy(update=fields)

    if manually_completed:
        # Explicit completion: invariants hold but no reward is drawn
        merged = merged.model_copy(
            update={"completed": True, "progress": Constants.PROGRESS_MAX, "completed_at": now}
        )
        logger.info("Task completed manually", extra={"task_id": task.id})
        return merged, False

    if merged.progress == Constants.PROGRESS_MAX:
        merged = merged.model_copy(update={"completed": True, "completed_at": now})
        return merged, True

    return merged, False


def attach_reward(task: Task, reward: Reward) -> Task:
    """Attach the single reward drawn for a completion transition."""
    if not task.completed or task.reward is not None:
        msg = f"Cannot attach reward: task {task.id} is not awaiting a reward"
        raise ValueError(msg)
    return task.model_copy(update={"reward": reward})
