"""Import quests and the reward ledger from the legacy JSON data files.

The legacy server kept everything in two files:
- ``tasks.json``: ``{"tasks": [...]}`` with camelCase task objects
- ``rewards.json``: ``{"points", "badges", "unlockedRewards", "rewardPool"}``

Imports are idempotent: a task whose legacy id was already imported for the
user is skipped, and the ledger is overwritten with the file's contents.
Completed legacy tasks keep their stored reward; no new reward is drawn.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from src.core.config import Constants, settings
from src.domain.create_models import TaskCreate
from src.domain.reward import Reward, RewardState
from src.domain.task import Task, TaskCategory
from src.services import ledger_store, task_store


logger = logging.getLogger(__name__)


class ImportSummary(BaseModel):
    """Counts reported after an import run."""

    tasks_imported: int = 0
    tasks_skipped: int = 0
    tasks_invalid: int = 0
    ledger_imported: bool = False


def read_json_file(path: Path) -> Any | None:  # noqa: ANN401
    """Load a JSON file, or return None (with a warning) if it is missing or unreadable."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Legacy file not found, skipping: %s", path)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Legacy file unreadable, skipping: %s (%s)", path, e)
    return None


def _category(value: Any) -> TaskCategory:  # noqa: ANN401
    try:
        return TaskCategory(value)
    except ValueError:
        return TaskCategory.GENERAL


def _estimated_time(value: Any) -> int:  # noqa: ANN401
    if not isinstance(value, int) or isinstance(value, bool):
        return settings.default_estimated_minutes
    return max(Constants.ESTIMATED_MINUTES_MIN, min(Constants.ESTIMATED_MINUTES_MAX, value))


def _legacy_reward(value: Any) -> Reward | None:  # noqa: ANN401
    if not isinstance(value, dict):
        return None
    try:
        return Reward.model_validate(value)
    except ValidationError:
        logger.warning("Dropping malformed legacy reward", extra={"reward": value})
        return None


def legacy_task_create(raw: dict[str, Any]) -> TaskCreate:
    """Build a creation payload from a legacy task object.

    Raises:
        ValidationError: If the title or date is missing or unusable
    """
    elapsed = raw.get("elapsedTime")
    return TaskCreate(
        title=raw.get("title") or "",
        description=raw.get("description") or "",
        date=raw.get("date"),
        category=_category(raw.get("category")),
        estimated_time=_estimated_time(raw.get("estimatedTime")),
        elapsed_time=elapsed if isinstance(elapsed, int) and elapsed >= 0 else 0,
    )


def legacy_task(*, user_id: str, raw: dict[str, Any]) -> Task:
    """Build the fully validated task a legacy object imports as.

    The id is a placeholder until the record is created.

    Raises:
        ValidationError: If any field, timestamps included, is unusable
    """
    data = legacy_task_create(raw)
    created_at = raw.get("createdAt") or task_store.now_iso()
    fields: dict[str, Any] = {
        **data.model_dump(),
        "id": "pending",
        "user_id": user_id,
        "created_at": created_at,
        "legacy_id": str(raw.get("id", "")) or None,
    }

    if raw.get("completed") is True:
        fields |= {
            "completed": True,
            "progress": Constants.PROGRESS_MAX,
            "completed_at": raw.get("completedAt") or created_at,
            "reward": _legacy_reward(raw.get("reward")),
        }
    else:
        progress = raw.get("progress")
        if isinstance(progress, int) and not isinstance(progress, bool):
            fields["progress"] = max(Constants.PROGRESS_MIN, min(Constants.PROGRESS_MAX, progress))

    return Task.model_validate(fields)


async def import_task(*, user_id: str, raw: dict[str, Any]) -> bool:
    """Import one legacy task. Returns False when it was already imported.

    Raises:
        ValidationError: If the legacy object is unusable; nothing is written
    """
    legacy_id = str(raw.get("id", ""))
    if legacy_id and await task_store.find_task_by_legacy_id(user_id=user_id, legacy_id=legacy_id):
        return False

    target = legacy_task(user_id=user_id, raw=raw)
    created = await task_store.create_task(
        user_id=user_id,
        data=legacy_task_create(raw),
        legacy_id=target.legacy_id,
        created_at=target.created_at,
    )

    target = target.model_copy(update={"id": created.id})
    if target != created:
        await task_store.put_task(user_id=user_id, task_id=created.id, task=target)
    return True


async def import_tasks(*, user_id: str, path: Path) -> ImportSummary:
    """Import every task from a legacy ``tasks.json`` file."""
    summary = ImportSummary()
    payload = read_json_file(path)
    if payload is None:
        return summary

    raw_tasks = payload.get("tasks") if isinstance(payload, dict) else None
    for raw in raw_tasks or []:
        if not isinstance(raw, dict):
            summary.tasks_invalid += 1
            continue
        try:
            imported = await import_task(user_id=user_id, raw=raw)
        except ValidationError as e:
            logger.warning("Skipping invalid legacy task %s: %s", raw.get("id"), e.error_count())
            summary.tasks_invalid += 1
            continue
        if imported:
            summary.tasks_imported += 1
        else:
            summary.tasks_skipped += 1

    logger.info("Imported %d tasks for %s (%d already present)", summary.tasks_imported, user_id, summary.tasks_skipped)
    return summary


async def import_ledger(*, user_id: str, path: Path) -> bool:
    """Overwrite the user's ledger with a legacy ``rewards.json`` file."""
    payload = read_json_file(path)
    if not isinstance(payload, dict):
        return False

    try:
        ledger = RewardState(
            user_id=user_id,
            points=payload.get("points") or 0,
            badges=payload.get("badges") or [],
            unlocked_rewards=payload.get("unlockedRewards") or [],
        )
    except ValidationError as e:
        logger.warning("Skipping invalid legacy ledger: %s", e.error_count())
        return False

    await ledger_store.put_ledger(user_id=user_id, ledger=ledger)
    logger.info("Imported ledger for %s: %d points, %d badges", user_id, ledger.points, len(ledger.badges))
    return True


async def import_legacy_data(*, user_id: str, data_dir: Path) -> ImportSummary:
    """Import ``tasks.json`` and ``rewards.json`` from a legacy data directory."""
    summary = await import_tasks(user_id=user_id, path=data_dir / "tasks.json")
    summary.ledger_imported = await import_ledger(user_id=user_id, path=data_dir / "rewards.json")
    return summary
