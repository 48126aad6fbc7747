"""Task store adapter: per-user task records over the document client."""

import datetime as dt
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.config import constants
from src.core.db_client import sanitize_param
from src.core.errors import NotFoundError, StoreUnavailableError
from src.core.logging import span
from src.domain.create_models import TaskCreate
from src.domain.task import Task


logger = logging.getLogger(__name__)

COLLECTION = "tasks"


@contextmanager
def _store_errors(operation: str, task_id: str | None = None) -> Iterator[None]:
    """Translate document client failures into the questflow error taxonomy."""
    try:
        yield
    except KeyError as e:
        raise NotFoundError(task_id or "") from e
    except RuntimeError as e:
        logger.error("task_store_failed", extra={"operation": operation, "task_id": task_id, "error": str(e)})
        raise StoreUnavailableError(operation, str(e)) from e


def _to_task(record: dict[str, Any]) -> Task:
    return Task.model_validate(record)


def _to_record(task: Task) -> dict[str, Any]:
    data = task.model_dump(mode="json", exclude={"id"})
    data["legacy_id"] = task.legacy_id
    return data


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


async def _list_all(filter_query: str) -> list[Task]:
    """Read every page of a filtered task listing, oldest first."""
    per_page = constants.DEFAULT_PER_PAGE_LIMIT
    tasks: list[Task] = []
    page = 1
    while True:
        records = await db_client.list_records(
            collection=COLLECTION,
            filter_query=filter_query,
            sort="created_at",
            page=page,
            per_page=per_page,
        )
        tasks.extend(_to_task(record) for record in records)
        if len(records) < per_page:
            return tasks
        page += 1


async def list_tasks(*, user_id: str) -> list[Task]:
    """List all tasks owned by a user, oldest first."""
    with span("task_store.list_tasks"), _store_errors("list_tasks"):
        return await _list_all(f'user_id = "{sanitize_param(user_id)}"')


async def list_tasks_by_date(*, user_id: str, date: dt.date) -> list[Task]:
    """List a user's tasks for one calendar date."""
    with span("task_store.list_tasks_by_date"), _store_errors("list_tasks_by_date"):
        return await _list_all(f'user_id = "{sanitize_param(user_id)}" && date = "{date.isoformat()}"')


async def create_task(
    *,
    user_id: str,
    data: TaskCreate,
    legacy_id: str | None = None,
    created_at: str | None = None,
) -> Task:
    """Create a new active task with zero progress.

    Args:
        user_id: Owner of the task
        data: Validated creation payload
        legacy_id: Identifier from the legacy JSON store, when importing
        created_at: Creation timestamp to keep, when importing

    Returns:
        The stored task
    """
    with span("task_store.create_task"), _store_errors("create_task"):
        record_data = {
            "user_id": user_id,
            "title": data.title,
            "description": data.description,
            "date": data.date.isoformat(),
            "category": str(data.category),
            "estimated_time": data.estimated_time,
            "elapsed_time": data.elapsed_time,
            "progress": 0,
            "completed": False,
            "completed_at": None,
            "reward": None,
            "legacy_id": legacy_id,
            "created_at": created_at or now_iso(),
        }
        record = await db_client.create_record(collection=COLLECTION, data=record_data)
        logger.info("Created task", extra={"user_id": user_id, "task_id": record["id"]})
        return _to_task(record)


async def get_task(*, user_id: str, task_id: str) -> Task:
    """Fetch one of the user's tasks.

    Raises:
        NotFoundError: If the task does not exist or belongs to another user
        StoreUnavailableError: If the store cannot be read
    """
    with _store_errors("get_task", task_id):
        record = await db_client.get_record(collection=COLLECTION, record_id=task_id)

    if record.get("user_id") != user_id:
        raise NotFoundError(task_id)
    return _to_task(record)


async def find_task_by_legacy_id(*, user_id: str, legacy_id: str) -> Task | None:
    """Return the user's task imported from a legacy id, or None."""
    with _store_errors("find_task_by_legacy_id"):
        record = await db_client.get_first_record(
            collection=COLLECTION,
            filter_query=f'user_id = "{sanitize_param(user_id)}" && legacy_id = "{sanitize_param(legacy_id)}"',
        )
    return _to_task(record) if record else None


async def put_task(*, user_id: str, task_id: str, task: Task) -> None:
    """Overwrite the stored task with ``task`` (last writer wins)."""
    if task.user_id != user_id or task.id != task_id:
        raise NotFoundError(task_id)

    with span("task_store.put_task"), _store_errors("put_task", task_id):
        await db_client.update_record(collection=COLLECTION, record_id=task_id, data=_to_record(task))


async def delete_task(*, user_id: str, task_id: str) -> None:
    """Delete one of the user's tasks."""
    await get_task(user_id=user_id, task_id=task_id)

    with span("task_store.delete_task"), _store_errors("delete_task", task_id):
        await db_client.delete_record(collection=COLLECTION, record_id=task_id)
    logger.info("Deleted task", extra={"user_id": user_id, "task_id": task_id})
