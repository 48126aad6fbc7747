"""Quest and timer HTTP endpoints."""

import datetime as dt
import logging

from fastapi import APIRouter, Depends, status

from src.domain.create_models import TaskCreate
from src.domain.task import Task
from src.domain.timer import TimerSession
from src.domain.update_models import TaskUpdate
from src.interface.identity import get_current_user_id
from src.models.service_models import TimerProjection
from src.services import task_service
from src.services.timer_service import TimerEngine, timer_registry


logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])


def get_timer_engine(user_id: str = Depends(get_current_user_id)) -> TimerEngine:
    """Timer engine owned by the caller's session."""
    return timer_registry.engine_for(user_id)


@router.get("/tasks", response_model=list[Task], response_model_exclude_none=True)
async def list_tasks(user_id: str = Depends(get_current_user_id)) -> list[Task]:
    """List all of the caller's quests."""
    return await task_service.list_tasks(user_id=user_id)


@router.get("/tasks/{date}", response_model=list[Task], response_model_exclude_none=True)
async def list_tasks_by_date(date: dt.date, user_id: str = Depends(get_current_user_id)) -> list[Task]:
    """List the caller's quests for one calendar date."""
    return await task_service.list_tasks(user_id=user_id, date=date)


@router.post(
    "/tasks",
    response_model=Task,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(data: TaskCreate, user_id: str = Depends(get_current_user_id)) -> Task:
    """Create a quest."""
    return await task_service.create_task(user_id=user_id, data=data)


@router.put("/tasks/{task_id}", response_model=Task, response_model_exclude_none=True)
async def update_task(task_id: str, changes: TaskUpdate, user_id: str = Depends(get_current_user_id)) -> Task:
    """Update a quest; reaching 100% progress completes it and draws its reward."""
    return await task_service.update_task(user_id=user_id, task_id=task_id, changes=changes)


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    engine: TimerEngine = Depends(get_timer_engine),
) -> dict[str, bool]:
    """Delete a quest, pausing its timer first."""
    await task_service.delete_task(user_id=user_id, task_id=task_id, timers=engine)
    return {"success": True}


@router.post("/tasks/{task_id}/timer/start", response_model=TimerSession)
async def start_timer(task_id: str, engine: TimerEngine = Depends(get_timer_engine)) -> TimerSession:
    """Start a quest's timer; only one timer runs at a time."""
    return await engine.start(task_id)


@router.post("/tasks/{task_id}/timer/pause", response_model=TimerSession)
async def pause_timer(task_id: str, engine: TimerEngine = Depends(get_timer_engine)) -> TimerSession:
    """Pause a quest's timer."""
    return await engine.pause(task_id)


@router.post("/tasks/{task_id}/timer/reset", response_model=TimerSession)
async def reset_timer(task_id: str, engine: TimerEngine = Depends(get_timer_engine)) -> TimerSession:
    """Stop a quest's timer and zero its elapsed time and progress."""
    return await engine.reset(task_id)


@router.get("/timer", response_model=TimerProjection)
async def get_timer(engine: TimerEngine = Depends(get_timer_engine)) -> TimerProjection:
    """Read-only view of the caller's timers."""
    return engine.snapshot()
