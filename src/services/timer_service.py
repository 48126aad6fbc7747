"""Timer engine: per-task elapsed-time counting with one running timer per user.

Each user session owns one ``TimerEngine``. The engine keeps a session per
task and a single cell recording which task, if any, is running. Only the
engine writes that cell, always under its lock, so ``start`` is an atomic
check-and-set.

While a task runs, an interval job on the shared APScheduler calls ``tick``
every ``timer_tick_seconds``. Each tick advances the session by one second,
derives progress, and pushes ``{progress, elapsed_time}`` through the task
service (the completion state machine). Pausing, resetting, completing, or
deleting removes the job; a tick that was already dispatched re-checks the
running cell under the lock and is dropped.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.interval import IntervalTrigger

from src.core.config import settings
from src.core.errors import AlreadyRunningElsewhereError, InvalidStateError, NotFoundError, StoreUnavailableError
from src.core.logging import log_with_user_context, span
from src.core.scheduler import scheduler as default_scheduler
from src.domain.task import Task
from src.domain.timer import TimerSession, compute_progress
from src.domain.update_models import TaskUpdate
from src.models.service_models import TimerProjection
from src.services import task_service


logger = logging.getLogger(__name__)

LoadTask = Callable[[str], Awaitable[Task]]
ApplyProgress = Callable[[str, TaskUpdate, bool], Awaitable[Task]]


class JobScheduler(Protocol):
    """The subset of the APScheduler API the engine relies on."""

    def add_job(self, func: Callable[..., Any], trigger: Any = None, **kwargs: Any) -> Any: ...  # noqa: ANN401

    def remove_job(self, job_id: str, jobstore: str | None = None) -> None: ...


class TimerEngine:
    """Timer sessions and the single running-task cell for one user."""

    def __init__(
        self,
        *,
        user_id: str,
        load_task: LoadTask,
        apply_progress: ApplyProgress,
        scheduler: JobScheduler | None = None,
        tick_seconds: float | None = None,
    ) -> None:
        self.user_id = user_id
        self._load_task = load_task
        self._apply_progress = apply_progress
        self._scheduler = scheduler if scheduler is not None else default_scheduler
        self._tick_seconds = tick_seconds if tick_seconds is not None else settings.timer_tick_seconds
        self._sessions: dict[str, TimerSession] = {}
        self._running_task_id: str | None = None
        self._lock = asyncio.Lock()

    @property
    def running_task_id(self) -> str | None:
        """Task whose timer is running, if any (read-only)."""
        return self._running_task_id

    def job_id(self, task_id: str) -> str:
        return f"timer:{self.user_id}:{task_id}"

    def session(self, task_id: str) -> TimerSession | None:
        """Copy of a task's session, or None if the engine has not seen the task."""
        session = self._sessions.get(task_id)
        return session.model_copy() if session else None

    def snapshot(self) -> TimerProjection:
        """Read-only projection of every session for the UI."""
        return TimerProjection(
            running_task_id=self._running_task_id,
            sessions=[session.model_copy() for session in self._sessions.values()],
        )

    def _sync_session(self, task: Task) -> TimerSession:
        session = self._sessions.get(task.id)
        if session is None:
            session = TimerSession(task_id=task.id)
            self._sessions[task.id] = session
        if not session.is_running:
            session.elapsed = task.elapsed_time
        session.estimated_time = task.estimated_time
        return session

    def _schedule(self, task_id: str) -> None:
        self._scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self._tick_seconds),
            args=[task_id],
            id=self.job_id(task_id),
            name=f"Quest timer {task_id}",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    def _stop(self, session: TimerSession) -> None:
        """Halt a session and cancel its recurring job. Caller holds the lock."""
        session.is_running = False
        if self._running_task_id == session.task_id:
            self._running_task_id = None
        try:
            self._scheduler.remove_job(self.job_id(session.task_id))
        except JobLookupError:
            pass

    async def start(self, task_id: str) -> TimerSession:
        """Start a task's timer.

        Raises:
            AlreadyRunningElsewhereError: If another task's timer is running
            InvalidStateError: If the task is already completed
            NotFoundError: If the task is unknown to this user
        """
        with span("timer_service.start"):
            async with self._lock:
                if self._running_task_id == task_id:
                    return self._sessions[task_id].model_copy()
                if self._running_task_id is not None:
                    raise AlreadyRunningElsewhereError(task_id, self._running_task_id)

                task = await self._load_task(task_id)
                if task.completed:
                    raise InvalidStateError(task_id, "cannot start the timer of a completed quest")

                session = self._sync_session(task)
                session.is_running = True
                self._running_task_id = task_id
                self._schedule(task_id)

            log_with_user_context(logger, "info", "Timer started", user_id=self.user_id, task_id=task_id)
            return session.model_copy()

    async def pause(self, task_id: str) -> TimerSession:
        """Stop advancing a task's timer. No-op if it is not running."""
        with span("timer_service.pause"):
            async with self._lock:
                session = self._sessions.get(task_id)
                if session is None:
                    session = self._sync_session(await self._load_task(task_id))
                if session.is_running:
                    self._stop(session)
                    log_with_user_context(
                        logger, "info", "Timer paused", user_id=self.user_id, task_id=task_id, elapsed=session.elapsed
                    )
                return session.model_copy()

    async def reset(self, task_id: str) -> TimerSession:
        """Stop the timer, zero elapsed time, and push progress 0.

        Raises:
            InvalidStateError: If the task is already completed
            NotFoundError: If the task is unknown to this user
        """
        with span("timer_service.reset"):
            async with self._lock:
                task = await self._load_task(task_id)
                if task.completed:
                    raise InvalidStateError(task_id, "cannot reset the timer of a completed quest")

                session = self._sync_session(task)
                self._stop(session)
                updated = await self._apply_progress(task_id, TaskUpdate(progress=0, elapsed_time=0), True)
                session.elapsed = updated.elapsed_time
                session.estimated_time = updated.estimated_time

            log_with_user_context(logger, "info", "Timer reset", user_id=self.user_id, task_id=task_id)
            return session.model_copy()

    async def tick(self, task_id: str) -> TimerSession | None:
        """Advance a running session by one second.

        Returns:
            The session after the tick, or None when the tick was stale
            (the session was paused, reset, or discarded meanwhile).
        """
        async with self._lock:
            session = self._sessions.get(task_id)
            if session is None or not session.is_running or self._running_task_id != task_id:
                return None

            elapsed = session.elapsed + 1
            progress = compute_progress(elapsed, session.estimated_time)
            try:
                task = await self._apply_progress(task_id, TaskUpdate(progress=progress, elapsed_time=elapsed), False)
            except NotFoundError:
                log_with_user_context(logger, "warning", "Timer task vanished", user_id=self.user_id, task_id=task_id)
                self._stop(session)
                self._sessions.pop(task_id, None)
                return None
            except StoreUnavailableError as e:
                # Not applied; the next tick retries from the same elapsed value
                log_with_user_context(
                    logger, "warning", "Timer tick not persisted", user_id=self.user_id, task_id=task_id, error=str(e)
                )
                return session.model_copy()

            session.elapsed = task.elapsed_time
            session.estimated_time = task.estimated_time
            if task.completed or progress >= 100:
                self._stop(session)
                log_with_user_context(
                    logger, "info", "Timer finished", user_id=self.user_id, task_id=task_id, elapsed=session.elapsed
                )
            return session.model_copy()

    async def discard(self, task_id: str) -> None:
        """Force-pause and forget a task's session (before deleting the task)."""
        async with self._lock:
            session = self._sessions.pop(task_id, None)
            if session is not None:
                self._stop(session)
                log_with_user_context(logger, "info", "Timer discarded", user_id=self.user_id, task_id=task_id)

    async def shutdown(self) -> None:
        """Pause every session (service shutdown)."""
        async with self._lock:
            for session in self._sessions.values():
                if session.is_running:
                    self._stop(session)


class TimerRegistry:
    """One TimerEngine per user session, wired to the task service."""

    def __init__(self, *, scheduler: JobScheduler | None = None, tick_seconds: float | None = None) -> None:
        self._scheduler = scheduler
        self._tick_seconds = tick_seconds
        self._engines: dict[str, TimerEngine] = {}

    def engine_for(self, user_id: str) -> TimerEngine:
        """Get or create the engine for a user."""
        engine = self._engines.get(user_id)
        if engine is None:

            async def load_task(task_id: str) -> Task:
                return await task_service.get_task(user_id=user_id, task_id=task_id)

            async def apply_progress(task_id: str, changes: TaskUpdate, allow_rewind: bool) -> Task:
                return await task_service.update_task(
                    user_id=user_id, task_id=task_id, changes=changes, allow_rewind=allow_rewind
                )

            engine = TimerEngine(
                user_id=user_id,
                load_task=load_task,
                apply_progress=apply_progress,
                scheduler=self._scheduler,
                tick_seconds=self._tick_seconds,
            )
            self._engines[user_id] = engine
        return engine

    async def shutdown(self) -> None:
        """Pause all running timers."""
        for engine in self._engines.values():
            await engine.shutdown()
        self._engines.clear()


# Global registry instance
timer_registry = TimerRegistry()
