"""
Background scheduler for periodic maintenance jobs.

Only runs if ENABLE_SCHEDULER=true. Each job gets its own asyncio loop;
blocking job bodies are dispatched to the task executor so the event loop
stays responsive.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from sqlalchemy import func

from database import get_db_session
from models import User, Workout, WorkoutLog
from services.task_executor import TaskExecutor

logger = logging.getLogger(__name__)


class JobContext:
    """Context for a background job with request_id-like tracking"""

    def __init__(self, job_id: Optional[str] = None):
        self.job_id = job_id or f"job-{uuid.uuid4().hex[:8]}"

    def log(self, level: str, msg: str):
        """Log with job_id"""
        logger.log(getattr(logging, level.upper(), logging.INFO), f"[{self.job_id}] {msg}")


# ==================== JOBS ====================


def expire_memberships(ctx: Optional[JobContext] = None, now: Optional[datetime] = None) -> int:
    """Deactivate memberships whose end date has passed. Returns the number deactivated."""
    ctx = ctx or JobContext()
    now = now or datetime.utcnow()
    with get_db_session() as db:
        expired = (
            db.query(User)
            .filter(
                User.membership_is_active == True,  # noqa: E712
                User.membership_end_date.isnot(None),
                User.membership_end_date < now,
            )
            .all()
        )
        for user in expired:
            user.membership_is_active = False
        db.commit()
    ctx.log("info", f"Membership sweep deactivated {len(expired)} memberships")
    return len(expired)


def refresh_workout_ratings(ctx: Optional[JobContext] = None) -> int:
    """Recompute each workout's rating average and count from logged ratings"""
    ctx = ctx or JobContext()
    with get_db_session() as db:
        rows = (
            db.query(WorkoutLog.workout_id, func.avg(WorkoutLog.rating), func.count(WorkoutLog.rating))
            .filter(WorkoutLog.rating.isnot(None))
            .group_by(WorkoutLog.workout_id)
            .all()
        )
        ratings = {workout_id: (float(avg), int(count)) for workout_id, avg, count in rows}

        workouts = db.query(Workout).all()
        for workout in workouts:
            average, count = ratings.get(workout.id, (0.0, 0))
            workout.rating_average = round(average, 2)
            workout.rating_count = count
        db.commit()
    ctx.log("info", f"Refreshed ratings for {len(workouts)} workouts ({len(ratings)} rated)")
    return len(workouts)


# ==================== SCHEDULER ====================


@dataclass
class ScheduledJob:
    name: str
    func: Callable[[JobContext], object]
    interval_seconds: float
    initial_delay: float = 0.0


class Scheduler:
    """Runs registered jobs at fixed intervals until stopped"""

    def __init__(self, executor: Optional[TaskExecutor] = None, enabled: bool = True):
        self.enabled = enabled
        self.executor = executor or TaskExecutor(enabled=False)
        self.jobs: Dict[str, ScheduledJob] = {}
        self._tasks: Dict[str, asyncio.Task] = {}

    @property
    def is_running(self) -> bool:
        return any(not task.done() for task in self._tasks.values())

    def add_job(self, name: str, func: Callable[[JobContext], object], interval_seconds: float, initial_delay: float = 0.0):
        if name in self.jobs:
            raise ValueError(f"Job {name} already registered")
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.jobs[name] = ScheduledJob(name, func, interval_seconds, initial_delay)

    async def run_job(self, name: str):
        """Run a registered job once; errors propagate"""
        job = self.jobs[name]
        ctx = JobContext()
        ctx.log("info", f"Running job {name}")
        return await self.executor.run(job.func, ctx)

    async def _loop(self, job: ScheduledJob):
        if job.initial_delay:
            await asyncio.sleep(job.initial_delay)
        while True:
            try:
                await self.run_job(job.name)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Scheduled job {job.name} failed: {e}", exc_info=True)
            await asyncio.sleep(job.interval_seconds)

    def start(self):
        """Create one task per job on the running loop"""
        if not self.enabled:
            logger.info("Scheduler disabled")
            return
        for name, job in self.jobs.items():
            if name not in self._tasks or self._tasks[name].done():
                self._tasks[name] = asyncio.create_task(self._loop(job), name=f"scheduler:{name}")
        logger.info(f"Scheduler started with {len(self._tasks)} jobs: {', '.join(sorted(self.jobs))}")

    async def stop(self):
        """Cancel all job loops and wait for them to finish"""
        tasks = list(self._tasks.values())
        for task in tasks:
            if not task.done():
                task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info("Scheduler stopped")


def register_default_jobs(scheduler: Scheduler, membership_minutes: int, rating_minutes: int) -> None:
    scheduler.add_job("expire_memberships", expire_memberships, membership_minutes * 60)
    scheduler.add_job("refresh_workout_ratings", refresh_workout_ratings, rating_minutes * 60, initial_delay=5)
