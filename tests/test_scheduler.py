"""
Test scheduled jobs and the scheduler loop
"""
import asyncio
from datetime import datetime, timedelta

import pytest

from models import User, Workout, WorkoutLog
from services.scheduler import (
    JobContext,
    Scheduler,
    expire_memberships,
    refresh_workout_ratings,
    register_default_jobs,
)
from services.task_executor import TaskExecutor


def test_expire_memberships(db, make_user):
    now = datetime.utcnow()
    lapsed = make_user(membership_is_active=True, membership_end_date=now - timedelta(days=1))
    current = make_user(membership_is_active=True, membership_end_date=now + timedelta(days=30))
    open_ended = make_user(membership_is_active=True)

    assert expire_memberships(JobContext("job-test")) == 1

    db.expire_all()
    assert db.get(User, lapsed.id).membership_is_active is False
    assert db.get(User, current.id).membership_is_active is True
    assert db.get(User, open_ended.id).membership_is_active is True
    assert expire_memberships() == 0


def test_refresh_workout_ratings(db, user):
    rated = Workout(name="Rated", description="Has ratings", type="strength", difficulty="beginner",
                    duration=30, created_by_id=user.id)
    unrated = Workout(name="Unrated", description="No ratings", type="cardio", difficulty="beginner",
                      duration=20, created_by_id=user.id, rating_average=3.0, rating_count=9)
    db.add_all([rated, unrated])
    db.commit()
    for rating in (4, 5, None):
        db.add(WorkoutLog(user_id=user.id, workout_id=rated.id, duration=30, rating=rating))
    db.commit()

    assert refresh_workout_ratings() == 2

    db.expire_all()
    assert db.get(Workout, rated.id).rating == {"average": 4.5, "count": 2}
    assert db.get(Workout, unrated.id).rating == {"average": 0.0, "count": 0}


def test_scheduler_runs_jobs_repeatedly_and_survives_errors():
    calls = {"ok": 0, "boom": 0}

    def ok(ctx):
        calls["ok"] += 1

    def boom(ctx):
        calls["boom"] += 1
        raise RuntimeError("job failed")

    async def scenario():
        scheduler = Scheduler(executor=TaskExecutor(enabled=False))
        scheduler.add_job("ok", ok, interval_seconds=0.01)
        scheduler.add_job("boom", boom, interval_seconds=0.01)
        scheduler.start()
        assert scheduler.is_running
        await asyncio.sleep(0.1)
        await scheduler.stop()
        assert not scheduler.is_running

    asyncio.run(scenario())
    assert calls["ok"] >= 2
    assert calls["boom"] >= 2


def test_scheduler_initial_delay_and_pool_dispatch():
    seen = []

    def record(ctx):
        seen.append(ctx.job_id)

    async def scenario():
        executor = TaskExecutor(enabled=True, max_workers=1)
        executor.start()
        scheduler = Scheduler(executor=executor)
        scheduler.add_job("late", record, interval_seconds=10, initial_delay=10)
        scheduler.add_job("now", record, interval_seconds=10)
        scheduler.start()
        await asyncio.sleep(0.1)
        await scheduler.stop()
        executor.shutdown()

    asyncio.run(scenario())
    assert len(seen) == 1
    assert seen[0].startswith("job-")


def test_disabled_scheduler_starts_nothing():
    async def scenario():
        scheduler = Scheduler(enabled=False)
        register_default_jobs(scheduler, membership_minutes=60, rating_minutes=30)
        scheduler.start()
        assert not scheduler.is_running
        await scheduler.stop()
        return scheduler

    scheduler = asyncio.run(scenario())
    assert set(scheduler.jobs) == {"expire_memberships", "refresh_workout_ratings"}
    assert scheduler.jobs["expire_memberships"].interval_seconds == 3600


def test_add_job_rejects_duplicates_and_bad_intervals():
    scheduler = Scheduler()
    scheduler.add_job("a", lambda ctx: None, interval_seconds=1)
    with pytest.raises(ValueError):
        scheduler.add_job("a", lambda ctx: None, interval_seconds=1)
    with pytest.raises(ValueError):
        scheduler.add_job("b", lambda ctx: None, interval_seconds=0)


def test_run_job_propagates_errors():
    def boom(ctx):
        raise RuntimeError("nope")

    scheduler = Scheduler()
    scheduler.add_job("boom", boom, interval_seconds=1)
    with pytest.raises(RuntimeError):
        asyncio.run(scheduler.run_job("boom"))
