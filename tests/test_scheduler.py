"""Tests for the nightly recomputation scheduler wiring."""

from __future__ import annotations

from datetime import date

import pytest

from streakmaster import config
from streakmaster.context import create_app_context
from streakmaster.models import Profile
from streakmaster.scheduler import RECOMPUTE_JOB_ID, StreakScheduler, create_scheduler


@pytest.fixture
def ctx(tmp_path, monkeypatch):
    monkeypatch.setenv("STREAKMASTER_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("STREAKMASTER_DATABASE_URL", raising=False)
    monkeypatch.setenv("STREAKMASTER_RECOMPUTE_HOUR", "2")
    monkeypatch.setenv("STREAKMASTER_RECOMPUTE_MINUTE", "30")
    context = create_app_context(config.TestConfig())
    yield context
    context.dispose()


def test_trigger_uses_configured_time(ctx):
    trigger = StreakScheduler(ctx).build_trigger()
    fields = {field.name: str(field) for field in trigger.fields}

    assert fields["hour"] == "2"
    assert fields["minute"] == "30"


def test_start_registers_nightly_job(ctx):
    scheduler = create_scheduler(ctx, auto_start=True)
    try:
        assert scheduler.running
        job = scheduler.scheduler.get_job(RECOMPUTE_JOB_ID)
        assert job is not None
        assert job.name == "Nightly Streak Recomputation"
    finally:
        scheduler.stop()

    assert not scheduler.running
    assert scheduler.scheduler is None


def test_start_twice_keeps_one_scheduler(ctx):
    scheduler = StreakScheduler(ctx)
    scheduler.start()
    first = scheduler.scheduler
    try:
        scheduler.start()
        assert scheduler.scheduler is first
    finally:
        scheduler.stop()


def test_not_started_by_default(ctx):
    scheduler = create_scheduler(ctx)
    assert not scheduler.running
    scheduler.stop()


def test_run_now_recomputes(ctx):
    profile = ctx.profile_repo.create(Profile(username="runner"))
    habit = ctx.habit_service.create_habit(
        profile.id, name="Read", frequency="daily", start_date=date.today()
    )
    ctx.habit_repo.update_streak(habit.id, 8, user_id=profile.id)

    summary = StreakScheduler(ctx).run_now()

    assert summary.updated == 1
    assert summary.changed == 1
    assert ctx.habit_repo.get_by_id(habit.id, user_id=profile.id).current_streak == 0


def test_scheduled_job_swallows_errors(ctx, monkeypatch):
    def boom():
        raise RuntimeError("database offline")

    monkeypatch.setattr(ctx, "recompute_streaks", boom)
    StreakScheduler(ctx)._run_recompute()


def test_app_scheduler_stops_at_exit(tmp_path, monkeypatch):
    monkeypatch.setenv("STREAKMASTER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("STREAKMASTER_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("STREAKMASTER_SCHEDULER_ENABLED", "true")
    exit_hooks = []
    monkeypatch.setattr("streakmaster.atexit.register", exit_hooks.append)

    from streakmaster import create_app
    from streakmaster.extensions import get_context

    app = create_app("development")
    scheduler = app.extensions["streakmaster_scheduler"]
    try:
        assert scheduler.running
        assert exit_hooks == [scheduler.stop]

        for hook in exit_hooks:
            hook()
        assert not scheduler.running
    finally:
        scheduler.stop()
        get_context(app).dispose()
