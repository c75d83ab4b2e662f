"""Pytest configuration and shared fixtures for Streakmaster tests.

This module provides database fixtures, test data factories, and a Flask test
client, so domain logic, repositories, services and routes can be exercised
without touching the real app database.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session

from streakmaster.infra.database import create_db_engine, create_session_factory, init_database
from streakmaster.infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelHabitRepository,
    SQLModelProfileRepository,
)
from streakmaster.logging_config import ROOT_LOGGER_NAME
from streakmaster.models import Category, Frequency, Habit, HabitLog, LogStatus, Profile
from streakmaster.services.habits import HabitService

# 2024-01-01 is a Monday; 2024-01-03 a Wednesday.
MONDAY = date(2024, 1, 1)
WEDNESDAY = date(2024, 1, 3)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Detach handlers that tests (or create_app) attached to the package logger."""

    yield
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


# =============================================================================
# Database Fixtures
# =============================================================================


class _FileDbConfig:
    """Minimal config object for create_db_engine."""

    def __init__(self, path: Path):
        self.DATABASE_URL = f"sqlite:///{path}"

    def sqlalchemy_engine_options(self):
        return {"connect_args": {"check_same_thread": False}}


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    engine = create_db_engine(_FileDbConfig(tmp_path / "test.db"))
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory, as used by the repositories."""

    return create_session_factory(db_engine)


@pytest.fixture
def db_session(db_engine):
    """Plain session for arranging test data directly."""

    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def profile_repo(session_factory) -> SQLModelProfileRepository:
    return SQLModelProfileRepository(session_factory)


@pytest.fixture
def category_repo(session_factory) -> SQLModelCategoryRepository:
    return SQLModelCategoryRepository(session_factory)


@pytest.fixture
def habit_service(habit_repo, profile_repo, category_repo) -> HabitService:
    return HabitService(habit_repo, profile_repo, category_repo)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def profile_factory(db_session):
    """Factory for creating test profiles."""

    counter = {"n": 0}

    def _create_profile(
        username: str | None = None,
        display_name: str = "",
        total_streak: int = 0,
    ) -> Profile:
        if username is None:
            counter["n"] += 1
            username = f"tester{counter['n']}"
        profile = Profile(username=username, display_name=display_name, total_streak=total_streak)
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _create_profile


@pytest.fixture
def profile(profile_factory) -> Profile:
    """Default owner for habits."""

    return profile_factory(username="tester")


@pytest.fixture
def category_factory(db_session, profile):
    """Factory for creating test categories."""

    def _create_category(name: str = "Health", owner: Profile | None = None) -> Category:
        owner = owner or profile
        category = Category(user_id=owner.id, name=name)
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category

    return _create_category


@pytest.fixture
def habit_factory(db_session, profile):
    """Factory for creating test habits, bypassing the service validation."""

    def _create_habit(
        name: str = "Test Habit",
        frequency: Frequency = Frequency.DAILY,
        start_date: date = MONDAY,
        end_date: date | None = None,
        weekdays: list[int] | None = None,
        current_streak: int = 0,
        owner: Profile | None = None,
        category_id: int | None = None,
    ) -> Habit:
        owner = owner or profile
        habit = Habit(
            user_id=owner.id,
            name=name,
            frequency=frequency,
            start_date=start_date,
            end_date=end_date,
            weekdays=weekdays,
            current_streak=current_streak,
            category_id=category_id,
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def log_factory(db_session):
    """Factory for creating habit logs."""

    def _create_log(habit: Habit, log_date: date, status: LogStatus = LogStatus.DONE) -> HabitLog:
        log = HabitLog(habit_id=habit.id, log_date=log_date, status=status)
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _create_log


def make_habit(**overrides) -> Habit:
    """Unsaved habit for pure engine tests."""

    fields = {
        "id": 1,
        "user_id": 1,
        "name": "Read",
        "frequency": Frequency.DAILY,
        "start_date": MONDAY,
    }
    fields.update(overrides)
    return Habit(**fields)


def make_log(day: date, status: LogStatus = LogStatus.DONE, habit_id: int = 1) -> HabitLog:
    return HabitLog(habit_id=habit_id, log_date=day, status=status)


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Flask app bound to a temporary SQLite database."""

    monkeypatch.setenv("STREAKMASTER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("STREAKMASTER_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("STREAKMASTER_SCHEDULER_ENABLED", "false")

    from streakmaster import create_app
    from streakmaster.extensions import get_context

    flask_app = create_app("testing")
    yield flask_app
    get_context(flask_app).dispose()


@pytest.fixture
def client(app):
    return app.test_client()
