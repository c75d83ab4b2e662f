"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelHabitRepository,
    SQLModelProfileRepository,
)
from .logging_config import get_logger
from .services.habits import HabitService
from .services.recompute import RecomputeSummary, recompute_all_streaks

logger = get_logger("context")


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    # Configuration
    config: BaseConfig

    # Database
    engine: Engine
    session_factory: SessionFactory

    # Repositories
    habit_repo: SQLModelHabitRepository
    profile_repo: SQLModelProfileRepository
    category_repo: SQLModelCategoryRepository

    # Services
    habit_service: HabitService

    def recompute_streaks(self) -> RecomputeSummary:
        """Run the batch streak recomputation against this context's database."""
        return recompute_all_streaks(self.habit_repo, self.profile_repo)

    def dispose(self) -> None:
        self.engine.dispose()


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    habit_repo = SQLModelHabitRepository(session_factory)
    profile_repo = SQLModelProfileRepository(session_factory)
    category_repo = SQLModelCategoryRepository(session_factory)

    ctx = AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_repo=habit_repo,
        profile_repo=profile_repo,
        category_repo=category_repo,
        habit_service=HabitService(habit_repo, profile_repo, category_repo),
    )
    logger.debug("Application context created", extra={"database_url": config.DATABASE_URL})
    return ctx


__all__ = ["AppContext", "create_app_context"]
