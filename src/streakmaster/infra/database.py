"""Database infrastructure: engine, schema and session factories."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Tuple

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig

SessionFactory = Callable[[], ContextManager[Session]]


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    return create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())


def init_database(engine: Engine) -> None:
    """Initialize database schema."""
    # Import all models to ensure they're registered
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> SessionFactory:
    """Create a session factory function."""

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, SessionFactory]:
    """Create engine + session factory and make sure the schema exists.

    Used by the Flask app, the CLI and tests so that all of them share the same
    engine options. Returns (engine, session_factory).
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    return engine, create_session_factory(engine)


__all__ = [
    "SessionFactory",
    "bootstrap_database",
    "create_db_engine",
    "create_session_factory",
    "init_database",
]
