"""SQLModel implementation of Profile repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...exceptions import ProfileNotFoundError
from ...models.profile import Profile
from ..database import SessionFactory


class SQLModelProfileRepository:
    """SQLModel-based profile repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        with self.session_factory() as session:
            obj = session.get(Profile, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_username(self, username: str) -> Optional[Profile]:
        with self.session_factory() as session:
            obj = session.exec(select(Profile).where(Profile.username == username.strip())).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, profile: Profile) -> Profile:
        """Create a new profile; usernames are unique."""
        with self.session_factory() as session:
            profile.username = profile.username.strip()
            session.add(profile)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ValueError(f"Username {profile.username!r} is already taken.") from exc
            session.refresh(profile)
            session.expunge(profile)
            return profile

    def list_ranked(self, limit: int | None = None) -> list[Profile]:
        """List profiles by total streak (highest first), ties broken by username."""
        with self.session_factory() as session:
            statement = select(Profile).order_by(
                Profile.total_streak.desc(), Profile.username  # type: ignore[attr-defined]
            )
            if limit is not None:
                statement = statement.limit(limit)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def update_total_streak(self, user_id: int, total: int) -> Profile:
        with self.session_factory() as session:
            profile = session.get(Profile, user_id)
            if profile is None:
                raise ProfileNotFoundError(user_id)
            profile.total_streak = total
            profile.updated_at = datetime.now(timezone.utc)
            session.add(profile)
            session.commit()
            session.refresh(profile)
            session.expunge(profile)
            return profile


__all__ = ["SQLModelProfileRepository"]
