"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...exceptions import AlreadyLoggedError, HabitNotFoundError, ProfileNotFoundError
from ...models.habit import Habit, HabitLog
from ...models.profile import Profile
from ...services.streaks import total_streak
from ..database import SessionFactory


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @staticmethod
    def _owned(session: Session, habit_id: int, user_id: int) -> Optional[Habit]:
        return session.exec(
            select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
        ).first()

    @staticmethod
    def _is_owned(session: Session, habit_id: int, user_id: int) -> bool:
        # Column-only query so no Habit instance enters the identity map.
        return (
            session.exec(
                select(Habit.id).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            is not None
        )

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = self._owned(session, habit_id, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_with_logs(
        self, habit_id: int, *, user_id: int
    ) -> Optional[tuple[Habit, list[HabitLog]]]:
        """Retrieve a habit together with its full log history."""
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            if habit is None:
                return None
            logs = list(
                session.exec(
                    select(HabitLog)
                    .where(HabitLog.habit_id == habit_id)
                    .order_by(HabitLog.log_date)  # type: ignore
                ).all()
            )
            session.expunge_all()
            return habit, logs

    def list_for_user(self, user_id: int) -> list[Habit]:
        """List every habit owned by a user, oldest first."""
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Habit)
                    .where(Habit.user_id == user_id)
                    .order_by(Habit.created_at, Habit.id)  # type: ignore
                ).all()
            )
            session.expunge_all()
            return rows

    def list_all(self) -> list[Habit]:
        """List every habit of every user (batch jobs only)."""
        with self.session_factory() as session:
            rows = list(session.exec(select(Habit).order_by(Habit.id)).all())  # type: ignore
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            if session.get(Profile, user_id) is None:
                raise ProfileNotFoundError(user_id)
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            if habit.id is None or not self._is_owned(session, habit.id, user_id):
                raise HabitNotFoundError(habit.id or 0)
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit and, through the cascade, all of its logs."""
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            if habit is None:
                return False
            session.delete(habit)
            session.commit()
            return True

    # Habit log operations
    def list_logs(self, habit_id: int, *, user_id: int) -> list[HabitLog]:
        """Get every log of a habit, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(HabitLog)
                .join(Habit)
                .where(Habit.user_id == user_id)
                .where(HabitLog.habit_id == habit_id)
                .order_by(HabitLog.log_date)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def logs_by_habit(self, habit_ids: Iterable[int], *, user_id: int) -> dict[int, list[HabitLog]]:
        """Get logs for several habits keyed by habit ID, each list oldest first."""
        ids = list(habit_ids)
        grouped: dict[int, list[HabitLog]] = {habit_id: [] for habit_id in ids}
        if not ids:
            return grouped
        with self.session_factory() as session:
            statement = (
                select(HabitLog)
                .join(Habit)
                .where(Habit.user_id == user_id)
                .where(HabitLog.habit_id.in_(ids))  # type: ignore[attr-defined]
                .order_by(HabitLog.habit_id, HabitLog.log_date)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
        for log in rows:
            grouped.setdefault(log.habit_id, []).append(log)
        return grouped

    def insert_log(self, log: HabitLog, *, user_id: int) -> HabitLog:
        """Insert a log unless one already exists for its (habit, day).

        The composite primary key is the uniqueness guard, so two concurrent
        writers for the same day cannot both succeed.
        """
        with self.session_factory() as session:
            if not self._is_owned(session, log.habit_id, user_id):
                raise HabitNotFoundError(log.habit_id)
            session.add(log)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise AlreadyLoggedError(log.habit_id, log.log_date) from exc
            session.refresh(log)
            session.expunge(log)
            return log

    def update_streak(self, habit_id: int, streak: int, *, user_id: int) -> Habit:
        """Persist a habit's current streak."""
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            if habit is None:
                raise HabitNotFoundError(habit_id)
            habit.current_streak = streak
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def save_streak_and_total(self, habit_id: int, streak: int, *, user_id: int) -> int:
        """Persist a habit's streak and its owner's re-summed total in one transaction.

        Returns the new total streak of the owner.
        """
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            if habit is None:
                raise HabitNotFoundError(habit_id)
            profile = session.get(Profile, user_id)
            if profile is None:
                raise ProfileNotFoundError(user_id)

            habit.current_streak = streak
            session.add(habit)
            session.flush()

            owned = session.exec(select(Habit).where(Habit.user_id == user_id)).all()
            profile.total_streak = total_streak(user_id, owned)
            profile.updated_at = datetime.now(timezone.utc)
            session.add(profile)
            session.commit()
            return profile.total_streak


__all__ = ["SQLModelHabitRepository"]
