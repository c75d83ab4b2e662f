"""Habit tracking data structures."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .category import Category
    from .profile import Profile


class Frequency(str, Enum):
    """How often a habit recurs."""

    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM_WEEKDAYS = "weekdays"


class LogStatus(str, Enum):
    """Outcome recorded for a habit on a calendar day."""

    DONE = "done"
    SKIPPED = "skipped"
    MISSED = "missed"


def weekday_of(day: date) -> int:
    """Return the weekday of ``day`` with 0 = Sunday through 6 = Saturday."""

    return day.isoweekday() % 7


class Habit(SQLModel, table=True):
    """A user-defined recurring habit with a schedule and a cached streak."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="profile.id", nullable=False, index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    frequency: Frequency = Field(default=Frequency.DAILY, nullable=False)
    # Sunday-based weekday numbers; only meaningful for custom weekday habits.
    weekdays: Optional[list[int]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    start_date: date = Field(nullable=False)
    end_date: Optional[date] = Field(default=None)
    current_streak: int = Field(default=0, nullable=False, ge=0)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    logs: list["HabitLog"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitLog", back_populates="habit", cascade="all, delete-orphan"
        ),
    )

    owner: "Profile" = Relationship(
        sa_relationship=relationship("Profile", back_populates="habits")
    )
    category: Optional["Category"] = Relationship(
        sa_relationship=relationship("Category", back_populates="habits")
    )

    def weekly_occurrence_weekday(self) -> int:
        """Weekday a weekly habit recurs on, always derived from ``start_date``."""

        return weekday_of(self.start_date)


class HabitLog(SQLModel, table=True):
    """Completion status of a habit on one calendar day; immutable once written."""

    __tablename__: ClassVar[str] = "habit_log"

    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    log_date: date = Field(primary_key=True, index=True)
    status: LogStatus = Field(nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    habit: "Habit" = Relationship(
        back_populates="logs",
        sa_relationship=relationship("Habit", back_populates="logs"),
    )
