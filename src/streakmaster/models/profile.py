"""Per-user profile holding the aggregate streak."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .category import Category
    from .habit import Habit


class Profile(SQLModel, table=True):
    """A habit owner; ``total_streak`` is derived from the owned habits."""

    __tablename__: ClassVar[str] = "profile"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    display_name: str = Field(default="", max_length=120)
    total_streak: int = Field(default=0, nullable=False, ge=0, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    # Bumped whenever total_streak is written.
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    habits: list["Habit"] = Relationship(
        back_populates="owner",
        sa_relationship=relationship("Habit", back_populates="owner"),
    )
    categories: list["Category"] = Relationship(
        back_populates="owner",
        sa_relationship=relationship("Category", back_populates="owner"),
    )
