"""Habit category definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .habit import Habit
    from .profile import Profile


class Category(SQLModel, table=True):
    """User-defined grouping for habits."""

    __tablename__: ClassVar[str] = "category"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_category_user_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="profile.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=64, index=True)

    habits: list["Habit"] = Relationship(
        back_populates="category",
        sa_relationship=relationship("Habit", back_populates="category"),
    )

    owner: "Profile" = Relationship(
        sa_relationship=relationship("Profile", back_populates="categories")
    )
