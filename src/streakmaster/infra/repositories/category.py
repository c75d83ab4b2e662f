"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...exceptions import CategoryNotFoundError
from ...models.category import Category
from ...models.habit import Habit
from ..database import SessionFactory


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(self, user_id: int) -> list[Category]:
        """List a user's categories by name."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .order_by(Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category; names are unique per user."""
        name = category.name.strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        with self.session_factory() as session:
            category.user_id = user_id
            category.name = name
            session.add(category)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ValueError(f"Category {name!r} already exists.") from exc
            session.refresh(category)
            session.expunge(category)
            return category

    def rename(self, category_id: int, name: str, *, user_id: int) -> Category:
        """Rename a category."""
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        with self.session_factory() as session:
            category = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if category is None:
                raise CategoryNotFoundError(category_id)
            category.name = name
            session.add(category)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ValueError(f"Category {name!r} already exists.") from exc
            session.refresh(category)
            session.expunge(category)
            return category

    def delete(self, category_id: int, *, user_id: int) -> bool:
        """Delete a category; its habits become uncategorized."""
        with self.session_factory() as session:
            category = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if category is None:
                return False
            habits = session.exec(
                select(Habit).where(Habit.category_id == category_id, Habit.user_id == user_id)
            ).all()
            for habit in habits:
                habit.category_id = None
                session.add(habit)
            session.delete(category)
            session.commit()
            return True


__all__ = ["SQLModelCategoryRepository"]
