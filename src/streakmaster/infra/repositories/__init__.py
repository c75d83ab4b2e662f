"""Concrete repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .habit import SQLModelHabitRepository
from .profile import SQLModelProfileRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelHabitRepository",
    "SQLModelProfileRepository",
]
