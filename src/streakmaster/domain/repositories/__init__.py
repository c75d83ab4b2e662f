"""Repository protocol definitions for domain layer."""

from .category import CategoryRepository
from .habit import HabitRepository
from .profile import ProfileRepository

__all__ = [
    "CategoryRepository",
    "HabitRepository",
    "ProfileRepository",
]
