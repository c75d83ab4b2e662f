"""SQLModel table exports."""

from .category import Category
from .habit import Frequency, Habit, HabitLog, LogStatus, weekday_of
from .profile import Profile

__all__ = [
    "Category",
    "Frequency",
    "Habit",
    "HabitLog",
    "LogStatus",
    "Profile",
    "weekday_of",
]
