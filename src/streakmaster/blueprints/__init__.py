"""Blueprint exports."""

from . import admin, categories, habits, profiles

__all__ = [
    "admin",
    "categories",
    "habits",
    "profiles",
]
