"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing habit categories."""

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        ...

    def list_for_user(self, user_id: int) -> list[Category]:
        """List a user's categories by name."""
        ...

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        ...

    def rename(self, category_id: int, name: str, *, user_id: int) -> Category:
        """Rename a category; raise CategoryNotFoundError when it is not the caller's."""
        ...

    def delete(self, category_id: int, *, user_id: int) -> bool:
        """Delete a category, leaving its habits uncategorized."""
        ...
