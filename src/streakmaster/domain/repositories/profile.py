"""Profile repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.profile import Profile


class ProfileRepository(Protocol):
    """Repository for user profiles and their aggregate streak."""

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        """Retrieve a profile by ID."""
        ...

    def get_by_username(self, username: str) -> Optional[Profile]:
        """Retrieve a profile by username."""
        ...

    def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    def list_ranked(self, limit: int | None = None) -> list[Profile]:
        """List profiles ordered by total streak, highest first."""
        ...

    def update_total_streak(self, user_id: int, total: int) -> Profile:
        """Persist a profile's aggregate streak."""
        ...
