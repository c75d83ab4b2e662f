"""Leaderboard ranking over profile total streaks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..models.profile import Profile


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    user_id: int
    username: str
    display_name: str
    total_streak: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "rank": self.rank,
            "user_id": self.user_id,
            "username": self.username,
            "display_name": self.display_name,
            "total_streak": self.total_streak,
        }


@dataclass
class Leaderboard:
    entries: list[LeaderboardEntry] = field(default_factory=list)
    current_user: Optional[LeaderboardEntry] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "current_user": self.current_user.to_dict() if self.current_user else None,
        }


def build_leaderboard(
    profiles: Sequence[Profile],
    current_user_id: Optional[int] = None,
    *,
    limit: int = 10,
) -> Leaderboard:
    """Rank profiles by total streak and pick out the current user's position.

    Ranks are 1-based positions in the ordering (highest streak first, ties by
    username), so tied users get consecutive ranks. The current user is
    reported even when they fall outside the top ``limit``.
    """
    ordered = sorted(profiles, key=lambda p: (-(p.total_streak or 0), p.username))
    ranked = [
        LeaderboardEntry(
            rank=index,
            user_id=profile.id,  # type: ignore[arg-type]
            username=profile.username,
            display_name=profile.display_name or profile.username,
            total_streak=profile.total_streak or 0,
        )
        for index, profile in enumerate(ordered, start=1)
    ]
    current = next((entry for entry in ranked if entry.user_id == current_user_id), None)
    return Leaderboard(entries=ranked[:limit], current_user=current)


__all__ = ["Leaderboard", "LeaderboardEntry", "build_leaderboard"]
