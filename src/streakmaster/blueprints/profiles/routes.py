"""Profile and leaderboard routes."""

from __future__ import annotations

from flask import jsonify, request
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...exceptions import ProfileNotFoundError
from ...extensions import get_context
from ...models.profile import Profile
from ...services.leaderboard import build_leaderboard
from . import bp


class ProfileForm(BaseModel):
    """Payload for creating a profile."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    username: str = Field(..., min_length=1, max_length=64)
    display_name: str = Field(default="", max_length=120)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if any(char.isspace() for char in value):
            raise ValueError("Usernames cannot contain spaces.")
        return value


def _profile_dict(profile: Profile) -> dict:
    return {
        "id": profile.id,
        "username": profile.username,
        "display_name": profile.display_name or profile.username,
        "total_streak": profile.total_streak,
    }


@bp.post("/")
def create_profile():
    """Register a new profile."""

    form = ProfileForm.model_validate(request.get_json(silent=True) or {})
    profile = get_context().profile_repo.create(
        Profile(username=form.username, display_name=form.display_name)
    )
    return jsonify(_profile_dict(profile)), 201


@bp.get("/<int:user_id>")
def get_profile(user_id: int):
    profile = get_context().profile_repo.get_by_id(user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    return jsonify(_profile_dict(profile))


@bp.get("/leaderboard")
def leaderboard():
    """Top profiles by total streak, plus the requesting user's rank."""

    user_id = request.args.get("user_id", type=int)
    limit = request.args.get("limit", default=10, type=int)
    if limit is None or limit < 1:
        raise ValueError("limit must be a positive integer")

    board = build_leaderboard(get_context().profile_repo.list_ranked(), user_id, limit=limit)
    return jsonify(board.to_dict())
