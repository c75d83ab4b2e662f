"""Category routes."""

from __future__ import annotations

from flask import jsonify, request

from ...exceptions import CategoryNotFoundError, ProfileNotFoundError
from ...extensions import get_context
from ...models.category import Category
from . import bp


def _name_from_payload() -> str:
    data = request.get_json(silent=True) or {}
    name = data.get("name") if isinstance(data, dict) else None
    if not isinstance(name, str):
        raise ValueError("Please provide a category name.")
    return name


def _category_dict(category: Category) -> dict:
    return {"id": category.id, "name": category.name}


@bp.get("/")
def list_categories(user_id: int):
    ctx = get_context()
    if ctx.profile_repo.get_by_id(user_id) is None:
        raise ProfileNotFoundError(user_id)
    return jsonify([_category_dict(c) for c in ctx.category_repo.list_for_user(user_id)])


@bp.post("/")
def create_category(user_id: int):
    ctx = get_context()
    if ctx.profile_repo.get_by_id(user_id) is None:
        raise ProfileNotFoundError(user_id)
    category = ctx.category_repo.create(
        Category(user_id=user_id, name=_name_from_payload()), user_id=user_id
    )
    return jsonify(_category_dict(category)), 201


@bp.patch("/<int:category_id>")
def rename_category(user_id: int, category_id: int):
    category = get_context().category_repo.rename(
        category_id, _name_from_payload(), user_id=user_id
    )
    return jsonify(_category_dict(category))


@bp.delete("/<int:category_id>")
def delete_category(user_id: int, category_id: int):
    """Delete a category; its habits become uncategorized."""

    if not get_context().category_repo.delete(category_id, user_id=user_id):
        raise CategoryNotFoundError(category_id)
    return jsonify({"deleted": category_id})
