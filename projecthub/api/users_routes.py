"""Users API: list with email participations, find-or-create by email."""

from typing import Any

from fastapi import APIRouter, Response

from projecthub.db.repositories import users_repo
from projecthub.models.requests import UserCreate

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
def list_users() -> list[dict[str, Any]]:
    return users_repo.list_users()


@router.post("", status_code=201)
def create_user(body: UserCreate, response: Response) -> dict[str, Any]:
    """201 with the new user, or 200 with the existing user for a known address."""
    user, created = users_repo.get_or_create_user(body.email, body.name, body.avatar)
    if not created:
        response.status_code = 200
    return user
