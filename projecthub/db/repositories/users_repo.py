"""User repository: list, find-or-create by email, lookups used by other repositories."""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from projecthub.db import get_session
from projecthub.db.models import EmailParticipant, User
from projecthub.db.serializers import user_to_dict
from projecthub.errors import NotFound, ValidationFailed
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.db.users_repo")

ACTION_CREATED = "created"
ACTION_UPDATED = "updated"
ACTION_FOUND = "found"


def normalize_email(address: Optional[str]) -> str:
    return (address or "").strip().lower()


def default_name(address: str) -> str:
    """Display name for an unseen address: its local part."""
    return address.split("@", 1)[0]


def require_user(session: Session, user_id: Optional[str]) -> User:
    user = session.get(User, user_id) if user_id else None
    if user is None:
        raise NotFound("User not found")
    return user


def upsert_by_email(session: Session, email: str, name: Optional[str] = None) -> tuple[User, str]:
    """Find the user for email; create it (name defaults to the local part) or refresh a changed name."""
    address = normalize_email(email)
    user = session.scalars(select(User).where(User.email == address)).first()
    if user is None:
        user = User(email=address, name=name or default_name(address))
        session.add(user)
        session.flush()
        return user, ACTION_CREATED
    if name and user.name != name:
        user.name = name
        session.flush()
        return user, ACTION_UPDATED
    return user, ACTION_FOUND


def list_users() -> list[dict[str, Any]]:
    """All users, newest first, with the email threads they take part in."""
    with get_session() as session:
        q = (
            select(User)
            .options(selectinload(User.email_participations).selectinload(EmailParticipant.thread))
            .order_by(User.created_at.desc())
        )
        return [user_to_dict(u, include_participations=True) for u in session.scalars(q).all()]


def get_or_create_user(email: Optional[str], name: Optional[str] = None, avatar: Optional[str] = None) -> tuple[dict[str, Any], bool]:
    """Explicit user registration. Returns (user, created)."""
    if not normalize_email(email):
        raise ValidationFailed("Email is required")
    with get_session() as session:
        user, action = upsert_by_email(session, email, name)
        if avatar:
            user.avatar = avatar
            session.flush()
        logger.info("users.upsert", email=user.email, action=action)
        return user_to_dict(user), action == ACTION_CREATED
