"""ORM model for platform users."""

from typing import Optional

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projecthub.db.base import Base, IdMixin, TimestampMixin
from projecthub.db.models.enums import UserRole


class User(Base, IdMixin, TimestampMixin):
    """Identity record. One row per (lower-cased) email address."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole, native_enum=False), nullable=False, default=UserRole.MEMBER)

    email_participations: Mapped[list["EmailParticipant"]] = relationship(  # noqa: F821
        "EmailParticipant", back_populates="user"
    )
