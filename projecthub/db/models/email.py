"""ORM models for imported email: EmailThread, EmailMessage, EmailParticipant, EmailAttachment, ThreadTag."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projecthub.db.base import Base, IdMixin, TimestampMixin
from projecthub.db.models.enums import ParticipantRole
from projecthub.db.models.projects import Project
from projecthub.db.models.users import User


class EmailThread(Base, IdMixin, TimestampMixin):
    """A conversation keyed by an external thread key. Deleting it removes everything it owns."""

    __tablename__ = "email_threads"

    thread_key: Mapped[str] = mapped_column(String(512), unique=True, nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(1024), nullable=False, index=True)
    project_id: Mapped[Optional[str]] = mapped_column(ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)

    project: Mapped[Optional[Project]] = relationship("Project", back_populates="email_threads")
    messages: Mapped[list["EmailMessage"]] = relationship(
        "EmailMessage",
        back_populates="thread",
        cascade="all, delete-orphan",
        order_by="EmailMessage.timestamp",
    )
    participants: Mapped[list["EmailParticipant"]] = relationship(
        "EmailParticipant", back_populates="thread", cascade="all, delete-orphan"
    )
    tags: Mapped[list["ThreadTag"]] = relationship("ThreadTag", back_populates="thread", cascade="all, delete-orphan")
    timeline_view: Mapped[Optional["TimelineView"]] = relationship(  # noqa: F821
        "TimelineView", back_populates="thread", cascade="all, delete-orphan", uselist=False
    )


class EmailMessage(Base, IdMixin, TimestampMixin):
    """Single message of a thread; parent_message_id forms the reply chain."""

    __tablename__ = "email_messages"

    thread_id: Mapped[str] = mapped_column(ForeignKey("email_threads.id", ondelete="CASCADE"), nullable=False, index=True)
    message_key: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    from_address: Mapped[str] = mapped_column(String(320), nullable=False)
    to: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    cc: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    bcc: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    subject: Mapped[str] = mapped_column(String(1024), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    text_body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(nullable=False, index=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_forwarded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_replied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    parent_message_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("email_messages.id", ondelete="SET NULL"), nullable=True
    )

    thread: Mapped[EmailThread] = relationship("EmailThread", back_populates="messages")
    parent: Mapped[Optional["EmailMessage"]] = relationship(
        "EmailMessage", remote_side="EmailMessage.id", back_populates="replies"
    )
    replies: Mapped[list["EmailMessage"]] = relationship("EmailMessage", back_populates="parent")
    attachments: Mapped[list["EmailAttachment"]] = relationship(
        "EmailAttachment", back_populates="message", cascade="all, delete-orphan"
    )


class EmailParticipant(Base, IdMixin, TimestampMixin):
    """Address seen on a thread, optionally linked to a User."""

    __tablename__ = "email_participants"

    thread_id: Mapped[str] = mapped_column(ForeignKey("email_threads.id", ondelete="CASCADE"), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    role: Mapped[ParticipantRole] = mapped_column(Enum(ParticipantRole, native_enum=False), nullable=False)
    user_id: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    thread: Mapped[EmailThread] = relationship("EmailThread", back_populates="participants")
    user: Mapped[Optional[User]] = relationship("User", back_populates="email_participations")


class EmailAttachment(Base, IdMixin, TimestampMixin):
    """Attachment metadata; content itself is referenced by url, never stored."""

    __tablename__ = "email_attachments"

    message_id: Mapped[str] = mapped_column(ForeignKey("email_messages.id", ondelete="CASCADE"), nullable=False, index=True)
    filename: Mapped[str] = mapped_column(String(512), nullable=False)
    content_type: Mapped[str] = mapped_column(String(128), nullable=False, default="application/octet-stream")
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    message: Mapped[EmailMessage] = relationship("EmailMessage", back_populates="attachments")


class ThreadTag(Base, IdMixin, TimestampMixin):
    """Label on an email thread."""

    __tablename__ = "thread_tags"

    thread_id: Mapped[str] = mapped_column(ForeignKey("email_threads.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    thread: Mapped[EmailThread] = relationship("EmailThread", back_populates="tags")
