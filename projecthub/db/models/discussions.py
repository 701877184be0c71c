"""ORM models for project discussions: ProjectThread, ProjectThreadTag, ThreadMessage, ThreadMessageAttachment."""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projecthub.db.base import Base, IdMixin, TimestampMixin
from projecthub.db.models.projects import Project
from projecthub.db.models.users import User


class ProjectThread(Base, IdMixin, TimestampMixin):
    """Discussion topic inside a project. Independent of imported email."""

    __tablename__ = "project_threads"

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    project: Mapped[Project] = relationship("Project", back_populates="threads")
    creator: Mapped[Optional[User]] = relationship("User")
    tags: Mapped[list["ProjectThreadTag"]] = relationship(
        "ProjectThreadTag", back_populates="thread", cascade="all, delete-orphan"
    )
    messages: Mapped[list["ThreadMessage"]] = relationship(
        "ThreadMessage",
        back_populates="thread",
        cascade="all, delete-orphan",
        order_by="ThreadMessage.created_at",
    )


class ProjectThreadTag(Base, IdMixin, TimestampMixin):
    __tablename__ = "project_thread_tags"

    thread_id: Mapped[str] = mapped_column(ForeignKey("project_threads.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    thread: Mapped[ProjectThread] = relationship("ProjectThread", back_populates="tags")


class ThreadMessage(Base, IdMixin, TimestampMixin):
    """Message in a project thread; parent_id nests replies one level down."""

    __tablename__ = "thread_messages"

    thread_id: Mapped[str] = mapped_column(ForeignKey("project_threads.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    parent_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("thread_messages.id", ondelete="CASCADE"), nullable=True, index=True
    )

    thread: Mapped[ProjectThread] = relationship("ProjectThread", back_populates="messages")
    user: Mapped[Optional[User]] = relationship("User")
    parent: Mapped[Optional["ThreadMessage"]] = relationship(
        "ThreadMessage", remote_side="ThreadMessage.id", back_populates="replies"
    )
    replies: Mapped[list["ThreadMessage"]] = relationship(
        "ThreadMessage", back_populates="parent", order_by="ThreadMessage.created_at"
    )
    attachments: Mapped[list["ThreadMessageAttachment"]] = relationship(
        "ThreadMessageAttachment", back_populates="message", cascade="all, delete-orphan"
    )


class ThreadMessageAttachment(Base, IdMixin, TimestampMixin):
    __tablename__ = "thread_message_attachments"

    message_id: Mapped[str] = mapped_column(ForeignKey("thread_messages.id", ondelete="CASCADE"), nullable=False)
    filename: Mapped[str] = mapped_column(String(512), nullable=False)
    content_type: Mapped[str] = mapped_column(String(128), nullable=False, default="application/octet-stream")
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    message: Mapped[ThreadMessage] = relationship("ThreadMessage", back_populates="attachments")
