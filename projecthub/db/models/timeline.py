"""ORM models for thread timelines: TimelineView, TimelineEvent."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projecthub.db.base import Base, IdMixin, TimestampMixin
from projecthub.db.models.email import EmailMessage, EmailThread
from projecthub.db.models.enums import EventType


class TimelineView(Base, IdMixin, TimestampMixin):
    """Ordered, user-facing summary of one email thread (one view per thread)."""

    __tablename__ = "timeline_views"

    thread_id: Mapped[str] = mapped_column(
        ForeignKey("email_threads.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    title: Mapped[str] = mapped_column(String(1024), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    thread: Mapped[EmailThread] = relationship("EmailThread", back_populates="timeline_view")
    events: Mapped[list["TimelineEvent"]] = relationship(
        "TimelineEvent",
        back_populates="timeline",
        cascade="all, delete-orphan",
        order_by="TimelineEvent.order",
    )


class TimelineEvent(Base, IdMixin, TimestampMixin):
    """Display event. order is the dense 1..N position inside its timeline."""

    __tablename__ = "timeline_events"

    timeline_id: Mapped[str] = mapped_column(
        ForeignKey("timeline_views.id", ondelete="CASCADE"), nullable=False, index=True
    )
    message_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("email_messages.id", ondelete="SET NULL"), nullable=True
    )
    event_type: Mapped[EventType] = mapped_column(Enum(EventType, native_enum=False), nullable=False)
    title: Mapped[str] = mapped_column(String(1024), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    # "metadata" is reserved on declarative classes
    event_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column("metadata", JSON, nullable=True)

    timeline: Mapped[TimelineView] = relationship("TimelineView", back_populates="events")
    message: Mapped[Optional[EmailMessage]] = relationship("EmailMessage")
