"""ORM models for time tracking: TimeEntryCategory, TimeEntry."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projecthub.db.base import Base, IdMixin, TimestampMixin
from projecthub.db.models.projects import Project, Task
from projecthub.db.models.users import User


class TimeEntryCategory(Base, IdMixin, TimestampMixin):
    """Project-scoped label for time entries. Name unique per project; at most one default."""

    __tablename__ = "time_entry_categories"

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    project: Mapped[Project] = relationship("Project", back_populates="time_categories")


class TimeEntry(Base, IdMixin, TimestampMixin):
    """A tracked work session. is_running with no end_time is a live timer."""

    __tablename__ = "time_entries"

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    task_id: Mapped[Optional[str]] = mapped_column(ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    category_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("time_entry_categories.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    start_time: Mapped[datetime] = mapped_column(nullable=False)
    end_time: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_running: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    billable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    hourly_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    project: Mapped[Project] = relationship("Project", back_populates="time_entries")
    user: Mapped[User] = relationship("User")
    task: Mapped[Optional[Task]] = relationship("Task")
    category: Mapped[Optional[TimeEntryCategory]] = relationship("TimeEntryCategory")
