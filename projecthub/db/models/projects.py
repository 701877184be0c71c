"""ORM models for projects and their tasks: Project, ProjectMember, ProjectStatus, Task, Subtask, TaskComment."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Enum, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projecthub.db.base import Base, IdMixin, TimestampMixin
from projecthub.db.models.enums import Priority, ProjectState
from projecthub.db.models.users import User


class Project(Base, IdMixin, TimestampMixin):
    """Top-level unit of work."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ProjectState] = mapped_column(
        Enum(ProjectState, native_enum=False), nullable=False, default=ProjectState.ACTIVE, index=True
    )
    priority: Mapped[Priority] = mapped_column(Enum(Priority, native_enum=False), nullable=False, default=Priority.MEDIUM)
    start_date: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    budget: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    client: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    creator: Mapped[Optional[User]] = relationship("User")
    members: Mapped[list["ProjectMember"]] = relationship(
        "ProjectMember", back_populates="project", cascade="all, delete-orphan"
    )
    statuses: Mapped[list["ProjectStatus"]] = relationship(
        "ProjectStatus", back_populates="project", cascade="all, delete-orphan", order_by="ProjectStatus.order"
    )
    tasks: Mapped[list["Task"]] = relationship("Task", back_populates="project", cascade="all, delete-orphan")
    time_entries: Mapped[list["TimeEntry"]] = relationship(  # noqa: F821
        "TimeEntry", back_populates="project", cascade="all, delete-orphan"
    )
    time_categories: Mapped[list["TimeEntryCategory"]] = relationship(  # noqa: F821
        "TimeEntryCategory", back_populates="project", cascade="all, delete-orphan"
    )
    threads: Mapped[list["ProjectThread"]] = relationship(  # noqa: F821
        "ProjectThread", back_populates="project", cascade="all, delete-orphan"
    )
    email_threads: Mapped[list["EmailThread"]] = relationship("EmailThread", back_populates="project")  # noqa: F821


class ProjectMember(Base, IdMixin, TimestampMixin):
    """Membership of a user in a project."""

    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_member"),)

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="MEMBER")

    project: Mapped[Project] = relationship("Project", back_populates="members")
    user: Mapped[User] = relationship("User")


class ProjectStatus(Base, IdMixin, TimestampMixin):
    """Ordered, project-scoped task column (Planning, In Progress, ...)."""

    __tablename__ = "project_statuses"

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    project: Mapped[Project] = relationship("Project", back_populates="statuses")


class Task(Base, IdMixin, TimestampMixin):
    """Unit of work inside a project."""

    __tablename__ = "tasks"

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    status_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("project_statuses.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    assignee_id: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    priority: Mapped[Priority] = mapped_column(Enum(Priority, native_enum=False), nullable=False, default=Priority.MEDIUM)
    due_date: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    estimated_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    actual_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    project: Mapped[Project] = relationship("Project", back_populates="tasks")
    status: Mapped[Optional[ProjectStatus]] = relationship("ProjectStatus")
    assignee: Mapped[Optional[User]] = relationship("User")
    subtasks: Mapped[list["Subtask"]] = relationship(
        "Subtask", back_populates="task", cascade="all, delete-orphan", order_by="Subtask.order"
    )
    comments: Mapped[list["TaskComment"]] = relationship(
        "TaskComment", back_populates="task", cascade="all, delete-orphan", order_by="TaskComment.created_at"
    )


class Subtask(Base, IdMixin, TimestampMixin):
    """Checklist item of a task."""

    __tablename__ = "subtasks"

    task_id: Mapped[str] = mapped_column(ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    task: Mapped[Task] = relationship("Task", back_populates="subtasks")


class TaskComment(Base, IdMixin, TimestampMixin):
    """Comment left on a task."""

    __tablename__ = "task_comments"

    task_id: Mapped[str] = mapped_column(ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    task: Mapped[Task] = relationship("Task", back_populates="comments")
    user: Mapped[Optional[User]] = relationship("User")
