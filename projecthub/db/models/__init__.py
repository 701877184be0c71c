"""Re-export all ORM models so Base.metadata has all tables."""

from projecthub.db.models.discussions import (
    ProjectThread,
    ProjectThreadTag,
    ThreadMessage,
    ThreadMessageAttachment,
)
from projecthub.db.models.email import (
    EmailAttachment,
    EmailMessage,
    EmailParticipant,
    EmailThread,
    ThreadTag,
)
from projecthub.db.models.enums import EventType, ParticipantRole, Priority, ProjectState, UserRole
from projecthub.db.models.projects import Project, ProjectMember, ProjectStatus, Subtask, Task, TaskComment
from projecthub.db.models.time_tracking import TimeEntry, TimeEntryCategory
from projecthub.db.models.timeline import TimelineEvent, TimelineView
from projecthub.db.models.users import User

__all__ = [
    "User",
    "Project",
    "ProjectMember",
    "ProjectStatus",
    "Task",
    "Subtask",
    "TaskComment",
    "TimeEntry",
    "TimeEntryCategory",
    "EmailThread",
    "EmailMessage",
    "EmailParticipant",
    "EmailAttachment",
    "ThreadTag",
    "TimelineView",
    "TimelineEvent",
    "ProjectThread",
    "ProjectThreadTag",
    "ThreadMessage",
    "ThreadMessageAttachment",
    "ProjectState",
    "Priority",
    "UserRole",
    "ParticipantRole",
    "EventType",
]
