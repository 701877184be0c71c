"""Request bodies for the CRUD endpoints."""

from typing import Any, Optional

from pydantic import Field

from projecthub.db.models.enums import EventType, ParticipantRole, Priority, ProjectState
from projecthub.models.base import ApiModel
from projecthub.models.fields import FlexibleDatetime


# --- Users ---


class UserCreate(ApiModel):
    email: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None


# --- Projects ---


class ProjectCreate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectState] = None
    priority: Optional[Priority] = None
    start_date: FlexibleDatetime = None
    end_date: FlexibleDatetime = None
    budget: Optional[float] = None
    client: Optional[str] = None
    created_by: Optional[str] = None
    member_ids: list[str] = Field(default_factory=list)


class ProjectUpdate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectState] = None
    priority: Optional[Priority] = None
    start_date: FlexibleDatetime = None
    end_date: FlexibleDatetime = None
    budget: Optional[float] = None
    client: Optional[str] = None


class ProjectMemberAdd(ApiModel):
    user_id: Optional[str] = None
    role: str = "MEMBER"


class ProjectStatusCreate(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    order: Optional[int] = None


# --- Tasks ---


class TaskCreate(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status_id: Optional[str] = None
    assignee_id: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: FlexibleDatetime = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None


class TaskUpdate(TaskCreate):
    pass


class SubtaskCreate(ApiModel):
    title: Optional[str] = None
    is_completed: bool = False


class TaskCommentCreate(ApiModel):
    content: Optional[str] = None
    user_id: Optional[str] = None


# --- Time tracking ---


class TimeCategoryCreate(ApiModel):
    name: Optional[str] = None
    color: Optional[str] = None
    is_default: bool = False


class TimeEntryCreate(ApiModel):
    user_id: Optional[str] = None
    task_id: Optional[str] = None
    category_id: Optional[str] = None
    description: Optional[str] = None
    start_time: FlexibleDatetime = None
    end_time: FlexibleDatetime = None
    duration: Optional[int] = None
    is_running: bool = False
    billable: bool = True
    hourly_rate: Optional[float] = None
    notes: Optional[str] = None


class TimeEntryUpdate(ApiModel):
    task_id: Optional[str] = None
    category_id: Optional[str] = None
    description: Optional[str] = None
    start_time: FlexibleDatetime = None
    end_time: FlexibleDatetime = None
    duration: Optional[int] = None
    is_running: Optional[bool] = None
    billable: Optional[bool] = None
    hourly_rate: Optional[float] = None
    notes: Optional[str] = None


class ClearRunningRequest(ApiModel):
    user_id: Optional[str] = None


# --- Email threads ---


class ParticipantIn(ApiModel):
    email: str
    name: Optional[str] = None
    role: ParticipantRole = ParticipantRole.TO


class TagIn(ApiModel):
    name: str
    color: Optional[str] = None


class EmailThreadCreate(ApiModel):
    subject: Optional[str] = None
    thread_id: Optional[str] = None
    project_id: Optional[str] = None
    participants: list[ParticipantIn] = Field(default_factory=list)
    tags: list[TagIn] = Field(default_factory=list)


class EmailThreadUpdate(ApiModel):
    subject: Optional[str] = None
    tags: Optional[list[TagIn]] = None


# --- Timelines ---


class TimelineEventIn(ApiModel):
    message_id: Optional[str] = None
    event_type: EventType = EventType.CUSTOM
    title: Optional[str] = None
    description: Optional[str] = None
    timestamp: FlexibleDatetime = None
    order: Optional[int] = None
    metadata: Optional[dict[str, Any]] = None


class TimelineEventUpdate(ApiModel):
    event_type: Optional[EventType] = None
    title: Optional[str] = None
    description: Optional[str] = None
    timestamp: FlexibleDatetime = None
    order: Optional[int] = None
    metadata: Optional[dict[str, Any]] = None


class TimelineCreate(ApiModel):
    thread_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    is_public: bool = False
    events: list[TimelineEventIn] = Field(default_factory=list)


class TimelineUpdate(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None
    is_public: Optional[bool] = None
    events: Optional[list[TimelineEventIn]] = None


class TimelineGenerateRequest(ApiModel):
    thread_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    is_public: bool = False


class ReorderRequest(ApiModel):
    event_ids: Optional[list[str]] = None


# --- Project discussions ---


class AttachmentIn(ApiModel):
    filename: str
    content_type: str = "application/octet-stream"
    size: int = 0
    url: Optional[str] = None


class ProjectThreadCreate(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    user_id: Optional[str] = None


class ProjectThreadUpdate(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None
    is_pinned: Optional[bool] = None


class ThreadMessageCreate(ApiModel):
    content: Optional[str] = None
    parent_id: Optional[str] = None
    user_id: Optional[str] = None
    attachments: list[AttachmentIn] = Field(default_factory=list)
