"""ORM row -> JSON-ready dict conversion (camelCase keys). Call inside an open session."""

from typing import Any, Optional

from projecthub.db.models import (
    EmailAttachment,
    EmailMessage,
    EmailParticipant,
    EmailThread,
    Project,
    ProjectMember,
    ProjectStatus,
    ProjectThread,
    Subtask,
    Task,
    TaskComment,
    ThreadMessage,
    ThreadTag,
    TimeEntry,
    TimeEntryCategory,
    TimelineEvent,
    TimelineView,
    User,
)
from projecthub.utils.dates import isoformat


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _timestamps(row: Any) -> dict[str, Optional[str]]:
    return {"createdAt": isoformat(row.created_at), "updatedAt": isoformat(row.updated_at)}


# --- Users ---


def user_summary(user: Optional[User]) -> Optional[dict[str, Any]]:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email, "avatar": user.avatar}


def user_to_dict(user: User, include_participations: bool = False) -> dict[str, Any]:
    data = {
        **user_summary(user),
        "role": _enum_value(user.role),
        **_timestamps(user),
    }
    if include_participations:
        data["emailParticipations"] = [
            {
                **participant_to_dict(p),
                "thread": {"id": p.thread.id, "subject": p.thread.subject, "threadId": p.thread.thread_key},
            }
            for p in user.email_participations
        ]
    return data


# --- Projects & tasks ---


def member_to_dict(member: ProjectMember) -> dict[str, Any]:
    return {
        "id": member.id,
        "projectId": member.project_id,
        "userId": member.user_id,
        "role": member.role,
        "user": user_summary(member.user),
    }


def status_to_dict(status: ProjectStatus) -> dict[str, Any]:
    return {
        "id": status.id,
        "projectId": status.project_id,
        "title": status.title,
        "description": status.description,
        "color": status.color,
        "order": status.order,
    }


def project_to_dict(project: Project) -> dict[str, Any]:
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "status": _enum_value(project.status),
        "priority": _enum_value(project.priority),
        "startDate": isoformat(project.start_date),
        "endDate": isoformat(project.end_date),
        "budget": project.budget,
        "client": project.client,
        "createdBy": project.created_by,
        "creator": user_summary(project.creator),
        "members": [member_to_dict(m) for m in project.members],
        "_count": {"tasks": len(project.tasks), "threads": len(project.threads)},
        **_timestamps(project),
    }


def subtask_to_dict(subtask: Subtask) -> dict[str, Any]:
    return {
        "id": subtask.id,
        "taskId": subtask.task_id,
        "title": subtask.title,
        "isCompleted": subtask.is_completed,
        "order": subtask.order,
    }


def comment_to_dict(comment: TaskComment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "taskId": comment.task_id,
        "content": comment.content,
        "user": user_summary(comment.user),
        **_timestamps(comment),
    }


def task_to_dict(task: Task, detail: bool = False) -> dict[str, Any]:
    data = {
        "id": task.id,
        "projectId": task.project_id,
        "title": task.title,
        "description": task.description,
        "statusId": task.status_id,
        "status": (
            {"id": task.status.id, "title": task.status.title, "color": task.status.color}
            if task.status is not None
            else None
        ),
        "assigneeId": task.assignee_id,
        "assignee": user_summary(task.assignee),
        "priority": _enum_value(task.priority),
        "dueDate": isoformat(task.due_date),
        "estimatedHours": task.estimated_hours,
        "actualHours": task.actual_hours,
        **_timestamps(task),
    }
    if detail:
        data["subtasks"] = [subtask_to_dict(s) for s in task.subtasks]
        data["comments"] = [comment_to_dict(c) for c in task.comments]
    return data


# --- Time tracking ---


def category_to_dict(category: TimeEntryCategory) -> dict[str, Any]:
    return {
        "id": category.id,
        "projectId": category.project_id,
        "name": category.name,
        "color": category.color,
        "isDefault": category.is_default,
        **_timestamps(category),
    }


def time_entry_to_dict(entry: TimeEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "projectId": entry.project_id,
        "userId": entry.user_id,
        "taskId": entry.task_id,
        "categoryId": entry.category_id,
        "description": entry.description,
        "startTime": isoformat(entry.start_time),
        "endTime": isoformat(entry.end_time),
        "duration": entry.duration,
        "isRunning": entry.is_running,
        "billable": entry.billable,
        "hourlyRate": entry.hourly_rate,
        "notes": entry.notes,
        "user": user_summary(entry.user),
        "category": (
            {"id": entry.category.id, "name": entry.category.name, "color": entry.category.color}
            if entry.category is not None
            else None
        ),
        "task": {"id": entry.task.id, "title": entry.task.title} if entry.task is not None else None,
        **_timestamps(entry),
    }


# --- Email ---


def participant_to_dict(participant: EmailParticipant, include_user: bool = False) -> dict[str, Any]:
    data = {
        "id": participant.id,
        "threadId": participant.thread_id,
        "email": participant.email,
        "name": participant.name,
        "role": _enum_value(participant.role),
        "userId": participant.user_id,
    }
    if include_user:
        data["user"] = user_summary(participant.user)
    return data


def tag_to_dict(tag: ThreadTag) -> dict[str, Any]:
    return {"id": tag.id, "name": tag.name, "color": tag.color}


def attachment_to_dict(attachment: EmailAttachment) -> dict[str, Any]:
    return {
        "id": attachment.id,
        "filename": attachment.filename,
        "contentType": attachment.content_type,
        "size": attachment.size,
        "url": attachment.url,
    }


def message_preview(message: Optional[EmailMessage]) -> Optional[dict[str, Any]]:
    if message is None:
        return None
    return {
        "id": message.id,
        "subject": message.subject,
        "from": message.from_address,
        "timestamp": isoformat(message.timestamp),
    }


def message_to_dict(message: EmailMessage, include_replies: bool = False) -> dict[str, Any]:
    data = {
        "id": message.id,
        "messageId": message.message_key,
        "threadId": message.thread_id,
        "from": message.from_address,
        "to": list(message.to or []),
        "cc": list(message.cc or []),
        "bcc": list(message.bcc or []),
        "subject": message.subject,
        "body": message.body,
        "textBody": message.text_body,
        "timestamp": isoformat(message.timestamp),
        "isRead": message.is_read,
        "isForwarded": message.is_forwarded,
        "isReplied": message.is_replied,
        "parentMessageId": message.parent_message_id,
        "attachments": [attachment_to_dict(a) for a in message.attachments],
        **_timestamps(message),
    }
    if include_replies:
        data["replies"] = [message_to_dict(r) for r in message.replies]
    return data


def thread_summary(thread: EmailThread) -> dict[str, Any]:
    """List view: first message as preview, participants with users, tags, message count."""
    first = thread.messages[0] if thread.messages else None
    return {
        "id": thread.id,
        "threadId": thread.thread_key,
        "subject": thread.subject,
        "projectId": thread.project_id,
        "messages": [message_to_dict(first)] if first is not None else [],
        "participants": [participant_to_dict(p, include_user=True) for p in thread.participants],
        "tags": [tag_to_dict(t) for t in thread.tags],
        "_count": {"messages": len(thread.messages)},
        **_timestamps(thread),
    }


def thread_to_dict(thread: EmailThread, include_messages: bool = True, include_timeline: bool = False) -> dict[str, Any]:
    data = {
        "id": thread.id,
        "threadId": thread.thread_key,
        "subject": thread.subject,
        "projectId": thread.project_id,
        "participants": [participant_to_dict(p) for p in thread.participants],
        "tags": [tag_to_dict(t) for t in thread.tags],
        "_count": {"messages": len(thread.messages)},
        **_timestamps(thread),
    }
    if include_messages:
        data["messages"] = [message_to_dict(m, include_replies=True) for m in thread.messages]
    if include_timeline:
        view = thread.timeline_view
        data["timelineView"] = timeline_to_dict(view, include_thread=False) if view is not None else None
    return data


# --- Timelines ---


def event_to_dict(event: TimelineEvent, with_body: bool = False) -> dict[str, Any]:
    message = None
    if event.message is not None:
        message = message_preview(event.message)
        if with_body:
            message["body"] = event.message.body
            message["textBody"] = event.message.text_body
    return {
        "id": event.id,
        "timelineId": event.timeline_id,
        "messageId": event.message_id,
        "eventType": _enum_value(event.event_type),
        "title": event.title,
        "description": event.description,
        "timestamp": isoformat(event.timestamp),
        "order": event.order,
        "metadata": event.event_metadata,
        "message": message,
        **_timestamps(event),
    }


def timeline_to_dict(view: TimelineView, include_thread: bool = True, with_body: bool = False) -> dict[str, Any]:
    data = {
        "id": view.id,
        "threadId": view.thread_id,
        "title": view.title,
        "description": view.description,
        "isPublic": view.is_public,
        "events": [event_to_dict(e, with_body=with_body) for e in view.events],
        "_count": {"events": len(view.events)},
        **_timestamps(view),
    }
    if include_thread:
        data["thread"] = thread_to_dict(view.thread, include_messages=with_body)
    return data


# --- Project discussions ---


def thread_message_to_dict(message: ThreadMessage, include_replies: bool = False) -> dict[str, Any]:
    data = {
        "id": message.id,
        "threadId": message.thread_id,
        "content": message.content,
        "parentId": message.parent_id,
        "user": user_summary(message.user),
        "attachments": [
            {"id": a.id, "filename": a.filename, "contentType": a.content_type, "size": a.size, "url": a.url}
            for a in message.attachments
        ],
        **_timestamps(message),
    }
    if include_replies:
        data["replies"] = [thread_message_to_dict(r) for r in message.replies]
    return data


def project_thread_to_dict(thread: ProjectThread, detail: bool = False) -> dict[str, Any]:
    data = {
        "id": thread.id,
        "projectId": thread.project_id,
        "title": thread.title,
        "description": thread.description,
        "isPinned": thread.is_pinned,
        "createdBy": thread.created_by,
        "creator": user_summary(thread.creator),
        "tags": [{"id": t.id, "name": t.name, "color": t.color} for t in thread.tags],
        "_count": {"messages": len(thread.messages)},
        **_timestamps(thread),
    }
    if detail:
        data["messages"] = [
            thread_message_to_dict(m, include_replies=True) for m in thread.messages if m.parent_id is None
        ]
    else:
        latest = thread.messages[-1] if thread.messages else None
        data["messages"] = [thread_message_to_dict(latest)] if latest is not None else []
    return data
