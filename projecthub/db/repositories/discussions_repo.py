"""Project discussion repository: threads, nested messages and the per-project activity timeline."""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from projecthub.config import DEFAULT_USER_ID
from projecthub.db import get_session
from projecthub.db.models import ProjectThread, ProjectThreadTag, ThreadMessage, ThreadMessageAttachment
from projecthub.db.repositories.pagination import paginate
from projecthub.db.repositories.projects_repo import require_project
from projecthub.db.repositories.users_repo import require_user
from projecthub.db.serializers import project_thread_to_dict, thread_message_to_dict, user_summary
from projecthub.errors import NotFound, ValidationFailed
from projecthub.models.requests import ProjectThreadCreate, ProjectThreadUpdate, ThreadMessageCreate
from projecthub.utils.dates import ensure_utc, utcnow
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.db.discussions_repo")

TAG_PALETTE = ("#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#EC4899", "#14B8A6", "#6366F1")


def tag_color(name: str) -> str:
    """Stable palette color for a tag name."""
    return TAG_PALETTE[sum(name.encode("utf-8")) % len(TAG_PALETTE)]


def _author(session: Session, user_id: Optional[str]) -> str:
    author = user_id or DEFAULT_USER_ID
    if not author:
        raise ValidationFailed("User ID is required")
    require_user(session, author)
    return author


def require_project_thread(session: Session, project_id: str, thread_id: str) -> ProjectThread:
    thread = session.get(ProjectThread, thread_id)
    if thread is None or thread.project_id != project_id:
        raise NotFound("Thread not found")
    return thread


def list_project_threads(project_id: str) -> list[dict[str, Any]]:
    """Pinned threads first, then most recently active."""
    with get_session() as session:
        q = (
            select(ProjectThread)
            .where(ProjectThread.project_id == project_id)
            .options(selectinload(ProjectThread.tags), selectinload(ProjectThread.messages))
            .order_by(ProjectThread.is_pinned.desc(), ProjectThread.updated_at.desc())
        )
        return [project_thread_to_dict(t) for t in session.scalars(q).all()]


def create_project_thread(project_id: str, payload: ProjectThreadCreate) -> dict[str, Any]:
    title = (payload.title or "").strip()
    if not title:
        raise ValidationFailed("Thread title is required")
    with get_session() as session:
        require_project(session, project_id)
        author = _author(session, payload.user_id)
        names = list(dict.fromkeys(t.strip() for t in payload.tags if t and t.strip()))
        thread = ProjectThread(
            project_id=project_id,
            title=title,
            description=payload.description,
            created_by=author,
            tags=[ProjectThreadTag(name=n, color=tag_color(n)) for n in names],
        )
        session.add(thread)
        session.flush()
        logger.info("discussions.thread.create", project_id=project_id, thread_id=thread.id)
        return project_thread_to_dict(thread)


def get_project_thread(project_id: str, thread_id: str) -> dict[str, Any]:
    with get_session() as session:
        return project_thread_to_dict(require_project_thread(session, project_id, thread_id), detail=True)


def update_project_thread(project_id: str, thread_id: str, payload: ProjectThreadUpdate) -> dict[str, Any]:
    fields = payload.provided()
    with get_session() as session:
        thread = require_project_thread(session, project_id, thread_id)
        if "title" in fields:
            title = (payload.title or "").strip()
            if not title:
                raise ValidationFailed("Thread title is required")
            thread.title = title
        if "description" in fields:
            thread.description = payload.description
        if payload.is_pinned is not None:
            thread.is_pinned = payload.is_pinned
        session.flush()
        return project_thread_to_dict(thread)


def delete_project_thread(project_id: str, thread_id: str) -> None:
    with get_session() as session:
        session.delete(require_project_thread(session, project_id, thread_id))
    logger.info("discussions.thread.delete", project_id=project_id, thread_id=thread_id)


def list_thread_messages(project_id: str, thread_id: str, page: int = 1, limit: int = 20) -> dict[str, Any]:
    """Top-level messages oldest first, each with its replies nested."""
    with get_session() as session:
        require_project_thread(session, project_id, thread_id)
        q = (
            select(ThreadMessage)
            .where(ThreadMessage.thread_id == thread_id)
            .where(ThreadMessage.parent_id.is_(None))
            .order_by(ThreadMessage.created_at.asc())
        )
        rows, pagination = paginate(session, q, page, limit)
        return {
            "messages": [thread_message_to_dict(m, include_replies=True) for m in rows],
            "pagination": pagination,
        }


def create_thread_message(project_id: str, thread_id: str, payload: ThreadMessageCreate) -> dict[str, Any]:
    """Post a message (or a reply when parentId is set) and mark the thread as active."""
    content = (payload.content or "").strip()
    if not content:
        raise ValidationFailed("Message content is required")
    with get_session() as session:
        thread = require_project_thread(session, project_id, thread_id)
        author = _author(session, payload.user_id)
        if payload.parent_id:
            parent = session.get(ThreadMessage, payload.parent_id)
            if parent is None or parent.thread_id != thread.id:
                raise ValidationFailed("Parent message does not belong to this thread")
        message = ThreadMessage(
            thread_id=thread.id,
            user_id=author,
            content=content,
            parent_id=payload.parent_id or None,
            attachments=[
                ThreadMessageAttachment(filename=a.filename, content_type=a.content_type, size=a.size, url=a.url)
                for a in payload.attachments
            ],
        )
        session.add(message)
        thread.updated_at = utcnow()
        session.flush()
        logger.info("discussions.message.create", thread_id=thread.id, message_id=message.id, reply=bool(message.parent_id))
        return thread_message_to_dict(message)


def project_timeline(project_id: str, page: int = 1, limit: int = 50) -> dict[str, Any]:
    """Newest page of project messages grouped by UTC day: newest day first, oldest message first within a day."""
    with get_session() as session:
        require_project(session, project_id)
        q = (
            select(ThreadMessage)
            .join(ProjectThread, ThreadMessage.thread_id == ProjectThread.id)
            .where(ProjectThread.project_id == project_id)
            .order_by(ThreadMessage.created_at.desc())
        )
        rows, pagination = paginate(session, q, page, limit)
        days: dict[str, list[ThreadMessage]] = {}
        for message in rows:
            days.setdefault(ensure_utc(message.created_at).date().isoformat(), []).append(message)
        timeline = []
        for day in sorted(days, reverse=True):
            entries = []
            for message in sorted(days[day], key=lambda m: ensure_utc(m.created_at)):
                data = thread_message_to_dict(message)
                data["thread"] = {
                    "id": message.thread.id,
                    "title": message.thread.title,
                    "description": message.thread.description,
                }
                data["parent"] = (
                    {"id": message.parent.id, "content": message.parent.content, "user": user_summary(message.parent.user)}
                    if message.parent is not None
                    else None
                )
                entries.append(data)
            timeline.append({"date": day, "messages": entries})
        return {"timeline": timeline, "pagination": pagination}
