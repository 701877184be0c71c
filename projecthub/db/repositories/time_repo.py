"""Time tracking repository: per-project categories, time entries and running timers."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from projecthub.db import get_session
from projecthub.db.models import TimeEntry, TimeEntryCategory
from projecthub.db.repositories.pagination import paginate
from projecthub.db.repositories.projects_repo import require_project
from projecthub.db.repositories.users_repo import require_user
from projecthub.db.serializers import category_to_dict, time_entry_to_dict
from projecthub.errors import NotFound, ValidationFailed
from projecthub.models.requests import TimeCategoryCreate, TimeEntryCreate, TimeEntryUpdate
from projecthub.utils.dates import ensure_utc, utcnow
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.db.time_repo")


def _elapsed_seconds(start: datetime, end: datetime) -> int:
    return max(0, int((ensure_utc(end) - ensure_utc(start)).total_seconds()))


def _stop(entry: TimeEntry, now: datetime) -> None:
    entry.is_running = False
    entry.end_time = now
    entry.duration = _elapsed_seconds(entry.start_time, now)


def _running_timer(session: Session, user_id: str, exclude_id: Optional[str] = None) -> Optional[TimeEntry]:
    q = select(TimeEntry).where(TimeEntry.user_id == user_id).where(TimeEntry.is_running.is_(True))
    if exclude_id:
        q = q.where(TimeEntry.id != exclude_id)
    return session.scalars(q).first()


def require_entry(session: Session, project_id: str, entry_id: str) -> TimeEntry:
    entry = session.get(TimeEntry, entry_id)
    if entry is None or entry.project_id != project_id:
        raise NotFound("Time entry not found")
    return entry


# --- Categories ---


def list_categories(project_id: str) -> list[dict[str, Any]]:
    with get_session() as session:
        q = (
            select(TimeEntryCategory)
            .where(TimeEntryCategory.project_id == project_id)
            .order_by(TimeEntryCategory.is_default.desc(), TimeEntryCategory.name.asc())
        )
        return [category_to_dict(c) for c in session.scalars(q).all()]


def create_category(project_id: str, payload: TimeCategoryCreate) -> dict[str, Any]:
    """Create a category; a new default clears the project's previous default."""
    name = (payload.name or "").strip()
    if not name:
        raise ValidationFailed("Category name is required")
    with get_session() as session:
        require_project(session, project_id)
        existing = session.scalars(
            select(TimeEntryCategory)
            .where(TimeEntryCategory.project_id == project_id)
            .where(TimeEntryCategory.name == name)
        ).first()
        if existing is not None:
            raise ValidationFailed("Category with this name already exists")
        if payload.is_default:
            session.execute(
                update(TimeEntryCategory)
                .where(TimeEntryCategory.project_id == project_id)
                .where(TimeEntryCategory.is_default.is_(True))
                .values(is_default=False)
            )
        category = TimeEntryCategory(
            project_id=project_id, name=name, color=payload.color or None, is_default=payload.is_default
        )
        session.add(category)
        session.flush()
        return category_to_dict(category)


# --- Entries ---


def list_entries(project_id: str, is_running: Optional[bool] = None, page: int = 1, limit: int = 50) -> dict[str, Any]:
    with get_session() as session:
        q = select(TimeEntry).where(TimeEntry.project_id == project_id).order_by(TimeEntry.start_time.desc())
        if is_running is not None:
            q = q.where(TimeEntry.is_running.is_(is_running))
        rows, pagination = paginate(session, q, page, limit)
        return {"timeEntries": [time_entry_to_dict(e) for e in rows], "pagination": pagination}


def create_entry(project_id: str, payload: TimeEntryCreate) -> dict[str, Any]:
    """Create an entry. A user may only have one running timer at a time."""
    if not (payload.description or "").strip() or payload.start_time is None or not payload.user_id:
        raise ValidationFailed("Description, start time, and user ID are required")
    with get_session() as session:
        require_user(session, payload.user_id)
        require_project(session, project_id)
        if payload.is_running and _running_timer(session, payload.user_id) is not None:
            raise ValidationFailed("User already has a running timer")
        entry = TimeEntry(
            project_id=project_id,
            user_id=payload.user_id,
            task_id=payload.task_id or None,
            category_id=payload.category_id or None,
            description=payload.description.strip(),
            start_time=payload.start_time,
            end_time=payload.end_time,
            duration=payload.duration or None,
            is_running=payload.is_running,
            billable=payload.billable,
            hourly_rate=payload.hourly_rate or None,
            notes=payload.notes or None,
        )
        session.add(entry)
        session.flush()
        logger.info("time_entries.create", project_id=project_id, entry_id=entry.id, running=entry.is_running)
        return time_entry_to_dict(entry)


def get_entry(project_id: str, entry_id: str) -> dict[str, Any]:
    with get_session() as session:
        return time_entry_to_dict(require_entry(session, project_id, entry_id))


def update_entry(project_id: str, entry_id: str, payload: TimeEntryUpdate) -> dict[str, Any]:
    """Partial update. Stopping a running entry without an end time stamps it now."""
    fields = payload.provided()
    with get_session() as session:
        entry = require_entry(session, project_id, entry_id)
        was_running = entry.is_running
        if fields.get("is_running") and not was_running:
            if _running_timer(session, entry.user_id, exclude_id=entry.id) is not None:
                raise ValidationFailed("User already has a running timer")
        for key, value in fields.items():
            if key == "description":
                if not (value or "").strip():
                    continue
                value = value.strip()
            elif key in ("task_id", "category_id"):
                value = value or None
            elif key in ("start_time", "is_running", "billable") and value is None:
                continue
            setattr(entry, key, value)
        if was_running and fields.get("is_running") is False:
            end = entry.end_time if "end_time" in fields and entry.end_time else utcnow()
            entry.end_time = end
            if "duration" not in fields or entry.duration is None:
                entry.duration = _elapsed_seconds(entry.start_time, end)
        session.flush()
        logger.info("time_entries.update", entry_id=entry_id, fields=sorted(fields))
        return time_entry_to_dict(entry)


def delete_entry(project_id: str, entry_id: str) -> None:
    with get_session() as session:
        session.delete(require_entry(session, project_id, entry_id))


def clear_running(project_id: str, user_id: Optional[str]) -> dict[str, Any]:
    """Stop the user's running timers in this project; duration = now - start."""
    if not user_id:
        raise ValidationFailed("User ID is required")
    now = utcnow()
    with get_session() as session:
        timers = session.scalars(
            select(TimeEntry)
            .where(TimeEntry.project_id == project_id)
            .where(TimeEntry.user_id == user_id)
            .where(TimeEntry.is_running.is_(True))
        ).all()
        for timer in timers:
            _stop(timer, now)
        count = len(timers)
    logger.info("time_entries.clear_running", project_id=project_id, user_id=user_id, count=count)
    return {"message": f"Cleared {count} running timer(s)", "count": count}


def list_running_timers() -> list[dict[str, Any]]:
    """Every running timer across projects (operator tooling)."""
    with get_session() as session:
        q = select(TimeEntry).where(TimeEntry.is_running.is_(True)).order_by(TimeEntry.start_time)
        return [time_entry_to_dict(e) for e in session.scalars(q).all()]


def stop_running_for_user(user_id: str) -> int:
    """Stop every running timer of a user in every project. Returns how many were stopped."""
    now = utcnow()
    with get_session() as session:
        require_user(session, user_id)
        timers = session.scalars(
            select(TimeEntry).where(TimeEntry.user_id == user_id).where(TimeEntry.is_running.is_(True))
        ).all()
        for timer in timers:
            _stop(timer, now)
        count = len(timers)
    logger.info("time_entries.stop_user", user_id=user_id, count=count)
    return count
