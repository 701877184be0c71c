"""Timeline repository: timeline views and their events.

Event orders of a timeline are kept as the dense sequence 1..N: every create,
move, delete and reorder renumbers the whole list.
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from projecthub.db import get_session
from projecthub.db.models import EmailMessage, EmailThread, EventType, TimelineEvent, TimelineView
from projecthub.db.repositories.email_threads_repo import require_thread
from projecthub.db.serializers import event_to_dict, timeline_to_dict
from projecthub.errors import Conflict, NotFound, ValidationFailed
from projecthub.models.requests import (
    ReorderRequest,
    TimelineCreate,
    TimelineEventIn,
    TimelineEventUpdate,
    TimelineUpdate,
)
from projecthub.utils.dates import utcnow
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.db.timelines_repo")


def default_title(subject: str) -> str:
    return f"{subject} Timeline"


def default_description(subject: str) -> str:
    return f"Automatically generated timeline for {subject}"


def require_timeline(session: Session, timeline_id: str) -> TimelineView:
    view = session.get(TimelineView, timeline_id)
    if view is None:
        raise NotFound("Timeline not found")
    return view


def require_event(session: Session, timeline_id: str, event_id: str) -> TimelineEvent:
    event = session.get(TimelineEvent, event_id)
    if event is None or event.timeline_id != timeline_id:
        raise NotFound("Timeline event not found")
    return event


def renumber(view: TimelineView, ordered: list[TimelineEvent]) -> None:
    """Assign orders 1..N following ordered, which must hold every event of the view."""
    for position, event in enumerate(ordered, start=1):
        event.order = position
    view.events = ordered


def _sorted_events(view: TimelineView) -> list[TimelineEvent]:
    return sorted(view.events, key=lambda e: e.order)


def _check_message(session: Session, thread_id: str, message_id: Optional[str]) -> None:
    if not message_id:
        return
    message = session.get(EmailMessage, message_id)
    if message is None or message.thread_id != thread_id:
        raise ValidationFailed("Message does not belong to this thread")


def _new_event(data: TimelineEventIn) -> TimelineEvent:
    title = (data.title or "").strip()
    if not title:
        raise ValidationFailed("Event title is required")
    return TimelineEvent(
        message_id=data.message_id or None,
        event_type=data.event_type or EventType.CUSTOM,
        title=title,
        description=data.description,
        timestamp=data.timestamp or utcnow(),
        order=data.order or 0,
        event_metadata=data.metadata,
    )


def _events_in_request_order(session: Session, thread_id: str, events: list[TimelineEventIn]) -> list[TimelineEvent]:
    """Build events; explicit orders sort first (stable), then list position decides."""
    built = []
    for index, data in enumerate(events):
        _check_message(session, thread_id, data.message_id)
        built.append((data.order or index + 1, index, _new_event(data)))
    built.sort(key=lambda item: (item[0], item[1]))
    return [event for _, _, event in built]


# --- Timelines ---


def list_timelines() -> list[dict[str, Any]]:
    with get_session() as session:
        q = (
            select(TimelineView)
            .options(
                selectinload(TimelineView.events).selectinload(TimelineEvent.message),
                selectinload(TimelineView.thread).selectinload(EmailThread.participants),
            )
            .order_by(TimelineView.updated_at.desc())
        )
        return [timeline_to_dict(v) for v in session.scalars(q).all()]


def create_timeline(payload: TimelineCreate) -> dict[str, Any]:
    if not payload.thread_id:
        raise ValidationFailed("Thread ID is required")
    with get_session() as session:
        thread = require_thread(session, payload.thread_id)
        if thread.timeline_view is not None:
            raise Conflict("Timeline already exists for this thread", timelineId=thread.timeline_view.id)
        view = TimelineView(
            thread_id=thread.id,
            title=(payload.title or "").strip() or default_title(thread.subject),
            description=payload.description,
            is_public=payload.is_public,
        )
        session.add(view)
        renumber(view, _events_in_request_order(session, thread.id, payload.events))
        session.flush()
        logger.info("timelines.create", timeline_id=view.id, thread_id=thread.id, events=len(view.events))
        return timeline_to_dict(view)


def get_timeline(timeline_id: str) -> dict[str, Any]:
    with get_session() as session:
        return timeline_to_dict(require_timeline(session, timeline_id), with_body=True)


def update_timeline(timeline_id: str, payload: TimelineUpdate) -> dict[str, Any]:
    """Update view fields. When events is given the whole event list is replaced."""
    fields = payload.provided()
    with get_session() as session:
        view = require_timeline(session, timeline_id)
        if "title" in fields:
            title = (payload.title or "").strip()
            if not title:
                raise ValidationFailed("Timeline title is required")
            view.title = title
        if "description" in fields:
            view.description = payload.description
        if payload.is_public is not None:
            view.is_public = payload.is_public
        if payload.events is not None:
            replacement = _events_in_request_order(session, view.thread_id, payload.events)
            view.events.clear()
            session.flush()
            renumber(view, replacement)
        session.flush()
        return timeline_to_dict(view)


def delete_timeline(timeline_id: str) -> None:
    with get_session() as session:
        session.delete(require_timeline(session, timeline_id))
    logger.info("timelines.delete", timeline_id=timeline_id)


# --- Events ---


def list_events(timeline_id: str) -> list[dict[str, Any]]:
    with get_session() as session:
        view = require_timeline(session, timeline_id)
        return [event_to_dict(e, with_body=True) for e in _sorted_events(view)]


def create_event(timeline_id: str, payload: TimelineEventIn) -> dict[str, Any]:
    """Append an event, or insert it at payload.order (clamped to 1..N+1) shifting later ones."""
    with get_session() as session:
        view = require_timeline(session, timeline_id)
        _check_message(session, view.thread_id, payload.message_id)
        event = _new_event(payload)
        ordered = _sorted_events(view)
        position = len(ordered) + 1 if not payload.order else min(max(payload.order, 1), len(ordered) + 1)
        ordered.insert(position - 1, event)
        renumber(view, ordered)
        session.flush()
        return event_to_dict(event)


def get_event(timeline_id: str, event_id: str) -> dict[str, Any]:
    with get_session() as session:
        return event_to_dict(require_event(session, timeline_id, event_id), with_body=True)


def update_event(timeline_id: str, event_id: str, payload: TimelineEventUpdate) -> dict[str, Any]:
    """Partial update; a new order moves the event and renumbers the rest."""
    fields = payload.provided()
    with get_session() as session:
        view = require_timeline(session, timeline_id)
        event = require_event(session, timeline_id, event_id)
        if "title" in fields:
            title = (payload.title or "").strip()
            if not title:
                raise ValidationFailed("Event title is required")
            event.title = title
        if payload.event_type is not None:
            event.event_type = payload.event_type
        if "description" in fields:
            event.description = payload.description
        if payload.timestamp is not None:
            event.timestamp = payload.timestamp
        if "metadata" in fields:
            event.event_metadata = payload.metadata
        if payload.order:
            ordered = [e for e in _sorted_events(view) if e.id != event.id]
            position = min(max(payload.order, 1), len(ordered) + 1)
            ordered.insert(position - 1, event)
            renumber(view, ordered)
        session.flush()
        return event_to_dict(event)


def delete_event(timeline_id: str, event_id: str) -> None:
    with get_session() as session:
        view = require_timeline(session, timeline_id)
        event = require_event(session, timeline_id, event_id)
        remaining = [e for e in _sorted_events(view) if e.id != event.id]
        session.delete(event)
        renumber(view, remaining)


def reorder_events(timeline_id: str, payload: ReorderRequest) -> dict[str, Any]:
    """Apply a full new ordering: eventIds must list every event of the timeline exactly once."""
    event_ids = payload.event_ids or []
    if not event_ids:
        raise ValidationFailed("eventIds must be a non-empty array")
    with get_session() as session:
        view = require_timeline(session, timeline_id)
        by_id = {e.id: e for e in view.events}
        if len(event_ids) != len(set(event_ids)) or set(event_ids) != set(by_id):
            raise ValidationFailed(
                "eventIds must contain every event of the timeline exactly once",
                details={"expected": len(by_id), "received": len(event_ids)},
            )
        renumber(view, [by_id[i] for i in event_ids])
        session.flush()
        logger.info("timelines.reorder", timeline_id=timeline_id, events=len(event_ids))
        return {
            "success": True,
            "message": "Events reordered successfully",
            "events": [event_to_dict(e) for e in view.events],
        }
