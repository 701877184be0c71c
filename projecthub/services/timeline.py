"""Derive a timeline (one event per message) from an email thread."""

from typing import Any, Optional

from projecthub.db import get_session
from projecthub.db.models import EventType, TimelineEvent, TimelineView
from projecthub.db.repositories.email_threads_repo import require_thread
from projecthub.db.repositories.timelines_repo import default_description, default_title
from projecthub.db.serializers import timeline_to_dict
from projecthub.utils.dates import ensure_utc
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.services.timeline")


def _plural(count: int, one: str, many: str) -> str:
    return f"{count} {one if count == 1 else many}"


def build_timeline_events(messages: list[Any]) -> list[dict[str, Any]]:
    """Event fields for messages in timestamp order.

    Type precedence is replied > forwarded > received. Messages need the
    EmailMessage attributes: id, from_address, to, cc, timestamp, is_read,
    is_replied, is_forwarded, attachments, replies.
    """
    events = []
    for order, message in enumerate(sorted(messages, key=lambda m: ensure_utc(m.timestamp)), start=1):
        sender = message.from_address
        if message.is_replied:
            event_type, title, description = EventType.EMAIL_REPLIED, "Email Reply", f"Reply from {sender}"
        elif message.is_forwarded:
            event_type, title, description = EventType.EMAIL_FORWARDED, "Email Forwarded", f"Forwarded by {sender}"
        else:
            event_type, title, description = EventType.EMAIL_RECEIVED, "Email Received", f"Email from {sender}"
        attachments = len(message.attachments)
        replies = len(message.replies)
        if attachments:
            description += f" ({_plural(attachments, 'attachment', 'attachments')})"
        if replies:
            description += f" ({_plural(replies, 'reply', 'replies')})"
        events.append(
            {
                "message_id": message.id,
                "event_type": event_type,
                "title": title,
                "description": description,
                "timestamp": message.timestamp,
                "order": order,
                "metadata": {
                    "sender": sender,
                    "recipients": list(message.to or []) + list(message.cc or []),
                    "hasAttachments": attachments > 0,
                    "attachmentCount": attachments,
                    "replyCount": replies,
                    "isRead": message.is_read,
                },
            }
        )
    return events


def generate_timeline(
    thread_id: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    is_public: bool = False,
) -> tuple[dict[str, Any], bool]:
    """Create the thread's timeline from its messages. Returns (timeline, created).

    A thread that already has a timeline gets it back unchanged with created=False.
    """
    with get_session() as session:
        thread = require_thread(session, thread_id)
        if thread.timeline_view is not None:
            return timeline_to_dict(thread.timeline_view), False
        items = build_timeline_events(thread.messages)
        view = TimelineView(
            thread_id=thread.id,
            title=title or default_title(thread.subject),
            description=description or default_description(thread.subject),
            is_public=is_public,
            events=[
                TimelineEvent(
                    message_id=item["message_id"],
                    event_type=item["event_type"],
                    title=item["title"],
                    description=item["description"],
                    timestamp=item["timestamp"],
                    order=item["order"],
                    event_metadata=item["metadata"],
                )
                for item in items
            ],
        )
        session.add(view)
        session.flush()
        logger.info("timeline.generated", thread_id=thread.id, timeline_id=view.id, events=len(items))
        return timeline_to_dict(view), True
