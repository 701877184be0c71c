"""Email thread repository: CRUD plus the lookups and persistence used by the import pipeline."""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from projecthub.db import get_session
from projecthub.db.models import (
    EmailAttachment,
    EmailMessage,
    EmailParticipant,
    EmailThread,
    ThreadTag,
)
from projecthub.db.repositories.users_repo import normalize_email
from projecthub.db.serializers import thread_summary, thread_to_dict
from projecthub.errors import Conflict, NotFound, ValidationFailed
from projecthub.models.email_import import NormalizedImport, NormalizedMessage, ResolvedParticipant
from projecthub.models.requests import EmailThreadCreate, EmailThreadUpdate
from projecthub.utils.dates import epoch_millis
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.db.email_threads_repo")


def require_thread(session: Session, thread_id: str) -> EmailThread:
    thread = session.get(EmailThread, thread_id)
    if thread is None:
        raise NotFound("Email thread not found")
    return thread


def find_by_key(session: Session, thread_key: Optional[str]) -> Optional[EmailThread]:
    if not thread_key:
        return None
    return session.scalars(select(EmailThread).where(EmailThread.thread_key == thread_key)).first()


def same_subject_candidates(session: Session, subject: Optional[str], emails: list[str]) -> list[EmailThread]:
    """Threads with this exact subject sharing at least one participant address, oldest first."""
    addresses = [normalize_email(e) for e in emails if e]
    if not subject or not addresses:
        return []
    q = (
        select(EmailThread)
        .where(EmailThread.subject == subject)
        .where(EmailThread.participants.any(EmailParticipant.email.in_(addresses)))
        .options(selectinload(EmailThread.participants))
        .order_by(EmailThread.created_at.asc())
    )
    return list(session.scalars(q).all())


def _tags(tags: list[Any]) -> list[ThreadTag]:
    return [ThreadTag(name=t.name, color=t.color) for t in tags if t.name]


def _new_message(data: NormalizedMessage) -> EmailMessage:
    return EmailMessage(
        message_key=data.message_key,
        from_address=data.from_address,
        to=list(data.to),
        cc=list(data.cc),
        bcc=list(data.bcc),
        subject=data.subject,
        body=data.body,
        text_body=data.text_body,
        timestamp=data.timestamp,
        is_read=data.is_read,
        is_forwarded=data.is_forwarded,
        is_replied=data.is_replied,
        attachments=[
            EmailAttachment(filename=a.filename, content_type=a.content_type, size=a.size, url=a.url)
            for a in data.attachments
        ],
    )


def save_imported_thread(
    session: Session,
    normalized: NormalizedImport,
    participants: list[ResolvedParticipant],
    existing: Optional[EmailThread] = None,
) -> tuple[EmailThread, list[EmailMessage]]:
    """Persist an import. With existing, subject/participants/tags are replaced and messages appended.

    Parent links are resolved by message key among the messages of this import.
    Returns (thread, created_messages).
    """
    rows = [
        EmailParticipant(email=p.email, name=p.name, role=p.role, user_id=p.user_id) for p in participants
    ]
    if existing is not None:
        thread = existing
        thread.subject = normalized.subject
        thread.participants.clear()
        thread.tags.clear()
        session.flush()
        thread.participants.extend(rows)
        thread.tags.extend(_tags(normalized.tags))
    else:
        thread = EmailThread(
            thread_key=normalized.thread_key or f"imported_{epoch_millis()}",
            subject=normalized.subject,
            project_id=normalized.project_id,
            participants=rows,
            tags=_tags(normalized.tags),
        )
        session.add(thread)

    created: list[EmailMessage] = []
    by_key: dict[str, EmailMessage] = {}
    for data in normalized.messages:
        message = _new_message(data)
        thread.messages.append(message)
        by_key[data.message_key] = message
        created.append(message)
    session.flush()

    for data in normalized.messages:
        parent = by_key.get(data.parent_message_key) if data.parent_message_key else None
        if parent is not None and parent is not by_key[data.message_key]:
            by_key[data.message_key].parent_message_id = parent.id
    session.flush()
    logger.info(
        "email_threads.saved_import",
        thread_id=thread.id,
        thread_key=thread.thread_key,
        messages=len(created),
        updated=existing is not None,
    )
    return thread, created


def list_threads() -> list[dict[str, Any]]:
    with get_session() as session:
        q = (
            select(EmailThread)
            .options(
                selectinload(EmailThread.messages).selectinload(EmailMessage.attachments),
                selectinload(EmailThread.participants).selectinload(EmailParticipant.user),
                selectinload(EmailThread.tags),
            )
            .order_by(EmailThread.updated_at.desc())
        )
        return [thread_summary(t) for t in session.scalars(q).all()]


def create_thread(payload: EmailThreadCreate) -> dict[str, Any]:
    subject = (payload.subject or "").strip()
    if not subject:
        raise ValidationFailed("Subject is required")
    thread_key = payload.thread_id or f"thread_{epoch_millis()}"
    with get_session() as session:
        existing = find_by_key(session, thread_key)
        if existing is not None:
            raise Conflict("Email thread already exists", threadId=existing.id)
        seen: set[str] = set()
        participants = []
        for p in payload.participants:
            address = normalize_email(p.email)
            if not address or address in seen:
                continue
            seen.add(address)
            participants.append(EmailParticipant(email=address, name=p.name, role=p.role))
        thread = EmailThread(
            thread_key=thread_key,
            subject=subject,
            project_id=payload.project_id,
            participants=participants,
            tags=_tags(payload.tags),
        )
        session.add(thread)
        try:
            session.flush()
        except IntegrityError as e:
            raise Conflict("Email thread already exists") from e
        logger.info("email_threads.create", thread_id=thread.id, thread_key=thread_key)
        return thread_to_dict(thread, include_messages=False)


def get_thread(thread_id: str) -> dict[str, Any]:
    with get_session() as session:
        return thread_to_dict(require_thread(session, thread_id), include_messages=True, include_timeline=True)


def update_thread(thread_id: str, payload: EmailThreadUpdate) -> dict[str, Any]:
    """Change the subject and/or replace the tag set."""
    fields = payload.provided()
    with get_session() as session:
        thread = require_thread(session, thread_id)
        if "subject" in fields:
            subject = (payload.subject or "").strip()
            if not subject:
                raise ValidationFailed("Subject is required")
            thread.subject = subject
        if payload.tags is not None:
            thread.tags.clear()
            session.flush()
            thread.tags.extend(_tags(payload.tags))
        session.flush()
        return thread_to_dict(thread, include_messages=False)


def delete_thread(thread_id: str) -> None:
    """Delete a thread with its messages, attachments, participants, tags and timeline."""
    with get_session() as session:
        thread = require_thread(session, thread_id)
        session.delete(thread)
    logger.info("email_threads.delete", thread_id=thread_id)
