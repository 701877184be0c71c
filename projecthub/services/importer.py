"""Email import pipeline: normalize, validate, deduplicate, resolve participants, persist, build timeline."""

from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from projecthub.db import get_session
from projecthub.db.repositories.email_threads_repo import find_by_key, save_imported_thread
from projecthub.db.serializers import message_to_dict, thread_to_dict
from projecthub.errors import ApiError, Conflict, ValidationFailed
from projecthub.models.email_import import EmailImportRequest
from projecthub.services.duplicates import find_duplicate_thread
from projecthub.services.email_import import normalize_import, validate_import
from projecthub.services.participants import resolve_participants
from projecthub.services.timeline import generate_timeline
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.services.importer")


def import_email_thread(request: EmailImportRequest) -> dict[str, Any]:
    """Import one thread. Raises ValidationFailed (400) or Conflict (409); returns the 201 body."""
    options = request.options
    normalized = normalize_import(request.source, request.data)
    errors = validate_import(normalized)
    if errors:
        logger.info("email_import.invalid", source=normalized.source, errors=errors)
        raise ValidationFailed("Invalid email data", details=errors)

    if not options.allow_duplicate:
        with get_session() as session:
            duplicate = find_duplicate_thread(session, normalized)
            if duplicate is not None:
                raise Conflict("Email thread already exists", threadId=duplicate.id)

    participants = resolve_participants(normalized.participants)

    try:
        with get_session() as session:
            existing = find_by_key(session, normalized.thread_key) if options.allow_duplicate else None
            thread, created = save_imported_thread(session, normalized, participants, existing=existing)
            body = thread_to_dict(thread, include_messages=False)
            body["messages"] = [message_to_dict(m) for m in created]
            body["_count"] = {"messages": len(created)}
            thread_id = thread.id
    except IntegrityError as e:
        raise Conflict("Email thread already exists") from e
    logger.info(
        "email_import.saved",
        source=normalized.source,
        thread_id=thread_id,
        messages=len(normalized.messages),
        participants=len(participants),
        updated=existing is not None,
    )

    timeline = None
    if options.auto_generate_timeline:
        try:
            timeline, _ = generate_timeline(thread_id)
        except (ApiError, SQLAlchemyError) as e:
            logger.warning("email_import.timeline.error", thread_id=thread_id, error=str(e))

    return {
        "success": True,
        "message": "Email thread imported successfully",
        "thread": body,
        "timeline": timeline,
        "importedMessages": len(normalized.messages),
    }
