"""Decide whether an import repeats a thread that is already stored."""

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from projecthub.config import DUPLICATE_OVERLAP_THRESHOLD
from projecthub.db.models import EmailThread
from projecthub.db.repositories.email_threads_repo import find_by_key, same_subject_candidates
from projecthub.db.repositories.users_repo import normalize_email
from projecthub.models.email_import import NormalizedImport
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.services.duplicates")


def participant_overlap(existing: Iterable[str], new: Iterable[str]) -> int:
    """Number of distinct addresses present in both sets (case-insensitive)."""
    a = {normalize_email(e) for e in existing if e}
    b = {normalize_email(e) for e in new if e}
    return len(a & b)


def is_similar(existing: list[str], new: list[str], threshold: float = DUPLICATE_OVERLAP_THRESHOLD) -> bool:
    """Overlap must reach threshold x the smaller set; no shared address never matches."""
    overlap = participant_overlap(existing, new)
    if overlap == 0:
        return False
    smaller = min(len({normalize_email(e) for e in existing}), len({normalize_email(e) for e in new}))
    return overlap >= threshold * smaller


def find_duplicate_thread(session: Session, normalized: NormalizedImport) -> Optional[EmailThread]:
    """Exact thread-key match first, then the oldest same-subject thread whose participants overlap enough."""
    thread = find_by_key(session, normalized.thread_key)
    if thread is not None:
        logger.info("email_import.duplicate.key_match", thread_id=thread.id, thread_key=thread.thread_key)
        return thread
    new = normalized.participant_emails()
    for candidate in same_subject_candidates(session, normalized.subject, new):
        existing = [p.email for p in candidate.participants]
        if is_similar(existing, new):
            logger.info(
                "email_import.duplicate.similar",
                thread_id=candidate.id,
                overlap=participant_overlap(existing, new),
                existing=len(existing),
                new=len(new),
            )
            return candidate
    return None
