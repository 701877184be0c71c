"""Email import pipeline and timeline generation."""

from projecthub.services.duplicates import find_duplicate_thread, participant_overlap
from projecthub.services.email_import import normalize_import, validate_import
from projecthub.services.importer import import_email_thread
from projecthub.services.participants import resolve_participants
from projecthub.services.timeline import build_timeline_events, generate_timeline

__all__ = [
    "normalize_import",
    "validate_import",
    "participant_overlap",
    "find_duplicate_thread",
    "resolve_participants",
    "build_timeline_events",
    "generate_timeline",
    "import_email_thread",
]
