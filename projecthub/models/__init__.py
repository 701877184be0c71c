"""Pydantic models for API payloads and the email import pipeline."""

from projecthub.models.base import ApiModel
from projecthub.models.email_import import (
    EmailImportRequest,
    ImportOptions,
    NormalizedAttachment,
    NormalizedImport,
    NormalizedMessage,
    NormalizedParticipant,
    NormalizedTag,
    ResolvedParticipant,
)

__all__ = [
    "ApiModel",
    "EmailImportRequest",
    "ImportOptions",
    "NormalizedAttachment",
    "NormalizedImport",
    "NormalizedMessage",
    "NormalizedParticipant",
    "NormalizedTag",
    "ResolvedParticipant",
]
