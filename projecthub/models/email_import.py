"""Email import request and the source-independent shape every import is normalized to."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from projecthub.db.models.enums import ParticipantRole
from projecthub.models.base import ApiModel

SOURCE_FORWARDED_EMAIL = "forwarded_email"
SOURCE_EMAIL_FILE = "email_file"
SOURCE_API_INTEGRATION = "api_integration"
SOURCE_MANUAL = "manual"


class ImportOptions(ApiModel):
    """Side-effect toggles for an import."""

    auto_generate_timeline: bool = False
    allow_duplicate: bool = False


class EmailImportRequest(ApiModel):
    """Body of POST /api/email-import: {source, data, options}."""

    source: Optional[str] = None
    data: dict[str, Any] = Field(default_factory=dict)
    options: ImportOptions = Field(default_factory=ImportOptions)


class NormalizedAttachment(BaseModel):
    filename: str
    content_type: str = "application/octet-stream"
    size: Optional[int] = 0
    url: Optional[str] = None


class NormalizedMessage(BaseModel):
    """One message after source mapping.

    Required fields may still be empty and an unparseable timestamp or attachment
    size is None; validate_import reports them.
    """

    message_key: str
    from_address: Optional[str] = None
    to: list[str] = Field(default_factory=list)
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)
    subject: Optional[str] = None
    body: Optional[str] = None
    text_body: Optional[str] = None
    timestamp: Optional[datetime] = None
    is_read: bool = False
    is_forwarded: bool = False
    is_replied: bool = False
    parent_message_key: Optional[str] = None
    attachments: list[NormalizedAttachment] = Field(default_factory=list)


class NormalizedParticipant(BaseModel):
    email: str
    name: Optional[str] = None
    role: ParticipantRole


class NormalizedTag(BaseModel):
    name: str
    color: Optional[str] = None


class NormalizedImport(BaseModel):
    """Common intermediate structure produced by every import source."""

    source: str
    subject: Optional[str] = None
    thread_key: Optional[str] = None
    project_id: Optional[str] = None
    messages: list[NormalizedMessage] = Field(default_factory=list)
    participants: list[NormalizedParticipant] = Field(default_factory=list)
    tags: list[NormalizedTag] = Field(default_factory=list)

    def participant_emails(self) -> list[str]:
        return [p.email for p in self.participants]


class ResolvedParticipant(BaseModel):
    """Participant after user find-or-create; user_id is None when resolution failed."""

    email: str
    name: Optional[str] = None
    role: ParticipantRole
    user_id: Optional[str] = None
