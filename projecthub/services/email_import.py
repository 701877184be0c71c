"""Map the four import payload shapes onto NormalizedImport, and validate the result.

Sources:
    forwarded_email  single forwarded message; thread key derived from subject/from/to
    email_file       uploaded .eml/.msg content kept verbatim as the body (never parsed)
    api_integration  provider payload (Gmail, Outlook...) with messages, participants and tags
    manual           hand-entered thread; participants derived from the message headers
"""

import base64
from datetime import datetime
from typing import Any, Optional

from projecthub.db.models import ParticipantRole
from projecthub.db.repositories.users_repo import normalize_email
from projecthub.errors import ValidationFailed
from projecthub.models.email_import import (
    SOURCE_API_INTEGRATION,
    SOURCE_EMAIL_FILE,
    SOURCE_FORWARDED_EMAIL,
    SOURCE_MANUAL,
    NormalizedAttachment,
    NormalizedImport,
    NormalizedMessage,
    NormalizedParticipant,
    NormalizedTag,
)
from projecthub.utils.dates import epoch_millis, parse_datetime, utcnow

UNKNOWN_ADDRESS = "unknown@example.com"


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


def address_list(value: Any) -> list[str]:
    """Coerce an address field (None, a single value or a list) to a list of non-empty strings."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def _size(value: Any) -> Optional[int]:
    """Absent means 0; a non-numeric or negative size is None."""
    if value is None or value == "":
        return 0
    try:
        size = int(value)
    except (TypeError, ValueError):
        return None
    return size if size >= 0 else None


def _attachments(raw: Any) -> list[NormalizedAttachment]:
    items = raw if isinstance(raw, list) else []
    out = []
    for index, att in enumerate(items):
        att = att if isinstance(att, dict) else {}
        out.append(
            NormalizedAttachment(
                filename=_text(att.get("filename")) or f"attachment_{index + 1}",
                content_type=_text(att.get("contentType")) or "application/octet-stream",
                size=_size(att.get("size")),
                url=_text(att.get("url")),
            )
        )
    return out


def _tags(raw: Any) -> list[NormalizedTag]:
    out = []
    for tag in raw if isinstance(raw, list) else []:
        if isinstance(tag, str):
            tag = {"name": tag}
        name = _text(tag.get("name")) if isinstance(tag, dict) else None
        if name:
            out.append(NormalizedTag(name=name.strip(), color=_text(tag.get("color"))))
    return out


def _role(value: Any, default: ParticipantRole = ParticipantRole.TO) -> ParticipantRole:
    try:
        return ParticipantRole(str(value).upper())
    except ValueError:
        return default


def _timestamp(value: Any) -> Optional[datetime]:
    """Absent or blank means now; a present but unparseable value is None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return utcnow()
    return parse_datetime(value)


def _message(raw: dict[str, Any], default_key: str) -> NormalizedMessage:
    return NormalizedMessage(
        message_key=_text(raw.get("messageId")) or default_key,
        from_address=_text(raw.get("from")),
        to=address_list(raw.get("to")),
        cc=address_list(raw.get("cc")),
        bcc=address_list(raw.get("bcc")),
        subject=_text(raw.get("subject")),
        body=_text(raw.get("body")),
        text_body=_text(raw.get("textBody")),
        timestamp=_timestamp(raw.get("timestamp")),
        is_read=bool(raw.get("isRead") or False),
        is_forwarded=bool(raw.get("isForwarded") or False),
        is_replied=bool(raw.get("isReplied") or False),
        parent_message_key=_text(raw.get("parentMessageId")),
        attachments=_attachments(raw.get("attachments")),
    )


def _raw_messages(data: dict[str, Any]) -> list[dict[str, Any]]:
    messages = data.get("messages")
    if not isinstance(messages, list):
        return []
    return [m for m in messages if isinstance(m, dict)]


class _ParticipantSet:
    """Ordered participants, deduplicated by normalized address; first-seen role wins."""

    def __init__(self) -> None:
        self._items: dict[str, NormalizedParticipant] = {}

    def add(self, address: Optional[str], role: ParticipantRole, name: Optional[str] = None) -> None:
        email = normalize_email(_text(address))
        if not email or email in self._items:
            return
        self._items[email] = NormalizedParticipant(email=email, name=_text(name), role=role)

    def add_headers(self, message: NormalizedMessage) -> None:
        self.add(message.from_address, ParticipantRole.FROM)
        for role, addresses in (
            (ParticipantRole.TO, message.to),
            (ParticipantRole.CC, message.cc),
            (ParticipantRole.BCC, message.bcc),
        ):
            for address in addresses:
                self.add(address, role)

    def items(self) -> list[NormalizedParticipant]:
        return list(self._items.values())


def _forwarded_email(data: dict[str, Any]) -> NormalizedImport:
    subject = _text(data.get("subject"))
    sender = _text(data.get("from"))
    to = address_list(data.get("to"))
    digest = base64.b64encode(f"{subject or ''}-{sender or ''}-{','.join(to)}".encode("utf-8")).decode("ascii")
    message = _message(
        {**data, "messageId": None, "isForwarded": True, "parentMessageId": None},
        f"forwarded_msg_{epoch_millis()}",
    )
    participants = _ParticipantSet()
    participants.add_headers(message)
    return NormalizedImport(
        source=SOURCE_FORWARDED_EMAIL,
        subject=subject or "Forwarded Email",
        thread_key=f"forwarded_{digest[:16]}",
        project_id=_text(data.get("projectId")),
        messages=[message],
        participants=participants.items(),
        tags=_tags(data.get("tags")),
    )


def _email_file(data: dict[str, Any]) -> NormalizedImport:
    stamp = epoch_millis()
    subject = _text(data.get("subject")) or "Imported Email"
    sender = _text(data.get("from")) or UNKNOWN_ADDRESS
    to = address_list(data.get("to")) or [UNKNOWN_ADDRESS]
    body = _text(data.get("emlContent")) or _text(data.get("msgContent")) or _text(data.get("body")) or ""
    message = NormalizedMessage(
        message_key=f"file_msg_{stamp}",
        from_address=sender,
        to=to,
        cc=address_list(data.get("cc")),
        bcc=address_list(data.get("bcc")),
        subject=subject,
        body=body,
        text_body=_text(data.get("textBody")),
        timestamp=_timestamp(data.get("timestamp")),
        attachments=_attachments(data.get("attachments")),
    )
    participants = _ParticipantSet()
    participants.add(sender, ParticipantRole.FROM)
    for address in to:
        participants.add(address, ParticipantRole.TO)
    return NormalizedImport(
        source=SOURCE_EMAIL_FILE,
        subject=subject,
        thread_key=f"file_import_{stamp}",
        project_id=_text(data.get("projectId")),
        messages=[message],
        participants=participants.items(),
        tags=_tags(data.get("tags")),
    )


def _api_integration(data: dict[str, Any]) -> NormalizedImport:
    stamp = epoch_millis()
    messages = [_message(raw, f"api_msg_{stamp}_{i}") for i, raw in enumerate(_raw_messages(data))]
    participants = _ParticipantSet()
    raw_participants = data.get("participants")
    for p in raw_participants if isinstance(raw_participants, list) else []:
        if isinstance(p, dict):
            participants.add(p.get("email"), _role(p.get("role")), p.get("name"))
    return NormalizedImport(
        source=SOURCE_API_INTEGRATION,
        subject=_text(data.get("subject")) or "API Imported Email",
        thread_key=_text(data.get("threadId")) or f"api_import_{stamp}",
        project_id=_text(data.get("projectId")),
        messages=messages,
        participants=participants.items(),
        tags=_tags(data.get("tags")),
    )


def _manual(data: dict[str, Any]) -> NormalizedImport:
    stamp = epoch_millis()
    messages = [_message(raw, f"manual_msg_{stamp}_{i}") for i, raw in enumerate(_raw_messages(data))]
    participants = _ParticipantSet()
    for message in messages:
        participants.add_headers(message)
    return NormalizedImport(
        source=SOURCE_MANUAL,
        subject=_text(data.get("subject")),
        thread_key=_text(data.get("threadId")),
        project_id=_text(data.get("projectId")),
        messages=messages,
        participants=participants.items(),
        tags=_tags(data.get("tags")),
    )


PARSERS = {
    SOURCE_FORWARDED_EMAIL: _forwarded_email,
    SOURCE_EMAIL_FILE: _email_file,
    SOURCE_API_INTEGRATION: _api_integration,
    SOURCE_MANUAL: _manual,
}


def normalize_import(source: Optional[str], data: Optional[dict[str, Any]]) -> NormalizedImport:
    """Dispatch on source. Raises ValidationFailed for an unknown source."""
    parser = PARSERS.get(source or "")
    if parser is None:
        raise ValidationFailed("Unsupported import source")
    return parser(data or {})


def validate_import(normalized: NormalizedImport) -> list[str]:
    """Collect every validation problem; an empty list means the import may proceed."""
    errors = []
    if not normalized.subject:
        errors.append("Subject is required")
    if not normalized.messages:
        errors.append("At least one message is required")
    for message in normalized.messages:
        if not message.from_address:
            errors.append("Message from field is required")
        if not message.to:
            errors.append("Message to field is required")
        if not message.subject:
            errors.append("Message subject is required")
        if not message.body:
            errors.append("Message body is required")
        if message.timestamp is None:
            errors.append("Message timestamp is invalid")
        if any(a.size is None for a in message.attachments):
            errors.append("Attachment size is invalid")
    return errors
