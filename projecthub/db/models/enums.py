"""String enums stored in the database and exchanged over the API."""

import enum


class ProjectState(str, enum.Enum):
    ACTIVE = "ACTIVE"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    ARCHIVED = "ARCHIVED"


class Priority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class ParticipantRole(str, enum.Enum):
    FROM = "FROM"
    TO = "TO"
    CC = "CC"
    BCC = "BCC"


class EventType(str, enum.Enum):
    EMAIL_RECEIVED = "EMAIL_RECEIVED"
    EMAIL_REPLIED = "EMAIL_REPLIED"
    EMAIL_FORWARDED = "EMAIL_FORWARDED"
    CUSTOM = "CUSTOM"
