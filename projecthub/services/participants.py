"""Link import participants to users, creating users for unseen addresses."""

from sqlalchemy.exc import SQLAlchemyError

from projecthub.db import get_session
from projecthub.db.repositories.users_repo import upsert_by_email
from projecthub.models.email_import import NormalizedParticipant, ResolvedParticipant
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.services.participants")


def resolve_participants(participants: list[NormalizedParticipant]) -> list[ResolvedParticipant]:
    """Find-or-create a User per address. A failed lookup keeps the participant unlinked."""
    resolved = []
    for participant in participants:
        try:
            with get_session() as session:
                user, action = upsert_by_email(session, participant.email, participant.name)
                user_id, user_name = user.id, user.name
            resolved.append(
                ResolvedParticipant(
                    email=participant.email,
                    name=participant.name or user_name,
                    role=participant.role,
                    user_id=user_id,
                )
            )
            logger.info(f"email_import.participant.{action}", email=participant.email)
        except SQLAlchemyError as e:
            logger.warning("email_import.participant.error", email=participant.email, error=str(e))
            resolved.append(
                ResolvedParticipant(email=participant.email, name=participant.name, role=participant.role)
            )
    return resolved
