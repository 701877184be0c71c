"""Row counts and a small data sample, used by /api/stats to check the database."""

from typing import Any

from sqlalchemy import func, select

from projecthub.db import get_session
from projecthub.db.models import EmailMessage, EmailThread, Project, Task, TimelineView, User
from projecthub.db.serializers import thread_to_dict, user_to_dict

COUNTED = {
    "users": User,
    "emailThreads": EmailThread,
    "emailMessages": EmailMessage,
    "timelineViews": TimelineView,
    "projects": Project,
    "tasks": Task,
}


def database_stats() -> dict[str, Any]:
    with get_session() as session:
        stats = {key: session.scalar(select(func.count()).select_from(model)) or 0 for key, model in COUNTED.items()}
        users = session.scalars(select(User).order_by(User.created_at).limit(3)).all()
        threads = session.scalars(select(EmailThread).order_by(EmailThread.created_at).limit(2)).all()
        return {
            "success": True,
            "message": "Database is working correctly!",
            "stats": stats,
            "sampleData": {
                "users": [user_to_dict(u) for u in users],
                "threads": [thread_to_dict(t, include_messages=False) for t in threads],
            },
        }
