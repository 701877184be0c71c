"""Database package: engine, session factory, init_db(), reset_db(), get_session()."""

import threading
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from projecthub.config import DATABASE_URL, SEED_ON_INIT
from projecthub.db.base import Base

# Import all models so Base.metadata has all tables
from projecthub.db.models import (  # noqa: F401
    EmailAttachment,
    EmailMessage,
    EmailParticipant,
    EmailThread,
    Project,
    ProjectMember,
    ProjectStatus,
    ProjectThread,
    ProjectThreadTag,
    Subtask,
    Task,
    TaskComment,
    ThreadMessage,
    ThreadMessageAttachment,
    ThreadTag,
    TimeEntry,
    TimeEntryCategory,
    TimelineEvent,
    TimelineView,
    User,
)
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.db")

_init_lock = threading.Lock()
_engine: Optional[Engine] = None
_SessionLocal: sessionmaker | None = None
_database_url: str = DATABASE_URL


def _get_engine(url: str) -> Engine:
    """Create engine with check_same_thread=False for use from request worker threads."""
    if url.startswith("sqlite"):
        if "?" in url:
            url += "&check_same_thread=False"
        else:
            url += "?check_same_thread=False"
    return create_engine(url, echo=False)


def init_db(url: Optional[str] = None) -> None:
    """Create engine and tables. Seeds demo data on first creation when SEED_ON_INIT is set. No-op once initialised."""
    global _engine, _SessionLocal, _database_url
    with _init_lock:
        if _SessionLocal is not None:
            return
        if url:
            _database_url = url
        _engine = _get_engine(_database_url)
        fresh = not inspect(_engine).has_table("users")
        Base.metadata.create_all(bind=_engine)
        _SessionLocal = sessionmaker(bind=_engine, autocommit=False, autoflush=False)
        logger.info("db.init", url=_engine.url.render_as_string(hide_password=True), fresh=fresh)
        if fresh and SEED_ON_INIT:
            from projecthub.db.seed_data import seed_demo_data

            session = _SessionLocal()
            try:
                seed_demo_data(session)
                session.commit()
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()


def dispose_db() -> None:
    """Drop the engine and session factory; the next init_db() starts over."""
    global _engine, _SessionLocal
    with _init_lock:
        if _engine is not None:
            _engine.dispose()
        _engine = None
        _SessionLocal = None


def reset_db(url: Optional[str] = None) -> None:
    """Drop and recreate every table (optionally against a different URL)."""
    dispose_db()
    init_db(url)
    Base.metadata.drop_all(bind=_engine)
    Base.metadata.create_all(bind=_engine)
    logger.info("db.reset")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager yielding a DB session. Calls init_db() on first use."""
    init_db()
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
