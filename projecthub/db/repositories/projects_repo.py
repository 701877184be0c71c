"""Project repository: CRUD, members and task statuses."""

from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from projecthub.db import get_session
from projecthub.db.models import Priority, Project, ProjectMember, ProjectState, ProjectStatus
from projecthub.db.repositories.pagination import paginate
from projecthub.db.repositories.users_repo import require_user
from projecthub.db.serializers import member_to_dict, project_to_dict, status_to_dict
from projecthub.errors import Conflict, NotFound, ValidationFailed
from projecthub.models.requests import ProjectCreate, ProjectMemberAdd, ProjectStatusCreate, ProjectUpdate
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.db.projects_repo")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def require_project(session: Session, project_id: str) -> Project:
    project = session.get(Project, project_id)
    if project is None:
        raise NotFound("Project not found")
    return project


def list_projects(status: Optional[str] = None, page: int = 1, limit: int = 20) -> list[dict[str, Any]]:
    """Projects, most recently updated first. status='all' or None disables the filter."""
    with get_session() as session:
        q = select(Project).order_by(Project.updated_at.desc())
        if status and status != "all":
            try:
                state = ProjectState(status.upper())
            except ValueError as e:
                raise ValidationFailed(f"Invalid project status: {status!r}") from e
            q = q.where(Project.status == state)
        rows, _ = paginate(session, q, page, limit)
        return [project_to_dict(p) for p in rows]


def create_project(payload: ProjectCreate) -> dict[str, Any]:
    name = _clean(payload.name)
    if not name:
        raise ValidationFailed("Project name is required")
    with get_session() as session:
        if payload.created_by:
            require_user(session, payload.created_by)
        project = Project(
            name=name,
            description=_clean(payload.description),
            status=payload.status or ProjectState.ACTIVE,
            priority=payload.priority or Priority.MEDIUM,
            start_date=payload.start_date,
            end_date=payload.end_date,
            budget=payload.budget,
            client=_clean(payload.client),
            created_by=payload.created_by,
        )
        session.add(project)
        member_ids = list(dict.fromkeys(payload.member_ids))
        if payload.created_by and payload.created_by not in member_ids:
            member_ids.insert(0, payload.created_by)
        for user_id in member_ids:
            require_user(session, user_id)
            role = "OWNER" if user_id == payload.created_by else "MEMBER"
            project.members.append(ProjectMember(user_id=user_id, role=role))
        session.flush()
        logger.info("projects.create", project_id=project.id, name=project.name)
        return project_to_dict(project)


def get_project(project_id: str) -> dict[str, Any]:
    with get_session() as session:
        return project_to_dict(require_project(session, project_id))


def update_project(project_id: str, payload: ProjectUpdate) -> dict[str, Any]:
    """Apply the fields present in payload. A present name must be non-empty."""
    fields = payload.provided()
    if "name" in fields and not _clean(payload.name):
        raise ValidationFailed("Project name is required")
    with get_session() as session:
        project = require_project(session, project_id)
        for key, value in fields.items():
            if key in ("name", "description", "client"):
                value = _clean(value)
            elif key == "status":
                value = value or ProjectState.ACTIVE
            elif key == "priority":
                value = value or Priority.MEDIUM
            setattr(project, key, value)
        session.flush()
        logger.info("projects.update", project_id=project_id, fields=sorted(fields))
        return project_to_dict(project)


def delete_project(project_id: str) -> None:
    with get_session() as session:
        project = require_project(session, project_id)
        session.delete(project)
    logger.info("projects.delete", project_id=project_id)


def add_member(project_id: str, payload: ProjectMemberAdd) -> dict[str, Any]:
    if not payload.user_id:
        raise ValidationFailed("User ID is required")
    with get_session() as session:
        project = require_project(session, project_id)
        require_user(session, payload.user_id)
        existing = session.scalars(
            select(ProjectMember)
            .where(ProjectMember.project_id == project.id)
            .where(ProjectMember.user_id == payload.user_id)
        ).first()
        if existing is not None:
            raise Conflict("User is already a member of this project", memberId=existing.id)
        member = ProjectMember(project_id=project.id, user_id=payload.user_id, role=payload.role or "MEMBER")
        session.add(member)
        try:
            session.flush()
        except IntegrityError as e:
            raise Conflict("User is already a member of this project") from e
        return member_to_dict(member)


def list_statuses(project_id: str) -> list[dict[str, Any]]:
    with get_session() as session:
        project = require_project(session, project_id)
        return [status_to_dict(s) for s in project.statuses]


def create_status(project_id: str, payload: ProjectStatusCreate) -> dict[str, Any]:
    title = _clean(payload.title)
    if not title:
        raise ValidationFailed("Status title is required")
    with get_session() as session:
        require_project(session, project_id)
        order = payload.order
        if not order:
            last = session.scalar(
                select(func.max(ProjectStatus.order)).where(ProjectStatus.project_id == project_id)
            )
            order = (last or 0) + 1
        status = ProjectStatus(
            project_id=project_id,
            title=title,
            description=_clean(payload.description),
            color=payload.color,
            order=order,
        )
        session.add(status)
        session.flush()
        return status_to_dict(status)
