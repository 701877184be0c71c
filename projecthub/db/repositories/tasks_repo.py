"""Task repository: tasks, subtasks and comments, always scoped to a project."""

from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from projecthub.db import get_session
from projecthub.db.models import Priority, ProjectStatus, Subtask, Task, TaskComment
from projecthub.db.repositories.pagination import paginate
from projecthub.db.repositories.projects_repo import require_project
from projecthub.db.repositories.users_repo import require_user
from projecthub.db.serializers import comment_to_dict, subtask_to_dict, task_to_dict
from projecthub.errors import NotFound, ValidationFailed
from projecthub.models.requests import SubtaskCreate, TaskCommentCreate, TaskCreate, TaskUpdate
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.db.tasks_repo")


def require_task(session: Session, project_id: str, task_id: str) -> Task:
    task = session.get(Task, task_id)
    if task is None or task.project_id != project_id:
        raise NotFound("Task not found")
    return task


def _check_refs(session: Session, project_id: str, status_id: Optional[str], assignee_id: Optional[str]) -> None:
    if status_id:
        status = session.get(ProjectStatus, status_id)
        if status is None or status.project_id != project_id:
            raise ValidationFailed("Status does not belong to this project")
    if assignee_id:
        require_user(session, assignee_id)


def list_tasks(
    project_id: str,
    status_id: Optional[str] = None,
    assignee_id: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
) -> dict[str, Any]:
    with get_session() as session:
        require_project(session, project_id)
        q = select(Task).where(Task.project_id == project_id).order_by(Task.created_at.desc())
        if status_id:
            q = q.where(Task.status_id == status_id)
        if assignee_id:
            q = q.where(Task.assignee_id == assignee_id)
        rows, pagination = paginate(session, q, page, limit)
        return {"tasks": [task_to_dict(t) for t in rows], "pagination": pagination}


def create_task(project_id: str, payload: TaskCreate) -> dict[str, Any]:
    title = (payload.title or "").strip()
    if not title:
        raise ValidationFailed("Task title is required")
    with get_session() as session:
        require_project(session, project_id)
        _check_refs(session, project_id, payload.status_id, payload.assignee_id)
        task = Task(
            project_id=project_id,
            title=title,
            description=payload.description,
            status_id=payload.status_id,
            assignee_id=payload.assignee_id,
            priority=payload.priority or Priority.MEDIUM,
            due_date=payload.due_date,
            estimated_hours=payload.estimated_hours,
            actual_hours=payload.actual_hours,
        )
        session.add(task)
        session.flush()
        logger.info("tasks.create", project_id=project_id, task_id=task.id)
        return task_to_dict(task, detail=True)


def get_task(project_id: str, task_id: str) -> dict[str, Any]:
    with get_session() as session:
        return task_to_dict(require_task(session, project_id, task_id), detail=True)


def update_task(project_id: str, task_id: str, payload: TaskUpdate) -> dict[str, Any]:
    fields = payload.provided()
    if "title" in fields and not (payload.title or "").strip():
        raise ValidationFailed("Task title is required")
    with get_session() as session:
        task = require_task(session, project_id, task_id)
        _check_refs(session, project_id, fields.get("status_id"), fields.get("assignee_id"))
        for key, value in fields.items():
            if key == "title":
                value = value.strip()
            elif key == "priority":
                value = value or Priority.MEDIUM
            setattr(task, key, value)
        session.flush()
        return task_to_dict(task, detail=True)


def delete_task(project_id: str, task_id: str) -> None:
    with get_session() as session:
        session.delete(require_task(session, project_id, task_id))
    logger.info("tasks.delete", project_id=project_id, task_id=task_id)


def add_subtask(project_id: str, task_id: str, payload: SubtaskCreate) -> dict[str, Any]:
    title = (payload.title or "").strip()
    if not title:
        raise ValidationFailed("Subtask title is required")
    with get_session() as session:
        task = require_task(session, project_id, task_id)
        last = session.scalar(select(func.max(Subtask.order)).where(Subtask.task_id == task.id))
        subtask = Subtask(task_id=task.id, title=title, is_completed=payload.is_completed, order=(last or 0) + 1)
        session.add(subtask)
        session.flush()
        return subtask_to_dict(subtask)


def add_comment(project_id: str, task_id: str, payload: TaskCommentCreate) -> dict[str, Any]:
    content = (payload.content or "").strip()
    if not content:
        raise ValidationFailed("Comment content is required")
    with get_session() as session:
        task = require_task(session, project_id, task_id)
        if payload.user_id:
            require_user(session, payload.user_id)
        comment = TaskComment(task_id=task.id, user_id=payload.user_id, content=content)
        session.add(comment)
        session.flush()
        return comment_to_dict(comment)
