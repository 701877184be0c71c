"""Tasks API, nested under a project: tasks, subtasks and comments."""

from typing import Any, Optional

from fastapi import APIRouter, Query

from projecthub.config import DEFAULT_PAGE_LIMIT
from projecthub.db.repositories import tasks_repo
from projecthub.models.requests import SubtaskCreate, TaskCommentCreate, TaskCreate, TaskUpdate

router = APIRouter(prefix="/api/projects/{project_id}/tasks", tags=["tasks"])


@router.get("")
def list_tasks(
    project_id: str,
    status_id: Optional[str] = Query(None, alias="statusId"),
    assignee_id: Optional[str] = Query(None, alias="assigneeId"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1),
) -> dict[str, Any]:
    return tasks_repo.list_tasks(project_id, status_id=status_id, assignee_id=assignee_id, page=page, limit=limit)


@router.post("", status_code=201)
def create_task(project_id: str, body: TaskCreate) -> dict[str, Any]:
    return tasks_repo.create_task(project_id, body)


@router.get("/{task_id}")
def get_task(project_id: str, task_id: str) -> dict[str, Any]:
    return tasks_repo.get_task(project_id, task_id)


@router.put("/{task_id}")
def update_task(project_id: str, task_id: str, body: TaskUpdate) -> dict[str, Any]:
    return tasks_repo.update_task(project_id, task_id, body)


@router.delete("/{task_id}")
def delete_task(project_id: str, task_id: str) -> dict[str, str]:
    tasks_repo.delete_task(project_id, task_id)
    return {"message": "Task deleted successfully"}


@router.post("/{task_id}/subtasks", status_code=201)
def add_subtask(project_id: str, task_id: str, body: SubtaskCreate) -> dict[str, Any]:
    return tasks_repo.add_subtask(project_id, task_id, body)


@router.post("/{task_id}/comments", status_code=201)
def add_comment(project_id: str, task_id: str, body: TaskCommentCreate) -> dict[str, Any]:
    return tasks_repo.add_comment(project_id, task_id, body)
