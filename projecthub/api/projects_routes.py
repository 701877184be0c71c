"""Projects API: CRUD, members and task statuses."""

from typing import Any, Optional

from fastapi import APIRouter, Query

from projecthub.config import PROJECTS_PAGE_LIMIT
from projecthub.db.repositories import projects_repo
from projecthub.models.requests import ProjectCreate, ProjectMemberAdd, ProjectStatusCreate, ProjectUpdate

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("")
def list_projects(
    status: Optional[str] = Query(None, description="Project state, or 'all'"),
    page: int = Query(1, ge=1),
    limit: int = Query(PROJECTS_PAGE_LIMIT, ge=1),
) -> list[dict[str, Any]]:
    return projects_repo.list_projects(status=status, page=page, limit=limit)


@router.post("", status_code=201)
def create_project(body: ProjectCreate) -> dict[str, Any]:
    return projects_repo.create_project(body)


@router.get("/{project_id}")
def get_project(project_id: str) -> dict[str, Any]:
    return projects_repo.get_project(project_id)


@router.put("/{project_id}")
def update_project(project_id: str, body: ProjectUpdate) -> dict[str, Any]:
    return projects_repo.update_project(project_id, body)


@router.delete("/{project_id}")
def delete_project(project_id: str) -> dict[str, str]:
    projects_repo.delete_project(project_id)
    return {"message": "Project deleted successfully"}


@router.post("/{project_id}/members", status_code=201)
def add_member(project_id: str, body: ProjectMemberAdd) -> dict[str, Any]:
    return projects_repo.add_member(project_id, body)


@router.get("/{project_id}/statuses")
def list_statuses(project_id: str) -> list[dict[str, Any]]:
    return projects_repo.list_statuses(project_id)


@router.post("/{project_id}/statuses", status_code=201)
def create_status(project_id: str, body: ProjectStatusCreate) -> dict[str, Any]:
    return projects_repo.create_status(project_id, body)
