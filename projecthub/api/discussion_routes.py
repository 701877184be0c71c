"""Project discussions API: threads, messages and the project activity timeline."""

from typing import Any

from fastapi import APIRouter, Query

from projecthub.config import DEFAULT_PAGE_LIMIT, THREAD_MESSAGES_PAGE_LIMIT
from projecthub.db.repositories import discussions_repo
from projecthub.models.requests import ProjectThreadCreate, ProjectThreadUpdate, ThreadMessageCreate

router = APIRouter(prefix="/api/projects/{project_id}", tags=["discussions"])


@router.get("/threads")
def list_threads(project_id: str) -> list[dict[str, Any]]:
    return discussions_repo.list_project_threads(project_id)


@router.post("/threads", status_code=201)
def create_thread(project_id: str, body: ProjectThreadCreate) -> dict[str, Any]:
    return discussions_repo.create_project_thread(project_id, body)


@router.get("/threads/{thread_id}")
def get_thread(project_id: str, thread_id: str) -> dict[str, Any]:
    return discussions_repo.get_project_thread(project_id, thread_id)


@router.put("/threads/{thread_id}")
def update_thread(project_id: str, thread_id: str, body: ProjectThreadUpdate) -> dict[str, Any]:
    return discussions_repo.update_project_thread(project_id, thread_id, body)


@router.delete("/threads/{thread_id}")
def delete_thread(project_id: str, thread_id: str) -> dict[str, str]:
    discussions_repo.delete_project_thread(project_id, thread_id)
    return {"message": "Thread deleted successfully"}


@router.get("/threads/{thread_id}/messages")
def list_messages(
    project_id: str,
    thread_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(THREAD_MESSAGES_PAGE_LIMIT, ge=1),
) -> dict[str, Any]:
    return discussions_repo.list_thread_messages(project_id, thread_id, page=page, limit=limit)


@router.post("/threads/{thread_id}/messages", status_code=201)
def create_message(project_id: str, thread_id: str, body: ThreadMessageCreate) -> dict[str, Any]:
    return discussions_repo.create_thread_message(project_id, thread_id, body)


@router.get("/timeline")
def project_timeline(
    project_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1),
) -> dict[str, Any]:
    return discussions_repo.project_timeline(project_id, page=page, limit=limit)
