"""Time tracking API, nested under a project: categories, entries and running timers."""

from typing import Any, Optional

from fastapi import APIRouter, Query

from projecthub.config import DEFAULT_PAGE_LIMIT
from projecthub.db.repositories import time_repo
from projecthub.models.requests import ClearRunningRequest, TimeCategoryCreate, TimeEntryCreate, TimeEntryUpdate

router = APIRouter(prefix="/api/projects/{project_id}", tags=["time-tracking"])


@router.get("/time-categories")
def list_categories(project_id: str) -> list[dict[str, Any]]:
    return time_repo.list_categories(project_id)


@router.post("/time-categories", status_code=201)
def create_category(project_id: str, body: TimeCategoryCreate) -> dict[str, Any]:
    return time_repo.create_category(project_id, body)


@router.get("/time-entries")
def list_entries(
    project_id: str,
    is_running: Optional[bool] = Query(None, alias="isRunning"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1),
) -> dict[str, Any]:
    return time_repo.list_entries(project_id, is_running=is_running, page=page, limit=limit)


@router.post("/time-entries", status_code=201)
def create_entry(project_id: str, body: TimeEntryCreate) -> dict[str, Any]:
    return time_repo.create_entry(project_id, body)


@router.post("/time-entries/clear-running")
def clear_running(project_id: str, body: ClearRunningRequest) -> dict[str, Any]:
    return time_repo.clear_running(project_id, body.user_id)


@router.get("/time-entries/{entry_id}")
def get_entry(project_id: str, entry_id: str) -> dict[str, Any]:
    return time_repo.get_entry(project_id, entry_id)


@router.put("/time-entries/{entry_id}")
def update_entry(project_id: str, entry_id: str, body: TimeEntryUpdate) -> dict[str, Any]:
    return time_repo.update_entry(project_id, entry_id, body)


@router.delete("/time-entries/{entry_id}")
def delete_entry(project_id: str, entry_id: str) -> dict[str, str]:
    time_repo.delete_entry(project_id, entry_id)
    return {"message": "Time entry deleted successfully"}
