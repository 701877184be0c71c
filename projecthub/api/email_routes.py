"""Email threads API and the email import endpoint."""

from typing import Any

from fastapi import APIRouter

from projecthub.db.repositories import email_threads_repo
from projecthub.models.email_import import EmailImportRequest
from projecthub.models.requests import EmailThreadCreate, EmailThreadUpdate
from projecthub.services.importer import import_email_thread

router = APIRouter(prefix="/api", tags=["email"])


@router.get("/email-threads")
def list_threads() -> list[dict[str, Any]]:
    return email_threads_repo.list_threads()


@router.post("/email-threads", status_code=201)
def create_thread(body: EmailThreadCreate) -> dict[str, Any]:
    return email_threads_repo.create_thread(body)


@router.get("/email-threads/{thread_id}")
def get_thread(thread_id: str) -> dict[str, Any]:
    return email_threads_repo.get_thread(thread_id)


@router.put("/email-threads/{thread_id}")
def update_thread(thread_id: str, body: EmailThreadUpdate) -> dict[str, Any]:
    return email_threads_repo.update_thread(thread_id, body)


@router.delete("/email-threads/{thread_id}")
def delete_thread(thread_id: str) -> dict[str, str]:
    email_threads_repo.delete_thread(thread_id)
    return {"message": "Email thread deleted successfully"}


@router.post("/email-import", status_code=201)
def import_email(body: EmailImportRequest) -> dict[str, Any]:
    """Import a thread from {source, data, options}. 400 invalid, 409 duplicate."""
    return import_email_thread(body)
