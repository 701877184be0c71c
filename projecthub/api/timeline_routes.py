"""Timelines API: views, generation from a thread, events and reordering."""

from typing import Any

from fastapi import APIRouter

from projecthub.db.repositories import timelines_repo
from projecthub.errors import Conflict, ValidationFailed
from projecthub.models.requests import (
    ReorderRequest,
    TimelineCreate,
    TimelineEventIn,
    TimelineEventUpdate,
    TimelineGenerateRequest,
    TimelineUpdate,
)
from projecthub.services.timeline import generate_timeline

router = APIRouter(prefix="/api/timelines", tags=["timelines"])


@router.get("")
def list_timelines() -> list[dict[str, Any]]:
    return timelines_repo.list_timelines()


@router.post("", status_code=201)
def create_timeline(body: TimelineCreate) -> dict[str, Any]:
    return timelines_repo.create_timeline(body)


@router.post("/generate", status_code=201)
def generate(body: TimelineGenerateRequest) -> dict[str, Any]:
    """Build a timeline from the thread's messages. 409 when the thread already has one."""
    if not body.thread_id:
        raise ValidationFailed("Thread ID is required")
    timeline, created = generate_timeline(body.thread_id, body.title, body.description, body.is_public)
    if not created:
        raise Conflict("Timeline already exists for this thread", timelineId=timeline["id"])
    return {
        "success": True,
        "message": "Timeline generated successfully",
        "timeline": timeline,
        "generatedEvents": len(timeline["events"]),
    }


@router.get("/{timeline_id}")
def get_timeline(timeline_id: str) -> dict[str, Any]:
    return timelines_repo.get_timeline(timeline_id)


@router.put("/{timeline_id}")
def update_timeline(timeline_id: str, body: TimelineUpdate) -> dict[str, Any]:
    return timelines_repo.update_timeline(timeline_id, body)


@router.delete("/{timeline_id}")
def delete_timeline(timeline_id: str) -> dict[str, str]:
    timelines_repo.delete_timeline(timeline_id)
    return {"message": "Timeline deleted successfully"}


@router.get("/{timeline_id}/events")
def list_events(timeline_id: str) -> list[dict[str, Any]]:
    return timelines_repo.list_events(timeline_id)


@router.post("/{timeline_id}/events/reorder")
def reorder_events(timeline_id: str, body: ReorderRequest) -> dict[str, Any]:
    return timelines_repo.reorder_events(timeline_id, body)


@router.post("/{timeline_id}/events", status_code=201)
def create_event(timeline_id: str, body: TimelineEventIn) -> dict[str, Any]:
    return timelines_repo.create_event(timeline_id, body)


@router.get("/{timeline_id}/events/{event_id}")
def get_event(timeline_id: str, event_id: str) -> dict[str, Any]:
    return timelines_repo.get_event(timeline_id, event_id)


@router.put("/{timeline_id}/events/{event_id}")
def update_event(timeline_id: str, event_id: str, body: TimelineEventUpdate) -> dict[str, Any]:
    return timelines_repo.update_event(timeline_id, event_id, body)


@router.delete("/{timeline_id}/events/{event_id}")
def delete_event(timeline_id: str, event_id: str) -> dict[str, str]:
    timelines_repo.delete_event(timeline_id, event_id)
    return {"message": "Timeline event deleted successfully"}
