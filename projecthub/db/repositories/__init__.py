"""DB repositories: sync functions that open a session and return JSON-ready dicts."""

from projecthub.db.repositories import (
    discussions_repo,
    email_threads_repo,
    projects_repo,
    stats_repo,
    tasks_repo,
    time_repo,
    timelines_repo,
    users_repo,
)

__all__ = [
    "users_repo",
    "projects_repo",
    "tasks_repo",
    "time_repo",
    "email_threads_repo",
    "timelines_repo",
    "discussions_repo",
    "stats_repo",
]
