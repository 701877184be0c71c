"""FastAPI application: routers per resource, request-context logging, JSON error envelope."""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request

from projecthub import __version__
from projecthub.api.discussion_routes import router as discussion_router
from projecthub.api.email_routes import router as email_router
from projecthub.api.errors import add_exception_handlers
from projecthub.api.projects_routes import router as projects_router
from projecthub.api.tasks_routes import router as tasks_router
from projecthub.api.time_routes import router as time_router
from projecthub.api.timeline_routes import router as timeline_router
from projecthub.api.users_routes import router as users_router
from projecthub.db import init_db
from projecthub.db.repositories import stats_repo
from projecthub.utils.logger import bind_context, get_logger, unbind_context

logger = get_logger("projecthub.api.server")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    init_db()
    logger.info("api.startup", version=__version__)
    yield
    logger.info("api.shutdown")


def create_app() -> FastAPI:
    app = FastAPI(title="ProjectHub API", version=__version__, lifespan=_lifespan)
    add_exception_handlers(app)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        bind_context(request_id=request_id, method=request.method, path=request.url.path)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            logger.debug(
                "api.request",
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        finally:
            unbind_context("request_id", "method", "path")

    for router in (
        users_router,
        projects_router,
        tasks_router,
        time_router,
        email_router,
        timeline_router,
        discussion_router,
    ):
        app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/stats")
    def stats() -> dict[str, Any]:
        """Row counts and sample rows; confirms the database is reachable and seeded."""
        return stats_repo.database_stats()

    return app
