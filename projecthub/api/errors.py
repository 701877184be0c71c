"""Exception handlers: every error leaves the API as {"error": ..., "details"?: ..., <extra>}."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from projecthub.errors import ApiError
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.api.errors")


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("api.error", status=exc.status_code, error=exc.message)
    else:
        logger.info("api.rejected", status=exc.status_code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query params are reported as 400, like domain validation failures."""
    details = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{loc}: {error.get('msg')}" if loc else str(error.get("msg")))
    logger.info("api.invalid_request", details=details)
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content={"error": message})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api.unhandled", error=str(exc))
    return JSONResponse(status_code=500, content={"error": "Internal server error", "details": str(exc)})
