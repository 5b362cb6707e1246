"""
Rabbitry Backend — FastAPI Application Factory
===============================================

What:  Builds the FastAPI application: logging, lifespan, middleware,
       exception handlers and routers.
Who:   uvicorn (`uvicorn rabbitry.main:app`) and the test client.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Access Log → GZip → CORS  │
    │                                                      │
    │  Routes:      /api/breeds[/{id}]     /health         │
    │                                                      │
    │  Exception Handlers (single translation boundary):   │
    │    RequestValidationError → 400                      │
    │    BreedNotFoundError     → 404                      │
    │    DuplicateNameError     → 409                      │
    │    DeleteFailedError      → 500                      │
    │    DatabaseError          → 500                      │
    │    HTTPException          → its own status           │
    │    Exception              → 500 (traceback logged)   │
    └──────────────────────────────────────────────────────┘

Error body (every failure):
    {"uri": ..., "message": ..., "status code": ..., "timestamp": ..., "reason": ...}
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from email.utils import format_datetime
from http import HTTPStatus
from typing import AsyncGenerator, Dict, Optional, Sequence, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rabbitry import __version__
from rabbitry.config import settings
from rabbitry.database import dispose_engine
from rabbitry.exceptions import (
    BreedNotFoundError,
    DatabaseError,
    DeleteFailedError,
    DuplicateNameError,
)
from rabbitry.middleware.logging import RequestLoggingMiddleware
from rabbitry.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDLogFilter,
    RequestIDMiddleware,
)
from rabbitry.routes import breeds, health

logger = logging.getLogger(__name__)

_REQUEST_SOURCES = {"body", "path", "query", "header", "cookie"}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging for the whole application.

    Format: 2026-10-19T10:15:00 [INFO] [a1b2c3d4] rabbitry.services.breed_service: Adding breed ...
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] [%(request_id)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # rabbitry.access replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: configure logging. Shutdown: close pooled database connections."""
    setup_logging()
    logger.info("=" * 60)
    logger.info("Rabbitry Backend %s starting up...", __version__)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Rabbitry Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Error Translation
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    request: Request,
    status_code: int,
    message: str,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the error body shared by every failure response."""
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = ""
    return JSONResponse(
        status_code=status_code,
        content={
            "uri": request.url.path,
            "message": message,
            "status code": status_code,
            "timestamp": format_datetime(datetime.now(timezone.utc), usegmt=True),
            "reason": reason,
        },
        headers=headers,
    )


def field_name(loc: Sequence[Union[str, int]]) -> str:
    """
    Render a pydantic error location as a field name.

        ("body", "name")              → name
        ("body", "categoryNames", 1)  → categoryNames[1]
        ("path", "breed_id")          → breed_id
        ("body",)                     → body
    """
    parts = list(loc)
    if len(parts) > 1 and parts[0] in _REQUEST_SOURCES:
        parts = parts[1:]
    name = ""
    for part in parts:
        if isinstance(part, int):
            name += f"[{part}]"
        else:
            name += f".{part}" if name else str(part)
    return name


def invalid_fields_message(exc: RequestValidationError) -> str:
    names = []
    for error in exc.errors():
        # A body that is not JSON at all is reported against the body itself
        name = "body" if error.get("type") == "json_invalid" else field_name(error["loc"])
        if name not in names:
            names.append(name)
    return "Invalid field(s): " + ", ".join(names)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the shared error body.

    Known failures are logged as one line. Unclassified exceptions are
    logged with full traceback and still answered with the error body.
    """
    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        message = invalid_fields_message(exc)
        logger.warning("%s %s", request.url.path, message)
        return error_response(request, 400, message)

    @app.exception_handler(BreedNotFoundError)
    async def handle_not_found(request: Request, exc: BreedNotFoundError):
        logger.warning(exc.message)
        return error_response(request, 404, exc.message)

    @app.exception_handler(DuplicateNameError)
    async def handle_duplicate_name(request: Request, exc: DuplicateNameError):
        logger.warning("Duplicate key | Context: %s", exc.context)
        return error_response(request, 409, exc.message)

    @app.exception_handler(DeleteFailedError)
    async def handle_delete_failed(request: Request, exc: DeleteFailedError):
        logger.error(exc.message)
        return error_response(request, 500, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("Database error: %s | Context: %s", exc.message, exc.context)
        return error_response(request, 500, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(request, exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs outside the request-ID middleware; take the ID from request state
        rid = getattr(request.state, "request_id", None)
        logger.error(
            "Unexpected error on %s: %s",
            request.url.path,
            str(exc),
            exc_info=True,
            extra={"request_id": rid or "-"},
        )
        return error_response(
            request,
            500,
            f"An unexpected error occurred: {type(exc).__name__}: {exc}",
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Rabbitry API",
        description=(
            "Rabbit breed catalogue: breeds with their descriptions, shared "
            "categories and alternate names."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware runs in reverse order of addition: RequestID runs first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(breeds.router)
    app.include_router(health.router)

    return app


app = create_app()
