"""
TimeTracker Backend - FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn timetracker.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────┐ ┌──────────────┐ ┌─────────┐  │
    │  │  Req ID  │→│ Logging  │→│ API version  │→│GZip/CORS│  │
    │  └──────────┘ └──────────┘ └──────────────┘ └─────────┘  │
    │                                                          │
    │  Routes (/api/v1 and /api/v2):                           │
    │  ┌─────────┐ ┌──────────┐ ┌───────┐ ┌──────────────┐     │
    │  │ clients │ │ projects │ │ users │ │ time-entries │     │
    │  └─────────┘ └──────────┘ └───────┘ └──────────────┘     │
    │  GET /health   Swagger UI at /swagger                    │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ Validation→400 │ 401 │ 403 │ NotFound→404 │ 429 │ 500│  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create missing tables (settings.create_schema_on_startup)
    3. Insert demo data into an empty store (settings.seed_demo_data)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from timetracker import __version__
from timetracker.config import settings
from timetracker.database import async_session_factory, dispose_engine, init_models
from timetracker.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    NotFoundError,
    RateLimitExceededError,
    TimeTrackerError,
    UnsupportedApiVersionError,
)
from timetracker.middleware.api_version import ApiVersionHeaderMiddleware
from timetracker.middleware.logging import RequestLoggingMiddleware
from timetracker.middleware.request_id import RequestIDMiddleware, request_id_var
from timetracker.rate_limiting import RateLimiterRegistry
from timetracker.routes import clients, health, projects, time_entries, users
from timetracker.schemas.common import ErrorResponse
from timetracker.seed import seed_demo_data

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout, at settings.log_level. Called once from the lifespan.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request access lines come from timetracker.access instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if not settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, schema creation and demo data.
    Shutdown: dispose the engine.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("TimeTracker API %s starting up...", __version__)

    if settings.create_schema_on_startup:
        await init_models()
        logger.info("Database schema ready")

    if settings.seed_demo_data:
        async with async_session_factory() as session:
            if await seed_demo_data(session):
                await session.commit()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/swagger", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("TimeTracker API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        message=message,
        details=details,
        request_id=request_id_var.get(""),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def _validation_errors_by_field(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Groups Pydantic errors as {"hourRate": ["Input should be greater than 0"], ...}."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        field_path = [part for part in loc if part not in ("body", "query", "path")]
        field = ".".join(field_path) or (loc[0] if loc else "request")
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError      → 400 Bad Request
        UnsupportedApiVersionError  → 400 Bad Request
        AuthenticationError         → 401 Unauthorized
        AuthorizationError          → 403 Forbidden
        NotFoundError               → 404 Not Found
        RateLimitExceededError      → 429 Too Many Requests
        DatabaseError               → 500 Internal Server Error
        TimeTrackerError (base)     → 500 Internal Server Error
        Exception (fallback)        → 500 Internal Server Error

    Responses never include stack traces or SQL; those are logged server-side.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = _validation_errors_by_field(exc)
        logger.warning("[%s] Validation error on %s: %s",
                       request_id_var.get(""), request.url.path, errors)
        return _error_response(
            400,
            "validation_error",
            "One or more validation errors occurred.",
            details={"errors": errors},
        )

    @app.exception_handler(UnsupportedApiVersionError)
    async def handle_unsupported_version(request: Request, exc: UnsupportedApiVersionError):
        return _error_response(400, "unsupported_api_version", exc.message, details=exc.context)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(
            401, "unauthorized", exc.message, headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        return _error_response(403, "forbidden", exc.message, details=exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return _error_response(
            429,
            "rate_limit_exceeded",
            exc.message,
            details=exc.context,
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(TimeTrackerError)
    async def handle_application_error(request: Request, exc: TimeTrackerError):
        logger.error("[%s] Application error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Each call builds a fresh rate-limiter registry, so tests get
    independent limiter state per app instance.
    """
    app = FastAPI(
        title="TimeTracker API",
        description=(
            "CRUD API for clients, projects, users and the time entries users book "
            "on projects. Versions 1 and 2 are served under /api/v1 and /api/v2."
        ),
        version=__version__,
        docs_url="/swagger",
        redoc_url=None,
        openapi_url="/swagger/openapi.json",
        lifespan=lifespan,
    )

    app.state.rate_limiters = RateLimiterRegistry.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executed in reverse order of addition: RequestID runs first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "Location",
            "Retry-After",
            "api-supported-versions",
        ],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(ApiVersionHeaderMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(clients.router)
    app.include_router(projects.router)
    app.include_router(users.router)
    app.include_router(time_entries.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
