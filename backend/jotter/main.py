"""
Jotter Backend — FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) builds the Database and AuthService from one
       Settings object, stores all three on `app.state`, and wires
       middleware, exception handlers and routers.
Who:   uvicorn (`uvicorn jotter.main:app`) and the test suite, which calls
       create_app() with its own Settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  /api/notes   /api/users   /api/login   /health     │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation/MalformedId→400 │ Unauthorized→401      │
    │  NotFound→404 │ Database/unexpected→500             │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → validate settings (fail fast) → create tables
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from jotter import __version__
from jotter.config import Settings
from jotter.database import Database
from jotter.exceptions import (
    DatabaseError,
    InvalidIdentifierError,
    JotterError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from jotter.middleware.logging import RequestLoggingMiddleware
from jotter.middleware.request_id import RequestIDMiddleware, request_id_var
from jotter.routes import health, login, notes, users
from jotter.services.auth_service import AuthService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] jotter.access: GET /api/notes 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Replaced by RequestLoggingMiddleware / too chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("Jotter Backend %s starting up...", __version__)

    # A missing SECRET would let anyone forge tokens; refuse to start
    try:
        settings.validate_required()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    if settings.db_create_tables:
        await database.create_all()
        logger.info("Database tables verified")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Jotter Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    # The catch-all handler runs outside RequestIDMiddleware, after the
    # ContextVar was reset, so fall back to request.state
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def _error_body(request: Request, error: str, message: str, details=None) -> dict:
    body = {"error": error, "message": message, "request_id": _request_id(request)}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400 Bad Request
        DuplicateUsernameError (a ValidationError) → 400 Bad Request
        InvalidIdentifierError  → 400 Bad Request
        UnauthorizedError       → 401 Unauthorized
        NotFoundError           → 404 Not Found
        DatabaseError           → 500 Internal Server Error
        JotterError (base)      → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    Security: responses never include stack traces, SQL, or driver messages.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        details = {"field": exc.field} if exc.field else None
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "validation_error", exc.message, details),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # Body/query schema failures are client errors like any other: 400, not 422
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or "body",
                "message": err.get("msg", "invalid value"),
            }
            for err in exc.errors()
        ]
        first = details[0] if details else {"field": "body", "message": "invalid request"}
        message = f"{first['field']}: {first['message']}"
        logger.warning("[%s] Request validation error: %s", _request_id(request), message)
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "validation_error", message, details),
        )

    @app.exception_handler(InvalidIdentifierError)
    async def handle_invalid_identifier(request: Request, exc: InvalidIdentifierError):
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "malformed_id", exc.message),
        )

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        logger.warning("[%s] Unauthorized: %s %s", _request_id(request), exc.message, exc.context)
        return JSONResponse(
            status_code=401,
            content=_error_body(request, "unauthorized", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body(request, "not_found", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s", _request_id(request), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request, "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(JotterError)
    async def handle_application_error(request: Request, exc: JotterError):
        logger.error("[%s] Unhandled application error: %s", _request_id(request), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request,
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to use. Read from the environment when omitted.

    Returns:
        Configured FastAPI instance. `app.state` holds `settings`,
        `database` and `auth_service`.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Jotter API",
        description="Short text notes with per-user ownership and bearer-token authentication.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.auth_service = AuthService(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute
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

    app.include_router(notes.router)
    app.include_router(users.router)
    app.include_router(login.router)
    app.include_router(health.router)

    return app


# uvicorn expects `jotter.main:app` to be importable
app = create_app()
