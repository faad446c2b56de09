"""
NotesVault Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires settings → repository → NoteService once, stores
       them on app.state, then registers middleware, exception handlers and
       routers. `app = create_app()` is the uvicorn entry point
       (uvicorn notesvault.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Access Log → GZip → CORS  │
    │                                                      │
    │  Routes:                                             │
    │    /notes, /v1/notes   (HTTP Basic)                  │
    │    /health, /          (public)                      │
    │                                                      │
    │  Exception Handlers:                                 │
    │    NotesVaultError → STATUS_BY_KIND (400/404/503)    │
    │    RequestValidationError → 400                      │
    │    HTTPException → its status (401/404/405)          │
    │    Exception → 500                                   │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration warnings, optional schema creation
    Shutdown: repository.close() (disposes the SQL engine)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notesvault import __version__
from notesvault.config import Settings, settings as default_settings
from notesvault.exceptions import NotesVaultError
from notesvault.middleware.logging import RequestLoggingMiddleware
from notesvault.middleware.request_id import RequestIDMiddleware, request_id_var
from notesvault.repositories import NoteRepository, SqlNoteRepository, build_repository
from notesvault.routes import health, home, notes
from notesvault.routes.responses import error_body, error_response
from notesvault.security import require_basic_auth
from notesvault.services.note_service import NoteService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    repository: NoteRepository = app.state.repository

    setup_logging(settings.log_level)
    logger.info("NotesVault %s starting (storage=%s)", __version__, settings.storage_backend)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Non-fatal: the service still starts and serves /health
        logger.warning("%s", e)

    if settings.db_auto_create and isinstance(repository, SqlNoteRepository):
        await repository.create_schema()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("NotesVault shutting down...")
    await repository.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _first_validation_message(exc: RequestValidationError) -> str:
    """`<field>: <message>` for the first failing field, like `content: Input should be a valid string`."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = ".".join(location) or "body"
    return f"{field}: {first.get('msg', 'invalid value')}"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to `{"error": message}` responses.

    Handler hierarchy:
        NotesVaultError         → STATUS_BY_KIND[kind] (storage errors raised by repositories)
        RequestValidationError  → 400 (malformed JSON body, content of the wrong type)
        HTTPException           → its own status and headers (401, unknown route 404, 405)
        Exception (fallback)    → 500, details only in the server log
    """

    @app.exception_handler(NotesVaultError)
    async def handle_notesvault_error(request: Request, exc: NotesVaultError):
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = _first_validation_message(exc)
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return JSONResponse(status_code=400, content=error_body(message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, type(exc).__name__, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body("An unexpected error occurred. Please try again later."),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[NoteRepository] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: configuration; defaults to the environment-loaded settings
        repository: storage collaborator; built from settings when omitted

    Returns: Fully configured FastAPI instance.
    """
    if settings is None:
        settings = default_settings
    if repository is None:
        repository = build_repository(settings)

    app = FastAPI(
        title="NotesVault API",
        description="Create, read, list, update and delete short text notes.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Explicit dependency wiring ────────────────────────────────────────
    app.state.settings = settings
    app.state.repository = repository
    app.state.note_service = NoteService(repository)

    # ── Middleware (last added runs first) ────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    auth = [Depends(require_basic_auth)]
    app.include_router(notes.router, dependencies=auth)
    app.include_router(notes.router, prefix="/v1", dependencies=auth)
    app.include_router(health.router)
    app.include_router(home.router)

    return app


app = create_app()
