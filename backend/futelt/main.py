"""
Futelt Backend — FastAPI Application Factory
==============================================

What:  Builds the FastAPI application and its message store.
How:   create_app() wires middleware, exception handlers, routes and the
       lifespan around one MessageStore instance kept on app.state.
Who:   uvicorn (futelt.main:app, or the `futelt` console script via run()).

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
    │  ┌───────────────┐ ┌──────────────┐ ┌────────────┐  │
    │  │ POST/GET      │ │ GET /health  │ │ GET /      │  │
    │  │ /messages     │ │              │ │            │  │
    │  └───────────────┘ └──────────────┘ └────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ValidationError→400 │ PersistenceError→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → open the store (failure aborts startup)
    Shutdown: close the store (disposes the connection pool)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from futelt import __version__
from futelt.config import Settings, settings as default_settings
from futelt.exceptions import PersistenceError, ValidationError
from futelt.middleware.logging import RequestLoggingMiddleware
from futelt.middleware.request_id import RequestIDMiddleware, request_id_var
from futelt.routes import health, index, messages
from futelt.store import MessageStore, create_store

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] futelt.access: GET /messages 200 1.2ms [1f0c2a9e] from 127.0.0.1
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the message store on startup and close it on shutdown.

    A PersistenceError from open() propagates out of the lifespan, so
    uvicorn refuses to start instead of serving without storage.
    """
    config: Settings = app.state.settings
    store: MessageStore = app.state.store

    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Futelt Backend %s starting up (store: %s)", __version__, config.store_backend)

    try:
        await store.open()
    except PersistenceError as e:
        logger.critical("Startup aborted: %s | Context: %s", e.message, e.context)
        raise

    logger.info("Server ready at http://%s", config.bind_address)
    logger.info("=" * 60)

    try:
        yield
    finally:
        # Runs on clean shutdown and when the app exits with an error
        logger.info("Futelt Backend shutting down...")
        await store.close()
        logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP responses with the ErrorResponse shape.

    Handler hierarchy:
        ValidationError         → 400 (empty text)
        RequestValidationError  → 400 (malformed JSON, missing or mistyped field)
        PersistenceError        → 500 (generic message, details logged only)
        Exception (fallback)    → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        # Only loc and msg: pydantic's ctx may hold exception objects
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Malformed request body: %s", rid, errors)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Request body must be a JSON object with a string 'text' field",
                "details": {"errors": errors},
                "request_id": rid,
            },
        )

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        rid = request_id_var.get("")
        logger.error("[%s] Persistence error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": rid,
            },
            # ServerErrorMiddleware sits outside RequestIDMiddleware, so the header
            # must be set here
            headers={"X-Request-ID": rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[MessageStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded settings.
        store:    Message store to serve; defaults to create_store(settings).
                  Tests pass an already opened store here.
    """
    config = settings or default_settings

    app = FastAPI(
        title="Futelt API",
        description="Post short notes to your future self and read them back, newest first.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.store = store if store is not None else create_store(config)

    # Middleware runs in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(index.router)
    app.include_router(messages.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` on BACKEND_HOST:BACKEND_PORT."""
    uvicorn.run(
        app,
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )
