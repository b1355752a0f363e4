"""
Solace Backend — FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn solace.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌─────────────┐          │
    │  │  Req ID  │→│ Logging  │→│ Bearer Auth │          │
    │  └──────────┘ └──────────┘ └─────────────┘          │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────┐ ┌─────────────────┐       │
    │  │ /graphql (Strawberry)│ │ GET /health     │       │
    │  └──────────────────────┘ └─────────────────┘       │
    │                                                     │
    │  app.state:                                         │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ database (Database) │ advice_generator       │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (fatal on missing DATABASE_URL, OPENROUTER_API_KEY or JWT_SECRET)
    3. Create the Database and wait until it answers (tenacity backoff)
    4. Create the OpenRouter advice generator

    Shutdown:
    1. Close the advice generator's HTTP client
    2. Dispose the database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from solace import __version__
from solace.config import settings
from solace.database import Database
from solace.exceptions import DatabaseError, SolaceError
from solace.middleware.auth import BearerAuthMiddleware
from solace.middleware.logging import RequestLoggingMiddleware
from solace.middleware.request_id import RequestIDMiddleware, request_id_var
from solace.routes import graphql, health
from solace.schemas.responses import ErrorResponse
from solace.services.auth_service import TokenVerifier
from solace.services.openrouter_service import OpenRouterService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup (before ANY other initialization).
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Builds the process-wide resources and stores them on app.state.

    Nothing is created at import time: tests assign their own Database and
    advice generator to app.state instead of running this lifespan.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Solace Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.critical("Configuration error: %s", str(e))
        raise

    database = Database.from_settings(settings)
    try:
        await database.wait_until_ready(attempts=settings.db_connect_attempts)
    except Exception:
        logger.critical("Database unreachable after %d attempts", settings.db_connect_attempts)
        await database.dispose()
        raise

    advice_generator = OpenRouterService.from_settings(settings)

    app.state.database = database
    app.state.advice_generator = advice_generator

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("GraphQL endpoint: http://%s:%d/graphql", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Solace Backend shutting down...")
    await advice_generator.aclose()
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Error responses for the REST endpoints.

    GraphQL operations report their errors in the response body instead
    (see graphql/errors.py); these handlers cover everything outside it.

    Handler hierarchy:
        SolaceError (any kind)  → its status_code, error_code in the body
        DatabaseError           → 500 with a generic message
        Exception (fallback)    → 500, stack trace logged only
    """

    @app.exception_handler(SolaceError)
    async def handle_solace_error(request: Request, exc: SolaceError):
        rid = request_id_var.get("")
        message = exc.message
        if isinstance(exc, DatabaseError):
            logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
            message = "An internal error occurred. Please try again later."
        else:
            logger.warning("[%s] %s: %s", rid, exc.error_code, exc.message)
        body = ErrorResponse(error=exc.error_code, message=message, request_id=rid)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        body = ErrorResponse(
            error="internal_server_error",
            message="An unexpected error occurred. Please try again or contact support.",
            request_id=rid,
        )
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Solace API",
        description=(
            "Biblical guidance for personal problems: users describe a problem, "
            "receive AI-generated advice and work through a reading plan of verses."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute:
    # RequestID → Logging → BearerAuth → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(BearerAuthMiddleware, verifier=TokenVerifier.from_settings(settings))
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(graphql.router, prefix="/graphql", tags=["GraphQL"])
    app.include_router(health.router)

    return app


# uvicorn expects `solace.main:app` to be importable
app = create_app()
