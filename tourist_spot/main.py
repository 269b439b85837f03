"""
Tourist Spot API — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers, and
       attaches the services the routes use to app.state.
Who:   uvicorn (`uvicorn tourist_spot.main:app`) and the test suite, which
       calls create_app() with in-memory collaborators.

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware: RateLimit → AccessLog (request id)         │
    │              → SecurityHeaders → GZip → CORS            │
    │                                                         │
    │  Routes:  /jwt  /jwt-logout  /tourist-spot[...]  /health│
    │                                                         │
    │  app.state: token_issuer, spot_service, database        │
    │                                                         │
    │  Errors:  TouristSpotError → its status, {success:false}│
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup (only when no services were injected):
    1. Configure logging
    2. Validate configuration, refuse to start when it is incomplete
    3. Connect to MongoDB (ping) and configure Cloudinary
    4. Build TouristSpotService

    Shutdown:
    1. Close the MongoDB client
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
from starlette.exceptions import HTTPException as StarletteHTTPException

from tourist_spot import __version__
from tourist_spot.config import settings
from tourist_spot.database import MongoDatabase
from tourist_spot.exceptions import RateLimitExceededError, TouristSpotError
from tourist_spot.middleware.rate_limit import RateLimitMiddleware
from tourist_spot.middleware.logging import (
    AccessLogMiddleware,
    RequestIdFilter,
)
from tourist_spot.middleware.security_headers import SecurityHeadersMiddleware
from tourist_spot.routes import auth, health, spots
from tourist_spot.services.asset_service import (
    AssetCleanup,
    CleanupPolicy,
    CloudinaryAssetStore,
)
from tourist_spot.services.spot_service import TouristSpotService
from tourist_spot.services.token_service import TokenIssuer

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s
    When:   Called once during app startup, before anything logs.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the MongoDB-backed services on startup and release them on shutdown.

    Skipped entirely when create_app() received a spot_service: the caller
    owns those collaborators.
    """
    if getattr(app.state, "spot_service", None) is not None:
        yield
        return

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Tourist Spot API starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    database = MongoDatabase(settings)
    await database.connect()

    asset_cleanup = AssetCleanup(
        CloudinaryAssetStore.from_settings(settings),
        policy=CleanupPolicy(settings.asset_cleanup_policy),
    )
    app.state.database = database
    app.state.spot_service = TouristSpotService(database.collection, asset_cleanup)

    logger.info("Server listening on http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Tourist Spot API shutting down...")
    await database.close()
    app.state.spot_service = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers producing the uniform error envelope.

    Handler hierarchy:
        TouristSpotError (all app errors) → exc.status_code
        RequestValidationError            → 400 Bad Request
        StarletteHTTPException            → framework status (404 route, 405, ...)
        Exception (fallback)              → 500 Internal Server Error

    Responses never include exception context or stack traces; those are
    logged server-side; RequestIdFilter adds the request id.
    """

    @app.exception_handler(TouristSpotError)
    async def handle_app_error(request: Request, exc: TouristSpotError):
        if exc.status_code >= 500:
            logger.error(
                "%s: %s | Context: %s", exc.error, exc.message, exc.context
            )
        else:
            logger.warning("%s: %s", exc.error, exc.message)

        headers = None
        if isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after)}
        return _error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            message = f"Invalid request: {location} {first.get('msg', '')}".strip()
        logger.warning("Validation error: %s", message)
        return _error_response(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return _error_response(
            exc.status_code, str(exc.detail), getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs outside AccessLogMiddleware, after request_id_var was reset.
        rid = getattr(request.state, "request_id", "-")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_response(500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    spot_service: Optional[TouristSpotService] = None,
    token_issuer: Optional[TokenIssuer] = None,
    database: Optional[MongoDatabase] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        spot_service: Pre-built service; when given, the lifespan does not
                      connect to MongoDB or Cloudinary.
        token_issuer: Pre-built issuer; defaults to one using settings.
        database:     Exposed to GET /health when provided.
    """
    app = FastAPI(
        title="Tourist Spot API",
        description=(
            "Session-authenticated CRUD API for tourist spots stored in MongoDB, "
            "with images hosted on Cloudinary."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.token_issuer = token_issuer or TokenIssuer(
        secret=settings.access_token_secret,
        ttl_seconds=settings.token_ttl_seconds,
        cookie_name=settings.token_cookie_name,
    )
    app.state.spot_service = spot_service
    app.state.database = database

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition: RateLimit runs first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(spots.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tourist_spot.main:app", host=settings.host, port=settings.port)
