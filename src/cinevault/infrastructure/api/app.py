"""ASGI application for the CineVault HTTP API."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cinevault import __version__
from cinevault.core.config import Settings, get_settings
from cinevault.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from cinevault.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Prepare logging, storage and the database before serving requests."""
    settings = get_settings()
    configure_logging(settings)
    logger.info("CineVault starting", version=settings.app_version, environment=settings.environment)

    if settings.uses_default_secrets and not settings.is_testing:
        logger.warning(
            "Token secrets are the built-in placeholders; set "
            "CINEVAULT_ACCESS_TOKEN_SECRET and CINEVAULT_REFRESH_TOKEN_SECRET"
        )

    upload_root = Path(settings.storage_path)
    upload_root.mkdir(parents=True, exist_ok=True)
    logger.info("Upload root ready", path=str(upload_root.resolve()))

    await init_database()
    try:
        yield
    finally:
        await close_database()
        logger.info("CineVault stopped")


def _add_health_routes(app: FastAPI) -> None:
    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    @app.get("/ready", tags=["health"])
    async def ready():
        """Report 503 until the database answers."""
        if await get_db_manager().ping():
            return {"status": "ready", "database": "up"}
        return JSONResponse(status_code=503, content={"status": "unavailable", "database": "down"})


def _add_api_routes(app: FastAPI, settings: Settings) -> None:
    from cinevault.infrastructure.api.routes import (
        auth_router,
        movie_files_router,
        movies_router,
    )

    prefix = settings.api_prefix
    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(movies_router, prefix=f"{prefix}/movies", tags=["movies"])
    app.include_router(movie_files_router, prefix=f"{prefix}/movies", tags=["files"])

    @app.get(prefix, tags=["root"])
    async def api_index() -> dict:
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "endpoints": [f"{prefix}/auth", f"{prefix}/movies"],
        }


def _add_error_handling(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error",
            method=request.method,
            path=request.url.path,
            exc_type=type(exc).__name__,
        )
        detail = str(exc) if settings.debug else "An unexpected error occurred"
        return JSONResponse(status_code=500, content={"error": "Internal server error", "detail": detail})


def _add_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def correlate(request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or new_correlation_id()
        bind_correlation_id(correlation_id)
        try:
            response = await call_next(request)
            logger.info(
                "Request handled",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        finally:
            clear_context()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Interactive docs are only served in development.
    """
    settings = settings or get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Movie catalog with token authentication and file attachments",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    _add_health_routes(app)
    _add_api_routes(app, settings)
    _add_error_handling(app, settings)
    _add_request_logging(app)
    return app


app = create_app()
