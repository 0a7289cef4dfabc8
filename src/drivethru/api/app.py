"""
FastAPI Application Setup.

Application factory for the Drivethru HTTP API. Serve it with any ASGI
server, for example ``uvicorn --factory drivethru.api.app:create_app``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from drivethru import __version__
from drivethru.api.middleware.cors import add_cors_middleware
from drivethru.api.middleware.logging import RequestLoggingMiddleware
from drivethru.api.middleware.slashes import StripSlashesMiddleware
from drivethru.api.routes import download, hashes, health, profiles, scripts
from drivethru.api.schemas.responses import ErrorResponse
from drivethru.archive.streamer import ArchiveStreamer
from drivethru.core.config import load_menu
from drivethru.core.models import Menu
from drivethru.delivery import DeliveryService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown with the loaded menu."""
    menu: Menu = app.state.menu
    logger.info("Drivethru API starting up...")
    logger.info(f"Version: {__version__}")
    logger.info(f"Serving {len(menu.profiles)} profiles from {menu.root} as {menu.url}")

    yield

    logger.info("Drivethru API shutting down...")


def create_app(
    menu: Menu | None = None,
    *,
    streamer: ArchiveStreamer | None = None,
    title: str = "Drivethru",
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        menu: Loaded menu (loads the configuration file if None)
        streamer: ArchiveStreamer shared by all requests
        title: Application title for OpenAPI docs

    Returns:
        Configured FastAPI application instance

    Raises:
        ConfigurationError: If the menu has to be loaded and is invalid
    """
    if menu is None:
        menu = load_menu()

    app = FastAPI(
        title=title,
        description="On-demand artifact archives, hashes and install scripts",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.menu = menu
    app.state.delivery = DeliveryService(menu, streamer=streamer)

    app.add_middleware(RequestLoggingMiddleware)
    add_cors_middleware(app)
    # Added last so it runs first, before routing sees the path
    app.add_middleware(StripSlashesMiddleware)

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )
    app.include_router(
        scripts.router,
        prefix="/get",
        tags=["Scripts"],
    )
    app.include_router(
        download.router,
        prefix="/download",
        tags=["Download"],
    )
    app.include_router(
        hashes.router,
        prefix="/hash",
        tags=["Hash"],
    )
    app.include_router(
        profiles.router,
        prefix="/profiles",
        tags=["Profiles"],
    )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        body = ErrorResponse(
            error={
                "type": "internal_error",
                "message": "An unexpected error occurred",
                "detail": str(exc) if logger.isEnabledFor(logging.DEBUG) else None,
            }
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, object]:
        """Root endpoint with API information."""
        return {
            "name": "Drivethru",
            "version": __version__,
            "status": "operational",
            "url": menu.url,
            "profiles": menu.profile_names(),
            "docs": "/docs",
            "health": "/health",
        }

    return app
