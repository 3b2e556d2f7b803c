"""
Extension Transformation Relay

FastAPI application entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from extension_transformation import __version__
from extension_transformation.app.api import extension_router
from extension_transformation.app.dependencies import get_settings, initialize_services, shutdown_services

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting extension transformation services...")
    try:
        await initialize_services()
        logger.info("Extension transformation services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise

    yield

    # Shutdown
    logger.info("Shutting down extension transformation services...")
    try:
        await shutdown_services()
        logger.info("Extension transformation services shut down successfully")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}", exc_info=True)


# Create FastAPI application
app = FastAPI(
    title="Extension Transformation",
    description="Relays extension transformations between storage adapters and transformation services",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)

# Include routers
app.include_router(extension_router)


@app.get("/public/hc", tags=["health"])
async def health_check() -> dict[str, str]:
    """Liveness probe. Makes no downstream calls."""
    return {"message": "OK"}


def run() -> None:
    """Serve the application with uvicorn on the configured address."""
    import uvicorn

    uvicorn.run(
        "extension_transformation.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
