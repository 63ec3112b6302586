"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nourish.api.chat import router as chat_router
from nourish.api.health import router as health_router
from nourish.api.meals import router as meals_router
from nourish.app_logging import configure_logging
from nourish.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting nourish API (environment=%s)", container.settings.environment
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Nourish", lifespan=lifespan)
    app.state.container = container

    app.include_router(meals_router)
    app.include_router(health_router)
    app.include_router(chat_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
