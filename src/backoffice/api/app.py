"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from backoffice.api.auth import router as auth_router
from backoffice.api.backoffice import router as backoffice_router
from backoffice.app_logging import configure_logging
from backoffice.containers import AppContainer
from backoffice.errors import AuthenticationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        resources: AppContainer = app.state.container
        restored = resources.auth.restore()
        if restored and resources.settings.revalidate_restored_session:
            try:
                await resources.auth.revalidate(resources.exchange)
            except AuthenticationError:
                logger.warning("Persisted session was rejected; showing login")
        resources.shell.start()
        yield
        await resources.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(backoffice_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def root(request: Request) -> dict[str, str]:
        """Return the view the operator should see."""
        resources: AppContainer = request.app.state.container
        return {"view": resources.shell.current_view}

    return app
