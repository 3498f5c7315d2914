"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from nutrisnap.api.auth import router as auth_router
from nutrisnap.api.meals import router as meals_router
from nutrisnap.api.models import ViewRequest
from nutrisnap.api.payloads import session_payload
from nutrisnap.api.ui import INDEX_HTML
from nutrisnap.app_logging import configure_logging
from nutrisnap.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "NutriSnap started (storage=%s, user=%s)",
            container.settings.storage_backend,
            container.state.username or "guest",
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(meals_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Single-page front end."""
        return HTMLResponse(INDEX_HTML)

    @app.get("/session")
    async def session(request: Request) -> dict[str, object]:
        """Return login state and the active view."""
        state_container: AppContainer = request.app.state.container
        return session_payload(state_container.state)

    @app.post("/session/view")
    async def navigate(body: ViewRequest, request: Request) -> dict[str, object]:
        """Switch between the home, history and login views."""
        state_container: AppContainer = request.app.state.container
        state_container.session_controller.navigate(body.view)
        return session_payload(state_container.state)

    return app
