from __future__ import annotations

import logging

from fastapi import FastAPI

from .config import Settings, get_settings
from .data.store import DatasetStore
from .logging import configure_logging
from .prompts import PromptSet, load_prompts
from .session import ClientFactory
from .transport.client import RealtimeConversationClient

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    store: DatasetStore | None = None,
    client_factory: ClientFactory | None = None,
    prompts: PromptSet | None = None,
) -> FastAPI:
    """Create the FastAPI app: REST routes plus the ``/realtime`` socket.

    The dataset is loaded once here and shared read-only by every request
    and session.
    """

    # Lazy imports so the routers only load with the app.
    from .api.realtime import router as realtime_router
    from .api.routes import router as api_router

    settings = settings or get_settings()
    if store is None:
        store = DatasetStore(settings.sculpture_data_path)
        store.load()

    app = FastAPI(title="Sculpture guide")
    app.state.settings = settings
    app.state.store = store
    app.state.client_factory = client_factory or RealtimeConversationClient.from_settings
    app.state.prompts = prompts or load_prompts(settings.prompts_path)

    app.include_router(api_router)
    app.include_router(realtime_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def run(settings: Settings | None = None) -> None:
    """Serve the app with uvicorn."""

    import uvicorn

    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)
    app = create_app(settings)
    logger.info(
        "server starting",
        extra={"host": settings.host, "port": settings.port, "backend": settings.backend},
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


def main() -> None:
    run()
