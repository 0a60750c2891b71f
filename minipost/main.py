"""minipost API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (a single catch-all feeding the Dispatcher)
    - Global error handlers map PostServerError → structured JSON responses
    - Store, renderer and dispatcher built on startup via lifespan, store closed on shutdown
    - No docs/openapi endpoints: every path not in the route table answers 404

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory plus module-level `app` for uvicorn and tests
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from minipost.api.error_handlers import register_error_handlers
from minipost.api.routes import dispatch
from minipost.config import Settings, get_settings
from minipost.infrastructure.observability import setup_logging
from minipost.infrastructure.post_store import PostStore
from minipost.infrastructure.renderer import JinjaRenderer
from minipost.services.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI app; settings default to the cached environment settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        cfg = settings or get_settings()
        setup_logging(cfg.log_level, cfg.log_format)
        store = PostStore(cfg.database_url)
        await store.init_schema()
        app.state.dispatcher = Dispatcher(store, JinjaRenderer())
        db_ok = await store.health_check()
        logger.info(f"minipost API started (database healthy: {db_ok})")
        try:
            yield
        finally:
            logger.info("minipost API shutting down")
            app.state.dispatcher = None
            await store.close()

    app = FastAPI(
        title="minipost API", version="1.0.0", lifespan=lifespan,
        docs_url=None, redoc_url=None, openapi_url=None,
    )
    app.include_router(dispatch.router)
    register_error_handlers(app)
    return app


app = create_app()
