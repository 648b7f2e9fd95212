"""FastAPI application factory for the toneguard API server."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toneguard import __version__
from toneguard.config import Config
from toneguard.session import ToneSession

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None, session: ToneSession | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Two modes:
    - With a session: used as-is, nothing is opened or closed (testing)
    - Without: a session is built from config in the lifespan (production)
    """
    resolved_config = config or Config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if session is not None:
            yield
            return
        try:
            owned = ToneSession.from_config(resolved_config)
            await owned.initialize()
        except Exception as e:
            logger.error("Failed to initialize tone session: %s", e)
            raise
        app.state.session = owned
        yield
        await owned.close()

    app = FastAPI(
        title="toneguard",
        description="Tone analysis and diplomatic rewrite service",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.config = resolved_config
    if session is not None:
        app.state.session = session

    # CORS: local only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:*", "http://127.0.0.1:*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from toneguard.api.routes import router

    app.include_router(router)

    return app
