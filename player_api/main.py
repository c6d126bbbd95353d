"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from player_api import __version__
from player_api.api.routes import auth, player
from player_api.config import Settings, get_settings
from player_api.context import create_context
from player_api.core.errors import register_exception_handlers
from player_api.db.database import create_tables

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    ctx = app.state.ctx
    logger.info("Player API starting (env=%s)", ctx.settings.APP_ENV)
    # Startup: create tables (no migration tooling)
    await create_tables(ctx.engine)
    yield
    # Shutdown: close connections
    logger.info("Player API shutting down")
    await ctx.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app around a single context created from ``settings``."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Player API",
        description="User registration/login with bearer tokens and Player CRUD",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.ctx = create_context(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(player.router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    return app
