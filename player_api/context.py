"""Application context - central container for shared dependencies."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from player_api.config import Settings
from player_api.db.database import create_engine, create_session_factory

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Container for application-wide dependencies.

    Initialize once at app startup via create_context().
    """

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session as a context manager (CLI and tests)."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        await self.engine.dispose()


def create_context(settings: Settings | None = None) -> AppContext:
    """Create and return a fully initialized application context."""
    if settings is None:
        from player_api.config import get_settings

        settings = get_settings()

    engine = create_engine(settings.DATABASE_URL)
    logger.debug("Database engine created: %s", engine.url.render_as_string(hide_password=True))

    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
    )


def get_context(request: Request) -> AppContext:
    """FastAPI dependency that returns the app context."""
    return request.app.state.ctx


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency that returns the settings the app was built with."""
    return request.app.state.ctx.settings
