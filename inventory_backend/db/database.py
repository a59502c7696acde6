import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from inventory_backend.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def make_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.database_url, echo=settings.database_echo)


def make_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_db_and_tables(engine: AsyncEngine):
    # Register the models on Base.metadata before create_all
    from inventory_backend.db import inventory_log, product  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized at %s", engine.url.render_as_string(hide_password=True))


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Per-request session from the factory the app was built with."""
    async with request.app.state.session_maker() as session:
        yield session
