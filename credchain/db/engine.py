"""Async SQLAlchemy engine and session factory.

When DATABASE_URL is set (postgresql+asyncpg://...), the registry is
backed by PostgreSQL.  When it is not, `engine` and
`async_session_factory` are None and the app uses the in-memory registry.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from credchain.core.config import SETTINGS

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all table models."""


if SETTINGS.database_url:
    engine = create_async_engine(
        SETTINGS.database_url,
        echo=SETTINGS.is_dev,
        pool_size=5,
        max_overflow=10,
    )
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
else:
    engine = None
    async_session_factory = None


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Unit of work: commit on success, roll back on exception."""
    if async_session_factory is None:
        raise RuntimeError(
            "DATABASE_URL is not configured; cannot create database session"
        )
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def ping_database() -> bool:
    if engine is None:
        return False
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database ping failed")
        return False
    return True


@asynccontextmanager
async def lifespan_db():
    if engine is None:
        logger.info("No DATABASE_URL configured, using in-memory credential registry")
        yield
        return

    logger.info("Database engine created: %s", engine.url)
    yield
    await engine.dispose()
    logger.info("Database engine disposed")
