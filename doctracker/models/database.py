"""Database engine, session factory, and lifecycle helpers.

The engine and session factory live on ``app.state`` so each application
instance (and each test) owns its own pool:
- ``init_db()``  → called from the FastAPI lifespan before serving traffic
- ``close_db()`` → called from the lifespan on shutdown
- ``get_db()`` / ``get_engine()`` → request dependencies (handlers commit writes)
"""

from __future__ import annotations

import logging
import ssl
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import FastAPI, Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from doctracker.config import Settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
#  Declarative Base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    """SQLAlchemy 2.0 declarative base for all ORM models."""


# ---------------------------------------------------------------------------
#  Engine
# ---------------------------------------------------------------------------

def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine described by ``settings``.

    Postgres connections go through asyncpg with a pooled set of
    connections and, unless ``database_ssl`` is off, TLS with full
    certificate and hostname validation.
    """
    url = make_url(settings.database_url)
    kwargs: dict[str, Any] = {"echo": False, "pool_pre_ping": True}

    if settings.is_postgres:
        # asyncpg takes an SSLContext, not libpq's sslmode.
        url = url.difference_update_query(["sslmode"])
        kwargs.update(pool_size=10, max_overflow=20)
        if settings.database_ssl:
            kwargs["connect_args"] = {"ssl": ssl.create_default_context()}

    return create_async_engine(url, **kwargs)


async def create_tables(engine: AsyncEngine) -> None:
    """Create the tracker tables if they do not exist yet."""
    # Registers the models on Base.metadata.
    from doctracker.models import docs  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Database tables ready")


async def init_db(app: FastAPI, settings: Settings) -> None:
    """Create the engine and session factory, then ensure the schema exists.

    Any failure propagates so the application refuses to start against an
    unknown schema.
    """
    engine = build_engine(settings)
    try:
        await create_tables(engine)
    except Exception:
        await engine.dispose()
        raise

    app.state.engine = engine
    app.state.sessionmaker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    logger.info("Async database engine initialized")


async def close_db(app: FastAPI) -> None:
    """Dispose the async engine.  Called during FastAPI lifespan shutdown."""
    engine: AsyncEngine | None = getattr(app.state, "engine", None)
    if engine is not None:
        await engine.dispose()
        app.state.engine = None
        logger.info("Async database engine disposed")


# ---------------------------------------------------------------------------
#  Request dependencies
# ---------------------------------------------------------------------------

def get_engine(request: Request) -> AsyncEngine:
    """FastAPI dependency returning the application's engine."""
    engine: AsyncEngine | None = getattr(request.app.state, "engine", None)
    if engine is None:
        raise RuntimeError("Database not initialized; call init_db() first")
    return engine


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async DB session, rolled back on error.

    Write handlers commit before returning: the exit code of a yield
    dependency runs after the response has been sent.
    """
    factory: async_sessionmaker[AsyncSession] | None = getattr(
        request.app.state, "sessionmaker", None
    )
    if factory is None:
        raise RuntimeError("Database not initialized; call init_db() first")

    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
