"""
Jotter Backend — Database Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   `Database` is built from a Settings object by create_app() and stored
       on `app.state.database`. The request dependency pulls it from there,
       so no module holds a global engine.
When:  Engine is created with the app; sessions are created per-request.

Transaction scope:
    One session per request. The dependency commits after the route
    returns and rolls back if anything raised, so a note insert and the
    owner's notes-list update either both land or neither does.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from jotter.config import Settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata)."""
    pass


class Database:
    """
    Owns the async engine and the session factory for one application.

    Pool sizing only applies to server databases. SQLite engines keep the
    driver's default pool, which rejects pool_size/max_overflow.
    """

    def __init__(self, settings: Settings):
        engine_kwargs = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)

        # expire_on_commit=False: ORM objects stay readable after the
        # dependency commits, while the response is being serialized
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create any missing tables. Existing tables are left untouched."""
        # Models must be imported so their tables register on Base.metadata
        from jotter.models import note, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        """Run SELECT 1; raises whatever the driver raises."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close every pooled connection. Called on application shutdown."""
        await self.engine.dispose()


# ── Request Dependencies ──────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(db: AsyncSession = Depends(get_db_session)):
            ...

    How it works:
        1. Opens a session from the application's factory
        2. Yields it to the route handler
        3. On success: commits every write the request made
        4. On error: rolls back, then re-raises for the exception handlers

    Why catch broad Exception: a failure after a flush (for example while
    building the response) must still discard the partial writes.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
