"""
Database Module
Async SQLAlchemy with SQLite (dev) / PostgreSQL (prod) support.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool, AsyncAdaptedQueuePool


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine with pooling suited to the backend.

    Pool settings:
    - PostgreSQL: QueuePool with a small base size
    - SQLite: NullPool (a fresh connection per operation)
    """
    if "sqlite" in database_url:
        pool_config = {
            "poolclass": NullPool,
            "connect_args": {"check_same_thread": False},
        }
    else:
        pool_config = {
            "poolclass": AsyncAdaptedQueuePool,
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 1800,
            "pool_pre_ping": True,
        }
    return create_async_engine(database_url, echo=echo, **pool_config)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the given engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def session_scope(factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """
    One session per logical operation.

    Commits on success, rolls back on any exception, and always closes.

    Usage:
        async with session_scope(factory) as session:
            row = await session.get(ComplaintRow, complaint_id)
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
