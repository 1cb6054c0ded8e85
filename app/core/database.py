"""
Database connection and session management
Uses SQLAlchemy async engine (asyncpg for PostgreSQL, aiosqlite for local runs)
Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.core.config import settings

# Validate DATABASE_URL is set
if not settings.DATABASE_URL:
    raise ValueError(
        "DATABASE_URL environment variable is not set. "
        "Please set it in your .env file or environment variables."
    )


def _connect_args(url: str) -> dict:
    """asyncpg-specific connection arguments; other drivers get none"""
    if url.startswith("postgresql+asyncpg://"):
        # Reference: https://magicstack.github.io/asyncpg/current/api/index.html#connection
        return {
            "command_timeout": 60,
            "server_settings": {
                "application_name": "eyewear_marketplace",
            },
        }
    return {}


# Create async engine
# NullPool: each request gets a fresh connection
# Reference: https://docs.sqlalchemy.org/en/20/core/pooling.html#switching-pool-implementations
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,  # Set to True for SQL query logging (useful for debugging)
    poolclass=NullPool,
    connect_args=_connect_args(settings.DATABASE_URL),
)


# Create async session factory
# Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html#session-basics
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Keep objects accessible after commit
    autoflush=False,
)

# Update operations run one at a time so the read-modify-write of a store's
# item list never interleaves with another update
update_lock = asyncio.Lock()


# Base class for all database models
# Reference: https://docs.sqlalchemy.org/en/20/orm/declarative_styles.html
class Base(DeclarativeBase):
    """Base class for SQLAlchemy declarative models"""
    pass


def get_session_maker() -> async_sessionmaker:
    """
    Dependency returning the session factory.
    Tests override this to point the application at a throwaway database.
    """
    return async_session_maker


@asynccontextmanager
async def session_scope(session_maker: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    """
    One transaction per operation: commit on success, roll back on any error.
    Both durable maps share the session, so multi-map writes commit together.
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# Dependency to get database session for query operations
# Reference: https://fastapi.tiangolo.com/tutorial/dependencies/
async def get_db(
    session_maker: async_sessionmaker = Depends(get_session_maker),
) -> AsyncIterator[AsyncSession]:
    """
    Dependency function that provides a database session
    Automatically commits, rolls back and closes the session around the request
    """
    async with session_scope(session_maker) as session:
        yield session


# Dependency to get database session for update operations
async def get_update_db(
    session_maker: async_sessionmaker = Depends(get_session_maker),
) -> AsyncIterator[AsyncSession]:
    """
    Same as get_db, but holds the process-wide update lock until the
    transaction is committed or rolled back
    """
    async with update_lock:
        async with session_scope(session_maker) as session:
            yield session
