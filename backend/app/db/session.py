"""
Async database engine, session factory and transaction scoping.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.exceptions import DomainException, InternalException
from app.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine; pool sizing only applies to server databases."""
    if not url.startswith("sqlite"):
        kwargs.setdefault("pool_size", settings.DB_POOL_SIZE)
        kwargs.setdefault("max_overflow", settings.DB_MAX_OVERFLOW)
        kwargs.setdefault("pool_timeout", settings.DB_POOL_TIMEOUT)
        kwargs.setdefault("pool_recycle", settings.DB_POOL_RECYCLE)
        kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, echo=settings.DB_ECHO, **kwargs)


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_sessionmaker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session dependency.
    Commits whatever the handler left pending, rolls back on any error.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def atomic(db: AsyncSession, operation: str) -> AsyncIterator[AsyncSession]:
    """
    One all-or-nothing unit of work: commit on success, roll back on any
    error exit. Storage failures surface as InternalException; typed domain
    errors propagate unchanged.
    """
    try:
        yield db
        await db.commit()
    except DomainException:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("transaction_failed", operation=operation, error=str(e))
        raise InternalException(f"Could not complete {operation}. Please try again.") from e
    except BaseException:
        await db.rollback()
        raise
