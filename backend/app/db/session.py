"""
Async engine, session factory and transaction helpers.

Sessions are request-scoped (`get_db`). Nothing commits implicitly: services
wrap their writes in `atomic(session)`, which commits on success and rolls
back on any exception, including cancellation of the request task.

Every database await goes through `run_with_timeout`, bounded by the
operation timeout stored in `session.info` by the session factory.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, TypeVar

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import Settings
from app.core.errors import InfrastructureError, PersistenceTimeout
from app.core.logging import get_logger
from app.core.metrics import record_db_timeout

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_OPERATION_TIMEOUT = 3.0
TIMEOUT_INFO_KEY = "operation_timeout"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    if settings.is_sqlite:
        engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


def create_sessionmaker(
    engine: AsyncEngine,
    operation_timeout: float = DEFAULT_OPERATION_TIMEOUT,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        info={TIMEOUT_INFO_KEY: operation_timeout},
    )


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Request-scoped session. Uncommitted work is rolled back on close."""
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.sessionmaker
    async with session_factory() as session:
        yield session


def operation_timeout(session: AsyncSession) -> float:
    return session.info.get(TIMEOUT_INFO_KEY, DEFAULT_OPERATION_TIMEOUT)


async def run_with_timeout(session: AsyncSession, awaitable: Awaitable[T], operation: str) -> T:
    """
    Await a database call with the session's operation timeout.

    IntegrityError is re-raised unchanged so callers can map constraint
    violations; any other SQLAlchemy failure becomes InfrastructureError.
    """
    timeout = operation_timeout(session)
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        record_db_timeout()
        logger.error("db_operation_timeout", operation=operation, timeout_s=timeout)
        raise PersistenceTimeout() from e
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        logger.error("db_operation_failed", operation=operation, error=str(e))
        raise InfrastructureError("Database operation failed") from e


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit the enclosed work as one transaction or roll all of it back."""
    try:
        yield session
        await run_with_timeout(session, session.commit(), "commit")
    except BaseException:
        await session.rollback()
        raise
