import math
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from structlog import get_logger

from marketplace.models.base import Base
from marketplace.models import activity_log, image, listing, saved_search  # noqa: F401  registers tables

logger = get_logger()

_engine: AsyncEngine | None = None
_SessionLocal: async_sessionmaker[AsyncSession] | None = None


def _null_safe(fn):
    def wrapper(value):
        return None if value is None else fn(value)
    return wrapper


def _register_sqlite_math(dbapi_connection, connection_record):
    # Postgres ships these; the radius predicate needs them on SQLite too
    dbapi_connection.create_function("radians", 1, _null_safe(math.radians))
    dbapi_connection.create_function("sin", 1, _null_safe(math.sin))
    dbapi_connection.create_function("cos", 1, _null_safe(math.cos))
    dbapi_connection.create_function("asin", 1, _null_safe(lambda x: math.asin(min(1.0, max(-1.0, x)))))
    dbapi_connection.create_function("sqrt", 1, _null_safe(lambda x: math.sqrt(max(0.0, x))))
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine(database_url: str, **engine_kwargs) -> AsyncEngine:
    global _engine, _SessionLocal
    if _engine is None:
        _engine = create_async_engine(database_url, echo=False, **engine_kwargs)
        if _engine.dialect.name == "sqlite":
            event.listen(_engine.sync_engine, "connect", _register_sqlite_math)
        _SessionLocal = async_sessionmaker(_engine, expire_on_commit=False)
        logger.info("Database engine initialized", dialect=_engine.dialect.name)
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    if _SessionLocal is None:
        raise RuntimeError("Database engine not initialized")
    return _SessionLocal


async def init_db() -> None:
    if _engine is None:
        raise RuntimeError("Database engine not initialized")
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global _engine, _SessionLocal
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _SessionLocal = None


async def get_session() -> AsyncIterator[AsyncSession]:
    async with get_sessionmaker()() as session:
        yield session
