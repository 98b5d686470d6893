from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import MetaData, event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from resort_deals.config import settings

# Deterministic constraint names, so migrations can reference and drop them
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base for every model; Alembic reads ``Base.metadata``."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def engine_options(database_url: str) -> dict[str, Any]:
    """Build create_async_engine kwargs for the given URL.

    SQLite uses a single-connection pool, so the pooling and asyncpg options
    only apply to server databases.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"echo": settings.db_echo}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.db_echo,
        # Passed through to asyncpg.connect()
        "connect_args": {"command_timeout": settings.db_statement_timeout},
    }


def enable_sqlite_savepoints(async_engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINT works on the sqlite3 driver.

    The driver otherwise opens transactions lazily on its own and
    ``begin_nested()`` can't roll back to a savepoint.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection: Any, _record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))
if engine.dialect.name == "sqlite":
    enable_sqlite_savepoints(engine)

# Objects stay loaded after commit; an expired attribute would need sync I/O to reload.
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session dependency.

    The transaction is committed when the endpoint returns and rolled back if
    it raises. Services and repositories only flush.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def shutdown() -> None:
    """Close all pooled database connections on application shutdown."""
    await engine.dispose()
