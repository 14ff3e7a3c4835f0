"""
Futelt Backend — Database Engine
==================================

What:  Declarative base for ORM models and the async engine factory used by
       the durable message store.
How:   build_engine() turns Settings into an AsyncEngine with a connection
       pool. The engine is owned by SqlMessageStore, which disposes it on
       shutdown; nothing here creates a module-level engine.

Connection Pooling:
    PostgreSQL (asyncpg): pool_size + max_overflow connections, pre-ping,
                          recycled hourly.
    SQLite (aiosqlite):   SQLAlchemy's default pool for the file; server pool
                          sizing does not apply.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from futelt.config import Settings


class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata is what Alembic tracks."""
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine described by `settings.database_url`.

    No connection is opened here; the first one is made when the store is
    opened, so an unreachable database surfaces as a PersistenceError there.
    """
    url = make_url(settings.database_url)
    options = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.log_level == "DEBUG",
    }
    if url.get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(url, **options)
