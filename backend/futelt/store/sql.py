"""
Futelt Backend — SQL Message Store
====================================

What:  Durable message store over the `messages` table.
How:   Async SQLAlchemy sessions from a pooled engine (aiosqlite or asyncpg).
       The database assigns ids through the integer primary key.

Write path (append):
    acquire write lock → BEGIN → INSERT → flush (id assigned) → COMMIT → release
    Any driver failure rolls the transaction back and surfaces as
    PersistenceError. The write lock keeps a single insert in flight per
    process, which also avoids SQLite "database is locked" contention.

Read path (list_all):
    One SELECT ... ORDER BY id DESC per call, no write lock. Concurrent reads
    each see the committed state at the time their statement runs.

Id gaps:
    SQLite reuses the id of a rolled-back insert. Sequence-backed databases
    (PostgreSQL) consume the sequence value even on rollback, so a failed
    append there can leave a gap.
"""

import asyncio
import logging
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from futelt.database import Base
from futelt.exceptions import PersistenceError
from futelt.models.message import Message
from futelt.schemas.message import MessageItem
from futelt.store.base import check_text

logger = logging.getLogger(__name__)

# Raw OSError covers drivers that raise socket errors before SQLAlchemy wraps them.
STORAGE_ERRORS = (SQLAlchemyError, OSError)


class SqlMessageStore:
    """
    Message store backed by a relational table.

    Owns its engine: open() creates the table when missing and close()
    disposes the connection pool.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        # expire_on_commit=False keeps row attributes readable after commit
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._write_lock = asyncio.Lock()

    async def open(self) -> None:
        """Create the `messages` table if it does not exist yet."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except STORAGE_ERRORS as e:
            logger.error("Could not open message store at %s: %s", self._engine.url, e)
            raise PersistenceError(
                message="The message store could not be opened.",
                context={"error_type": type(e).__name__},
            ) from e
        logger.info("Message store ready (%s)", self._engine.url)

    async def close(self) -> None:
        await self._engine.dispose()

    async def append(self, text: str) -> int:
        check_text(text)
        async with self._write_lock:
            try:
                async with self._session_factory() as session:
                    async with session.begin():
                        message = Message(text=text)
                        session.add(message)
                        await session.flush()
                        message_id = message.id
            except STORAGE_ERRORS as e:
                logger.error("Failed to append message: %s", e, exc_info=True)
                raise PersistenceError(
                    message="Could not save the message. Please try again.",
                    context={"error_type": type(e).__name__},
                ) from e
        logger.info("Message %d appended (%d chars)", message_id, len(text))
        return message_id

    async def list_all(self) -> List[MessageItem]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Message).order_by(desc(Message.id))
                )
                rows = result.scalars().all()
        except STORAGE_ERRORS as e:
            logger.error("Failed to list messages: %s", e, exc_info=True)
            raise PersistenceError(
                message="Could not retrieve messages. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
        return [MessageItem.model_validate(row) for row in rows]
