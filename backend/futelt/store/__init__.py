"""
Futelt Backend — Message Stores
=================================

What:  Interchangeable persistence backends behind the MessageStore protocol.

Store Inventory:
    - InMemoryMessageStore: list + counter behind a lock (STORE_BACKEND=memory)
    - SqlMessageStore:      `messages` table via async SQLAlchemy (STORE_BACKEND=database)

create_store() picks one from configuration. The application factory calls
it once and hands the instance to the handlers; there is no global store.
"""

from futelt.config import Settings
from futelt.database import build_engine
from futelt.store.base import MessageStore
from futelt.store.memory import InMemoryMessageStore
from futelt.store.sql import SqlMessageStore

__all__ = [
    "MessageStore",
    "InMemoryMessageStore",
    "SqlMessageStore",
    "create_store",
]


def create_store(settings: Settings) -> MessageStore:
    """Build the store selected by `settings.store_backend`."""
    if settings.store_backend == "database":
        return SqlMessageStore(build_engine(settings))
    return InMemoryMessageStore()
