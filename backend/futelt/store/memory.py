"""
Futelt Backend — In-Memory Message Store
==========================================

What:  MessageStore kept in process memory: a list of messages and the last
       id handed out.
How:   append() and list_all() take a threading.Lock around every access to
       the list and the counter.
Who:   Selected by create_store() when STORE_BACKEND=memory (the default).
When:  Development, tests, and deployments that accept losing messages on
       restart.

Why a threading.Lock (not asyncio.Lock): neither method awaits while holding
it, so on the event loop it is never contended; it also keeps the store
correct when called from worker threads (run_in_executor, sync tests).

Id assignment:
    id = last assigned id + 1, published only after the message is stored.
    The counter, never len(messages), is the id source, so ids stay unique
    even if a record could ever be removed.
"""

import logging
import threading
from typing import List

from futelt.schemas.message import MessageItem
from futelt.store.base import check_text

logger = logging.getLogger(__name__)


class InMemoryMessageStore:
    """
    Keeps messages in process memory; everything is lost on restart.

    Thread Safety:
        Safe to share between the event loop and worker threads. Each
        append reads the counter, stores the message and advances the
        counter under one lock acquisition.
    """

    def __init__(self):
        self._messages: List[MessageItem] = []
        self._last_id = 0
        self._lock = threading.Lock()

    async def open(self) -> None:
        logger.info("Using in-memory message store (messages are lost on restart)")

    async def close(self) -> None:
        pass

    async def append(self, text: str) -> int:
        # Validate before locking: a rejected message must not consume an id
        check_text(text)
        with self._lock:
            message_id = self._last_id + 1
            self._messages.append(MessageItem(id=message_id, text=text))
            self._last_id = message_id
        logger.debug("Message %d appended (%d chars)", message_id, len(text))
        return message_id

    async def list_all(self) -> List[MessageItem]:
        # Copy under the lock; reverse outside it (insertion order is id order)
        with self._lock:
            snapshot = list(self._messages)
        snapshot.reverse()
        return snapshot
