"""
Futelt Backend — Message Store Contract
=========================================

What:  The capability set every message store provides.
How:   A typing.Protocol. Implementations do not inherit from it; any object
       with these coroutine methods can back the HTTP layer.

Contract:
    append(text)  → new id, exactly previous maximum + 1 (first id is 1).
                    Empty text raises ValidationError; a failed write raises
                    PersistenceError without consuming an id.
    list_all()    → every message, id descending, as one consistent snapshot
                    that includes all appends that returned before the call.
    open()/close() → acquire and release backing resources.

Appends are serialized with respect to id assignment. Reads may overlap
each other and never see a partially written message.
"""

from typing import List, Protocol, runtime_checkable

from futelt.exceptions import ValidationError
from futelt.schemas.message import MessageItem


@runtime_checkable
class MessageStore(Protocol):
    """Persistence contract for journal messages."""

    async def open(self) -> None:
        """Provision the backing store. Raises PersistenceError on failure."""
        ...

    async def append(self, text: str) -> int:
        """Persist a new message and return its assigned id."""
        ...

    async def list_all(self) -> List[MessageItem]:
        """Return all messages, newest first."""
        ...

    async def close(self) -> None:
        """Release connections or other held resources."""
        ...


def check_text(text: str) -> None:
    """Reject empty message text. Whitespace is kept and stored verbatim."""
    if not text:
        raise ValidationError(message="Message text must not be empty", field="text")
