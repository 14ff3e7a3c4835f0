"""
Futelt Backend — Exception Hierarchy
======================================

What:  Application exceptions raised by the store and mapped to HTTP
       responses by the handlers registered in main.py.
How:   Each exception carries a client-safe message and a context dict.
       The context is logged server-side and never returned to the client.

Exception Hierarchy:
    FuteltError (base)
    ├── ValidationError   → 400 Bad Request
    └── PersistenceError  → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class FuteltError(Exception):
    """
    Base exception for all Futelt application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FuteltError):
    """
    Raised when client input cannot be accepted.

    When:  Empty message text. Malformed JSON bodies are reported by FastAPI
           as RequestValidationError and rendered in the same 400 shape.
    HTTP:  400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class PersistenceError(FuteltError):
    """
    Raised when the backing store cannot record or read messages.

    When:  Database unreachable, disk full, constraint violation, pool timeout,
           or the store cannot be opened at startup.
    HTTP:  500 Internal Server Error

    The response message is always generic; the driver error type is kept in
    `context` for the server log only.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
