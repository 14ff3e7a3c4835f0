"""
Futelt Backend — Pydantic Request/Response Schemas
====================================================

What:  The JSON contract of the HTTP API, and the immutable message value
       returned by every store implementation.
How:   FastAPI validates request bodies against these models, serializes
       responses through them and builds the OpenAPI document from them.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Domain value
# ══════════════════════════════════════════════════════════════════════════


class MessageItem(BaseModel):
    """
    A stored message: id assigned by the store, text exactly as submitted.

    Frozen so a snapshot returned by list_all() cannot be changed by its
    reader. from_attributes lets the SQL store build it from ORM rows.
    """
    id: int = Field(description="Store-assigned identifier, increasing with creation order")
    text: str = Field(description="Message body as submitted")

    model_config = {"from_attributes": True, "frozen": True}


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateMessageRequest(BaseModel):
    """Body of POST /messages. Emptiness is checked by the store."""
    text: str = Field(description="Message body; must not be empty")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CreateMessageResponse(BaseModel):
    """Returned by POST /messages with HTTP 201."""
    id: int = Field(description="Identifier assigned to the new message")


class MessageListResponse(BaseModel):
    """Returned by GET /messages: every message, newest first."""
    items: List[MessageItem] = Field(description="All messages ordered by id descending")


class ErrorResponse(BaseModel):
    """
    Error body shared by all endpoints.

    Example:
        {
            "error": "validation_error",
            "message": "Message text must not be empty",
            "details": {"field": "text"},
            "request_id": "1f0c2a9e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
