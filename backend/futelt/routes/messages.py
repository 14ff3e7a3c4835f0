"""
Futelt Backend — Message Route Handlers
=========================================

What:  POST /messages (append) and GET /messages (list, newest first).
How:   Pydantic parses the body, the shared MessageStore does the work, and
       the response models serialize the result. Store errors propagate to
       the global exception handlers in main.py.
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from futelt.schemas.message import (
    CreateMessageRequest,
    CreateMessageResponse,
    ErrorResponse,
    MessageListResponse,
)
from futelt.store import MessageStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Messages"])


def get_store(request: Request) -> MessageStore:
    """FastAPI dependency: the store built by create_app() for this application."""
    return request.app.state.store


@router.post(
    "/messages",
    response_model=CreateMessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Malformed body or empty text", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Append a message",
)
async def create_message(
    body: CreateMessageRequest,
    store: MessageStore = Depends(get_store),
) -> CreateMessageResponse:
    message_id = await store.append(body.text)
    return CreateMessageResponse(id=message_id)


@router.get(
    "/messages",
    response_model=MessageListResponse,
    responses={
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="List all messages, newest first",
)
async def list_messages(
    store: MessageStore = Depends(get_store),
) -> MessageListResponse:
    items = await store.list_all()
    return MessageListResponse(items=items)
