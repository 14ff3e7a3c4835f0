"""
Futelt Backend — Health Check Route
=====================================

What:  Liveness probe for Docker and load balancers.
How:   Always answers `ok`. It does not touch the message store, so it stays
       cheap and reports process liveness only.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_class=PlainTextResponse,
    summary="Service liveness check",
)
async def health_check() -> PlainTextResponse:
    return PlainTextResponse("ok")
