"""
Futelt Backend — Client Page Route
====================================

What:  Serves the bundled single-page client at `/`.
How:   FileResponse streams futelt/static/index.html from disk.
Who:   Browsers opening the service root; the page itself calls /messages.
When:  Once per page load.

Why FileResponse: the file is read by Starlette off the event loop, so the
handler never blocks other requests on disk I/O.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

router = APIRouter(tags=["Client"])

# Resolved once at import; ships as package data (see pyproject.toml)
INDEX_PATH = Path(__file__).resolve().parent.parent / "static" / "index.html"


@router.get("/", response_class=FileResponse, include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(
        path=INDEX_PATH,
        media_type="text/html",
        # The page can change between releases; let the browser revalidate
        headers={"Cache-Control": "no-cache"},
    )
