"""Static asset serving with a catch-all that returns the single-page entry document."""
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, JSONResponse

router = APIRouter()

ENTRY_DOCUMENT = "index.html"


def _resolve_asset(static_dir: Path, path: str) -> Path | None:
    """Return the file for `path` inside static_dir, or None if absent or outside it."""
    if not path:
        return None
    root = static_dir.resolve()
    candidate = (root / path).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


@router.get("/{path:path}", include_in_schema=False)
async def serve_static(path: str, request: Request):
    """Serve a static asset if it exists, otherwise the entry document (reload support)."""
    static_dir: Path = request.app.state.settings.static_dir
    asset = _resolve_asset(static_dir, path)
    if asset is not None:
        return FileResponse(asset)
    entry = static_dir / ENTRY_DOCUMENT
    if not entry.is_file():
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return FileResponse(entry)
