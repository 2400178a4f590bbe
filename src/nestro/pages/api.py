"""JSON endpoints served alongside the pages."""

from __future__ import annotations

from nicegui import app
from starlette.responses import JSONResponse


@app.get("/api/auth")
async def auth_status(action: str | None = None) -> JSONResponse:
    """Health check for the auth layer: ``?action=status``."""
    if action == "status":
        return JSONResponse({"status": "ok"})
    return JSONResponse({"error": "Invalid action"}, status_code=400)
