"""
Wire components FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from backend.config import settings
from backend.routes import livewire as livewire_routes
from backend.routes import pages as pages_routes

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Wire components",
    docs_url=None,
    redoc_url=None,
)

# Register routes
app.include_router(livewire_routes.router)
app.include_router(pages_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
