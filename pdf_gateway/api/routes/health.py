"""
Health Routes
=============

FastAPI routes for health check endpoints.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Health"])


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> str:
    """Liveness check. Never touches the browser."""
    return "ok"
