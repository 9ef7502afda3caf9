"""Liveness probe."""

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "ok",
        "message": "Meduhub API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
