"""Health check router."""

from datetime import datetime
from fastapi import APIRouter

from .. import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "crypto-insight",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat(),
    }
