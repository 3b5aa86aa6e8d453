"""Liveness endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter

from termwatch.database import ping_database

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("", response_model=dict, summary="API root")
async def api_root() -> dict:
    return {"status": "ok", "message": "API is working", "timestamp": _now()}


@router.get("/health", response_model=dict, summary="Health check")
async def health() -> dict:
    connected = await ping_database()
    return {
        "status": "ok",
        "timestamp": _now(),
        "mongodb": "connected" if connected else "disconnected",
    }
