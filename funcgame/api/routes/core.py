from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["core"])


@router.get("/")
async def root():
    """Liveness check; does not touch the store."""
    return {"status": "ok"}
