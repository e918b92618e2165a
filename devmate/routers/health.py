import time

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Liveness probe"""
    return {"ok": True, "ts": int(time.time() * 1000)}
