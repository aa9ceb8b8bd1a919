# nftmarket/meta/api/discovery.py
"""
Root-level health endpoint.
"""
from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict:
    infra = getattr(request.app.state, "infra", None)
    return {
        "status": "healthy",
        "cached": len(infra.cache) if infra else 0,
    }
