# nftmarket/meta/api/dependencies.py
"""
FastAPI dependencies resolving services from ``app.state.infra``.
"""
from __future__ import annotations

from fastapi import HTTPException, Request

from nftmarket.meta.contracts.infrastructure import Infrastructure
from nftmarket.meta.core.service import MarketplaceService


def get_infra(request: Request) -> Infrastructure:
    infra = getattr(request.app.state, "infra", None)
    if infra is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return infra


def get_marketplace_service(request: Request) -> MarketplaceService:
    return get_infra(request).service
