# nftmarket/meta/main.py
"""
Metadata enrichment service application factory.

Wires the JSON-RPC chain reader, metadata fetcher, resolve-once cache and
enrichment orchestrator behind a small FastAPI surface.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from nftmarket.meta.api.discovery import router as discovery_router
from nftmarket.meta.api.listings import router as listings_router
from nftmarket.meta.contracts.infrastructure import Infrastructure
from nftmarket.meta.core.chain.rpc import JsonRpcChainReader
from nftmarket.meta.core.config import Settings, settings
from nftmarket.meta.core.enrichment.orchestrator import MetadataEnricher
from nftmarket.meta.core.logging import configure_logging
from nftmarket.meta.core.metadata.cache import get_metadata_cache
from nftmarket.meta.core.metadata.fetcher import MetadataFetcher
from nftmarket.meta.core.service import MarketplaceService

logger = logging.getLogger(__name__)


def build_infrastructure(cfg: Settings) -> Infrastructure:
    """Create the live collaborators for ``cfg``. Clients are closed on shutdown."""
    rpc_http = httpx.AsyncClient(timeout=cfg.rpc_timeout)
    documents_http = httpx.AsyncClient(timeout=cfg.http_timeout)

    chain = JsonRpcChainReader(
        rpc_url=cfg.rpc_url,
        marketplace_address=cfg.marketplace_address,
        timeout=cfg.rpc_timeout,
        client=rpc_http,
    )
    fetcher = MetadataFetcher(
        gateway=cfg.ipfs_gateway,
        timeout=cfg.http_timeout,
        client=documents_http,
    )
    cache = get_metadata_cache("memory")
    enricher = MetadataEnricher(
        chain_reader=chain,
        fetcher=fetcher,
        cache=cache,
        placeholder_base=cfg.placeholder_image_base,
        max_concurrent=cfg.max_concurrent,
    )
    service = MarketplaceService(
        listing_source=chain,
        enricher=enricher,
        page_size=cfg.page_size,
        listing_window=cfg.listing_window,
    )
    return Infrastructure(
        cache=cache,
        chain_reader=chain,
        listing_source=chain,
        enricher=enricher,
        service=service,
        http_clients=[rpc_http, documents_http],
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    infra: Infrastructure = app.state.infra
    logger.info("Metadata service started (chain_id=%s)", settings.chain_id)

    yield

    logger.info("Shutting down (cached_entries=%d)", len(infra.cache))
    await infra.aclose()


def create_app(infra: Infrastructure | None = None) -> FastAPI:
    """Build and wire the FastAPI application."""
    configure_logging(settings.log_level, json=settings.log_json)
    logger.info("Creating metadata service (env=%s)", settings.app_env)

    if infra is None:
        infra = build_infrastructure(settings)

    app = FastAPI(
        title="NFT Marketplace Metadata",
        version="1.0.0",
        description="Listing metadata enrichment and caching",
        lifespan=lifespan,
    )
    app.state.infra = infra

    app.include_router(discovery_router)
    app.include_router(listings_router)

    return app
