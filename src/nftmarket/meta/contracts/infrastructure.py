# nftmarket/meta/contracts/infrastructure.py
from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from nftmarket.meta.contracts.chain import ChainReader, ListingSource
from nftmarket.meta.core.enrichment.orchestrator import MetadataEnricher
from nftmarket.meta.core.metadata.cache import MetadataCache
from nftmarket.meta.core.service import MarketplaceService


@dataclass
class Infrastructure:

    cache: MetadataCache
    chain_reader: ChainReader
    listing_source: ListingSource
    enricher: MetadataEnricher
    service: MarketplaceService

    # owned HTTP clients, closed on shutdown
    http_clients: list[httpx.AsyncClient] = field(default_factory=list)

    async def aclose(self) -> None:
        for client in self.http_clients:
            await client.aclose()
        self.http_clients.clear()
