# nftmarket/meta/core/service.py
"""
MarketplaceService: single entry-point for the presentation layer.

Reads a window of active listings, enriches it, and applies the pure
query pipeline (filter -> sort -> paginate).
"""
from __future__ import annotations

import logging

from nftmarket.meta.contracts.chain import ListingSource
from nftmarket.meta.contracts.listing import cache_key
from nftmarket.meta.contracts.metadata import Metadata
from nftmarket.meta.core.enrichment.orchestrator import MetadataEnricher
from nftmarket.meta.core.query import (
    ALL_COLLECTIONS,
    PAGE_SIZE,
    ListingPage,
    SortKey,
    query_page,
)

logger = logging.getLogger(__name__)


class MarketplaceService:
    """Facade over listing source, enrichment and query engine."""

    def __init__(
        self,
        *,
        listing_source: ListingSource,
        enricher: MetadataEnricher,
        page_size: int = PAGE_SIZE,
        listing_window: int = 100,
    ) -> None:
        self._source = listing_source
        self._enricher = enricher
        self._page_size = page_size
        self._listing_window = listing_window

    @property
    def enricher(self) -> MetadataEnricher:
        return self._enricher

    async def browse(
        self,
        *,
        page: int = 1,
        sort: str | SortKey = SortKey.RECENT,
        collection: str = ALL_COLLECTIONS,
        search: str = "",
        offset: int = 0,
        limit: int | None = None,
    ) -> ListingPage:
        """Return one display page.

        ``offset``/``limit`` select the upstream window of on-chain listings;
        ``page`` selects a page of the filtered, sorted window. Errors from the
        listing source propagate: without listings there is no batch to enrich.
        """
        window = limit if limit is not None else self._listing_window
        listings = await self._source.get_active_listings(offset, window)
        enriched = await self._enricher.enrich(listings)

        result = query_page(
            enriched,
            page=page,
            sort=sort,
            collection=collection,
            search=search,
            page_size=self._page_size,
        )
        logger.debug(
            "Browse page=%d sort=%s collection=%s search=%r -> %d/%d item(s)",
            page,
            SortKey.parse(sort).value,
            collection,
            search,
            len(result.items),
            result.total,
        )
        return result

    async def token_metadata(self, contract: str, token_id: int) -> tuple[Metadata, str | None]:
        """Resolve a single token through the shared cache."""
        logger.debug("Token metadata %s", cache_key(contract, token_id))
        return await self._enricher.resolve(contract, token_id)
