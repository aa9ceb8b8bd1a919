# nftmarket/meta/core/enrichment/orchestrator.py
"""
Batch metadata enrichment.

Each listing is resolved independently and concurrently::

    cache -> (tokenURI || name()) -> fetch document -> fallback -> cache

Failures are caught per item and turned into placeholder metadata, so the
batch always comes back complete and in input order.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Sequence

from nftmarket.meta.contracts.chain import ChainReader
from nftmarket.meta.contracts.listing import EnrichedListing, Listing, cache_key
from nftmarket.meta.contracts.metadata import Metadata
from nftmarket.meta.core.enrichment.fallback import (
    DEFAULT_PLACEHOLDER_BASE,
    error_fallback_metadata,
    fallback_metadata,
    truncate_address,
)
from nftmarket.meta.core.errors import MetadataError
from nftmarket.meta.core.metadata.cache import MetadataCache
from nftmarket.meta.core.metadata.fetcher import MetadataFetcher

logger = logging.getLogger(__name__)


class MetadataEnricher:
    """Resolves listings to metadata with caching and per-item isolation."""

    def __init__(
        self,
        *,
        chain_reader: ChainReader,
        fetcher: MetadataFetcher,
        cache: MetadataCache,
        placeholder_base: str = DEFAULT_PLACEHOLDER_BASE,
        max_concurrent: int | None = None,
    ) -> None:
        self._chain = chain_reader
        self._fetcher = fetcher
        self._cache = cache
        self._placeholder_base = placeholder_base
        self._semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent else None

    @property
    def cache(self) -> MetadataCache:
        return self._cache

    async def enrich(self, listings: Sequence[Listing]) -> list[EnrichedListing]:
        """Enrich a batch. Same length and order as ``listings``; never raises."""
        if not listings:
            return []

        logger.debug("Enriching batch of %d listing(s)", len(listings))
        results = await asyncio.gather(*(self._enrich_bounded(l) for l in listings))
        return list(results)

    async def enrich_one(self, listing: Listing) -> EnrichedListing:
        metadata, collection_name = await self.resolve(listing.nft_contract, listing.token_id)
        return EnrichedListing(
            listing=listing,
            metadata=metadata,
            collection_name=collection_name,
        )

    async def resolve(self, contract: str, token_id: int) -> tuple[Metadata, str | None]:
        """Resolve one token. ``collection_name`` is ``None`` on a cache hit."""
        key = cache_key(contract, token_id)

        cached = await self._lookup(key)
        if cached is not None:
            return cached, None

        try:
            metadata, collection_name = await self._resolve_uncached(contract, token_id)
        except Exception:
            logger.exception(
                "Error resolving metadata contract=%s token_id=%s", contract, token_id
            )
            metadata = error_fallback_metadata(token_id, self._placeholder_base)
            collection_name = truncate_address(contract)

        return await self._store(key, metadata), collection_name

    # -- internals ----------------------------------------------------------------

    async def _enrich_bounded(self, listing: Listing) -> EnrichedListing:
        guard = self._semaphore if self._semaphore is not None else contextlib.nullcontext()
        async with guard:
            return await self.enrich_one(listing)

    async def _resolve_uncached(self, contract: str, token_id: int) -> tuple[Metadata, str]:
        # an unexpected failure in either read cancels the other
        async with asyncio.TaskGroup() as tg:
            locator_task = tg.create_task(self._read_locator(contract, token_id))
            name_task = tg.create_task(self._read_collection_name(contract))
        locator, collection_name = locator_task.result(), name_task.result()

        if locator:
            result = await self._fetcher.fetch(locator)
            if isinstance(result, Metadata):
                return result, collection_name
            logger.info(
                "Using fallback metadata contract=%s token_id=%s reason=%s",
                contract,
                token_id,
                result.kind,
            )
        else:
            logger.info(
                "No token locator, using fallback metadata contract=%s token_id=%s",
                contract,
                token_id,
            )

        return fallback_metadata(token_id, collection_name, self._placeholder_base), collection_name

    async def _read_locator(self, contract: str, token_id: int) -> str | None:
        try:
            return await self._chain.read_token_locator(contract, token_id)
        except MetadataError as exc:
            logger.warning(
                "tokenURI read failed contract=%s token_id=%s: %s", contract, token_id, exc
            )
            return None

    async def _read_collection_name(self, contract: str) -> str:
        try:
            name = await self._chain.read_collection_name(contract)
        except MetadataError as exc:
            logger.warning("name() read failed contract=%s: %s", contract, exc)
            return truncate_address(contract)
        return name or truncate_address(contract)

    async def _lookup(self, key: str) -> Metadata | None:
        try:
            return await self._cache.get(key)
        except Exception:
            logger.exception("Cache lookup failed for %s, resolving uncached", key)
            return None

    async def _store(self, key: str, metadata: Metadata) -> Metadata:
        try:
            return await self._cache.put(key, metadata)
        except Exception:
            logger.exception("Failed to cache metadata for %s", key)
            return metadata


class LatestBatchEnricher:
    """Runs one enrichment batch at a time; a newer batch supersedes older ones.

    The superseded batch is cancelled and its ``submit`` returns ``None``.
    Cache writes it already made are kept.

    Use it where the input changes while a batch is in flight (e.g. a client
    paging through listings). ``MarketplaceService.browse`` serves independent
    requests and calls :meth:`MetadataEnricher.enrich` directly.
    """

    def __init__(self, enricher: MetadataEnricher) -> None:
        self._enricher = enricher
        self._current: asyncio.Task[list[EnrichedListing]] | None = None

    async def submit(self, listings: Sequence[Listing]) -> list[EnrichedListing] | None:
        previous = self._current
        if previous is not None and not previous.done():
            logger.debug("Cancelling superseded enrichment batch")
            previous.cancel()

        task = asyncio.create_task(self._enricher.enrich(list(listings)))
        self._current = task

        try:
            result = await task
        except asyncio.CancelledError:
            caller = asyncio.current_task()
            if self._current is not task and not (caller and caller.cancelling()):
                return None
            raise
        finally:
            if self._current is task and task.done():
                self._current = None

        if self._current is not None and self._current is not task:
            return None
        return result
