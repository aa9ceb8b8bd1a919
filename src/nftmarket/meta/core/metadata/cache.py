# nftmarket/meta/core/metadata/cache.py
"""
Resolve-once metadata cache keyed by ``<contract>-<token id>``.

Both real and fallback metadata are stored permanently. A key is written at
most once: a later ``put`` for the same key keeps and returns the first
value, so concurrent resolutions of one token cannot disagree.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from nftmarket.meta.contracts.metadata import Metadata

logger = logging.getLogger(__name__)


class MetadataCache(ABC):

    @abstractmethod
    async def get(self, key: str) -> Metadata | None: ...

    @abstractmethod
    async def put(self, key: str, metadata: Metadata) -> Metadata:
        """Store ``metadata`` unless ``key`` exists; return the stored value."""

    @abstractmethod
    def __contains__(self, key: object) -> bool: ...

    @abstractmethod
    def __len__(self) -> int: ...


class MemoryMetadataCache(MetadataCache):
    def __init__(self) -> None:
        self._entries: dict[str, Metadata] = {}

    async def get(self, key: str) -> Metadata | None:
        return self._entries.get(key)

    async def put(self, key: str, metadata: Metadata) -> Metadata:
        existing = self._entries.setdefault(key, metadata)
        if existing is not metadata and existing != metadata:
            logger.debug("Cache key %s already resolved, keeping first value", key)
        return existing

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def get_metadata_cache(store_type: str = "memory") -> MetadataCache:
    if store_type == "memory":
        return MemoryMetadataCache()
    raise ValueError(f"metadata cache {store_type} not supported")
