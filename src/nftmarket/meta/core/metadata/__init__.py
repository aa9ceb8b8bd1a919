"""Metadata fetching, validation and caching."""

from nftmarket.meta.core.metadata.cache import (
    MemoryMetadataCache,
    MetadataCache,
    get_metadata_cache,
)
from nftmarket.meta.core.metadata.fetcher import FetchFailure, MetadataFetcher

__all__ = [
    "MetadataCache",
    "MemoryMetadataCache",
    "get_metadata_cache",
    "MetadataFetcher",
    "FetchFailure",
]
