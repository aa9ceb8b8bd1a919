"""Batch enrichment: orchestration and fallback policy."""

from nftmarket.meta.core.enrichment.fallback import (
    error_fallback_metadata,
    fallback_metadata,
    truncate_address,
)
from nftmarket.meta.core.enrichment.orchestrator import LatestBatchEnricher, MetadataEnricher

__all__ = [
    "MetadataEnricher",
    "LatestBatchEnricher",
    "fallback_metadata",
    "error_fallback_metadata",
    "truncate_address",
]
