"""Public contracts for the metadata enrichment service."""
from nftmarket.meta.contracts.chain import ChainReader, ListingSource
from nftmarket.meta.contracts.listing import EnrichedListing, Listing, cache_key
from nftmarket.meta.contracts.metadata import Metadata

__all__ = [
    "ChainReader", "ListingSource",
    "Listing", "EnrichedListing", "cache_key",
    "Metadata",
]
