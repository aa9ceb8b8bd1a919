# nftmarket/meta/core/enrichment/fallback.py
"""
Deterministic placeholder metadata for tokens that could not be resolved.
"""
from __future__ import annotations

from nftmarket.meta.contracts.metadata import Metadata

DEFAULT_PLACEHOLDER_BASE = "https://via.placeholder.com/400"


def truncate_address(address: str) -> str:
    """``0x1234...abcd`` form of an address; short strings pass through."""
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def fallback_metadata(
    token_id: int,
    collection_name: str,
    placeholder_base: str = DEFAULT_PLACEHOLDER_BASE,
) -> Metadata:
    """Placeholder used when no document could be fetched for the token."""
    return Metadata(
        name=f"NFT #{token_id}",
        description=f"NFT from {collection_name}",
        image=f"{placeholder_base}?text=NFT+{token_id}",
    )


def error_fallback_metadata(
    token_id: int,
    placeholder_base: str = DEFAULT_PLACEHOLDER_BASE,
) -> Metadata:
    """Placeholder used when resolution itself crashed."""
    return Metadata(
        name=f"NFT #{token_id}",
        description="",
        image=f"{placeholder_base}?text=NFT",
    )
