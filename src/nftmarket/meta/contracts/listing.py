# nftmarket/meta/contracts/listing.py
"""
Listing contracts.

A listing is the on-chain record of an item offered for sale. Integer
fields are 256-bit on chain; Python ints hold them exactly.
"""
from __future__ import annotations

from dataclasses import dataclass

from nftmarket.meta.contracts.metadata import Metadata


def cache_key(contract: str, token_id: int) -> str:
    """Canonical cache key: ``<contract>-<token id in base 10>``."""
    return f"{contract}-{int(token_id)}"


@dataclass(frozen=True)
class Listing:
    """Marketplace listing as read from the chain.

    Attributes:
        seller: Address of the seller.
        nft_contract: Address of the NFT collection contract.
        token_id: Token identifier within the collection.
        price: Asking price in the smallest unit (wei).
        active: Whether the listing is still open.
        listed_at: Unix timestamp (seconds) of listing creation.
    """

    seller: str
    nft_contract: str
    token_id: int
    price: int
    active: bool
    listed_at: int

    @property
    def cache_key(self) -> str:
        return cache_key(self.nft_contract, self.token_id)


@dataclass(frozen=True)
class EnrichedListing:
    """Listing with resolved metadata and a display collection name.

    ``collection_name`` is ``None`` when metadata came from the cache; the
    cache-hit path does not re-read the collection name.
    """

    listing: Listing
    metadata: Metadata
    collection_name: str | None = None

    @property
    def seller(self) -> str:
        return self.listing.seller

    @property
    def nft_contract(self) -> str:
        return self.listing.nft_contract

    @property
    def token_id(self) -> int:
        return self.listing.token_id

    @property
    def price(self) -> int:
        return self.listing.price

    @property
    def active(self) -> bool:
        return self.listing.active

    @property
    def listed_at(self) -> int:
        return self.listing.listed_at

    @property
    def cache_key(self) -> str:
        return self.listing.cache_key
