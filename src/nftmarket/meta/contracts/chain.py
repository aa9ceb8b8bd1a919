# nftmarket/meta/contracts/chain.py
"""
Chain collaborator contracts.

Implementations talk to an RPC endpoint; the enrichment core only sees
these interfaces. Both read operations may fail independently and must
raise :class:`~nftmarket.meta.core.errors.ChainReadError` when they do.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from nftmarket.meta.contracts.listing import Listing


class ChainReader(ABC):

    @abstractmethod
    async def read_token_locator(self, contract: str, token_id: int) -> str:
        """Return the descriptor-document locator (``tokenURI``)."""

    @abstractmethod
    async def read_collection_name(self, contract: str) -> str:
        """Return the collection display name (``name()``)."""


class ListingSource(ABC):

    @abstractmethod
    async def get_active_listings(self, offset: int, limit: int) -> list[Listing]:
        """Return one offset/limit window of active marketplace listings."""
