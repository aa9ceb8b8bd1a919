# nftmarket/meta/core/query.py
"""
Pure query functions over an enriched batch: collection extraction,
filtering, sorting and page windowing.

Prices are compared as Python ints, so 256-bit amounts sort exactly.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from nftmarket.meta.contracts.listing import EnrichedListing

PAGE_SIZE = 20
ALL_COLLECTIONS = "all"
ETHER_DECIMALS = 18


class SortKey(str, Enum):
    RECENT = "recent"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"

    @classmethod
    def parse(cls, value: str | SortKey | None) -> SortKey:
        """Unknown or empty values fall back to ``RECENT``."""
        if isinstance(value, SortKey):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.RECENT


def extract_collections(items: Sequence[EnrichedListing]) -> list[str]:
    """Unique collection addresses in first-seen order."""
    seen: dict[str, None] = {}
    for item in items:
        if item.nft_contract:
            seen.setdefault(item.nft_contract, None)
    return list(seen)


def matches_search(item: EnrichedListing, search: str) -> bool:
    needle = search.lower()
    if needle in item.metadata.name.lower():
        return True
    return search in str(item.token_id)


def filter_listings(
    items: Sequence[EnrichedListing],
    collection: str = ALL_COLLECTIONS,
    search: str = "",
) -> list[EnrichedListing]:
    """Collection filter (exact address) AND search filter (name or token id)."""
    out = list(items)
    if collection and collection != ALL_COLLECTIONS:
        out = [i for i in out if i.nft_contract == collection]
    if search:
        out = [i for i in out if matches_search(i, search)]
    return out


def sort_listings(
    items: Sequence[EnrichedListing],
    sort: str | SortKey = SortKey.RECENT,
) -> list[EnrichedListing]:
    """Stable sort by price or recency."""
    key = SortKey.parse(sort)
    if key is SortKey.PRICE_LOW:
        return sorted(items, key=lambda i: i.price)
    if key is SortKey.PRICE_HIGH:
        return sorted(items, key=lambda i: i.price, reverse=True)
    return sorted(items, key=lambda i: i.listed_at, reverse=True)


def page_count(items: Sequence[Any] | int, page_size: int = PAGE_SIZE) -> int:
    count = items if isinstance(items, int) else len(items)
    return math.ceil(count / page_size)


def paginate(
    items: Sequence[EnrichedListing],
    page: int,
    page_size: int = PAGE_SIZE,
) -> list[EnrichedListing]:
    """1-indexed page window; out-of-range pages are empty."""
    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def format_price(wei: int, decimals: int = ETHER_DECIMALS) -> str:
    """Exact decimal rendering of a token amount (``10**18`` -> ``"1"``)."""
    whole, frac = divmod(int(wei), 10**decimals)
    if not frac:
        return str(whole)
    return f"{whole}.{str(frac).zfill(decimals).rstrip('0')}"


@dataclass
class ListingPage:
    """One display-ready page of enriched listings."""

    items: list[EnrichedListing]
    page: int
    page_count: int
    total: int
    collections: list[str] = field(default_factory=list)


def query_page(
    items: Sequence[EnrichedListing],
    *,
    page: int = 1,
    sort: str | SortKey = SortKey.RECENT,
    collection: str = ALL_COLLECTIONS,
    search: str = "",
    page_size: int = PAGE_SIZE,
) -> ListingPage:
    """Filter, sort and window an enriched batch.

    ``collections`` is taken from the whole batch, not the filtered view, so a
    collection selector always lists every option.
    """
    filtered = sort_listings(filter_listings(items, collection, search), sort)
    return ListingPage(
        items=paginate(filtered, page, page_size),
        page=page,
        page_count=page_count(filtered, page_size),
        total=len(filtered),
        collections=extract_collections(items),
    )
