from __future__ import annotations

from nftmarket.meta.contracts.listing import EnrichedListing, Listing
from nftmarket.meta.contracts.metadata import Metadata
from nftmarket.meta.core.query import (
    SortKey,
    extract_collections,
    filter_listings,
    format_price,
    page_count,
    paginate,
    query_page,
    sort_listings,
)

A = "0x" + "a" * 40
B = "0x" + "b" * 40


def item(
    token_id: int,
    *,
    name: str | None = None,
    contract: str = A,
    price: int = 1,
    listed_at: int = 0,
) -> EnrichedListing:
    listing = Listing(
        seller="0x" + "5" * 40,
        nft_contract=contract,
        token_id=token_id,
        price=price,
        active=True,
        listed_at=listed_at,
    )
    metadata = Metadata(name=name or f"NFT #{token_id}", description="", image="")
    return EnrichedListing(listing=listing, metadata=metadata, collection_name="C")


class TestExtractCollections:
    def test_unique_first_seen_order(self):
        items = [item(1, contract=B), item(2, contract=A), item(3, contract=B)]
        assert extract_collections(items) == [B, A]

    def test_empty(self):
        assert extract_collections([]) == []


class TestFilter:
    def test_all_passes_everything(self):
        items = [item(1, contract=A), item(2, contract=B)]
        assert filter_listings(items, "all") == items

    def test_collection_exact_match(self):
        items = [item(1, contract=A), item(2, contract=B)]
        assert [i.token_id for i in filter_listings(items, B)] == [2]

    def test_collection_match_is_case_sensitive(self):
        items = [item(1, contract="0xAbC")]
        assert filter_listings(items, "0xabc") == []

    def test_search_name_case_insensitive(self):
        items = [item(1, name="Cool Ape"), item(2, name="Bored Cat")]
        assert [i.token_id for i in filter_listings(items, search="ape")] == [1]
        assert [i.token_id for i in filter_listings(items, search="APE")] == [1]

    def test_search_token_id_substring(self):
        items = [item(77, name="Alpha"), item(177, name="Beta"), item(8, name="Gamma")]
        assert [i.token_id for i in filter_listings(items, search="77")] == [77, 177]

    def test_empty_search_passes_all(self):
        items = [item(1), item(2)]
        assert filter_listings(items, search="") == items

    def test_filters_are_conjunctive(self):
        items = [
            item(1, name="Cool Ape", contract=A),
            item(2, name="Cool Ape", contract=B),
            item(3, name="Cat", contract=B),
        ]
        assert [i.token_id for i in filter_listings(items, B, "ape")] == [2]

    def test_input_not_mutated(self):
        items = [item(1, contract=A), item(2, contract=B)]
        filter_listings(items, A)
        assert len(items) == 2


class TestSort:
    def test_price_low(self):
        items = [item(1, price=5), item(2, price=1), item(3, price=3)]
        assert [i.price for i in sort_listings(items, "price-low")] == [1, 3, 5]

    def test_price_high(self):
        items = [item(1, price=5), item(2, price=1), item(3, price=3)]
        assert [i.price for i in sort_listings(items, "price-high")] == [5, 3, 1]

    def test_recent_is_default(self):
        items = [item(1, listed_at=10), item(2, listed_at=30), item(3, listed_at=20)]
        assert [i.token_id for i in sort_listings(items)] == [2, 3, 1]

    def test_unknown_key_sorts_recent(self):
        items = [item(1, listed_at=10), item(2, listed_at=30)]
        assert [i.token_id for i in sort_listings(items, "bogus")] == [2, 1]

    def test_large_prices_compare_exactly(self):
        base = 2**200
        items = [item(1, price=base + 1), item(2, price=base), item(3, price=base + 2)]
        assert [i.token_id for i in sort_listings(items, SortKey.PRICE_LOW)] == [2, 1, 3]

    def test_stable_for_equal_keys(self):
        items = [item(i, price=7) for i in range(5)]
        assert [i.token_id for i in sort_listings(items, "price-low")] == [0, 1, 2, 3, 4]
        assert [i.token_id for i in sort_listings(items, "price-high")] == [0, 1, 2, 3, 4]

    def test_sort_key_parse(self):
        assert SortKey.parse("price-high") is SortKey.PRICE_HIGH
        assert SortKey.parse(None) is SortKey.RECENT
        assert SortKey.parse("") is SortKey.RECENT


class TestPagination:
    def test_page_math(self):
        items = [item(i) for i in range(45)]
        assert page_count(items, 20) == 3
        assert len(paginate(items, 1, 20)) == 20
        assert len(paginate(items, 3, 20)) == 5
        assert paginate(items, 4, 20) == []

    def test_page_count_accepts_int(self):
        assert page_count(0, 20) == 0
        assert page_count(40, 20) == 2

    def test_page_below_one_is_empty(self):
        assert paginate([item(1)], 0) == []

    def test_pages_are_contiguous(self):
        items = [item(i) for i in range(25)]
        ids = [i.token_id for p in (1, 2) for i in paginate(items, p, 20)]
        assert ids == list(range(25))


class TestFormatPrice:
    def test_whole_and_fractional(self):
        assert format_price(10**18) == "1"
        assert format_price(1_500_000_000_000_000_000) == "1.5"
        assert format_price(1) == "0.000000000000000001"
        assert format_price(0) == "0"

    def test_exact_for_huge_values(self):
        assert format_price(2**200) == (
            f"{2**200 // 10**18}.{str(2**200 % 10**18).zfill(18).rstrip('0')}"
        )


class TestQueryPage:
    def test_filter_sort_paginate(self):
        items = [item(i, price=100 - i, contract=A if i % 2 else B) for i in range(30)]

        page = query_page(items, page=1, sort="price-low", collection=A, page_size=10)

        assert page.total == 15
        assert page.page_count == 2
        assert [i.price for i in page.items] == sorted(i.price for i in page.items)
        assert all(i.nft_contract == A for i in page.items)
        # collection options come from the whole batch
        assert page.collections == [B, A]

    def test_out_of_range_page(self):
        page = query_page([item(1)], page=5)
        assert page.items == []
        assert page.page_count == 1
