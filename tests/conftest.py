# tests/conftest.py
from __future__ import annotations

import asyncio
import re

import httpx
import pytest

from nftmarket.meta.contracts.chain import ChainReader, ListingSource
from nftmarket.meta.contracts.listing import Listing
from nftmarket.meta.core.errors import ChainReadError

COLLECTION_A = "0x" + "a" * 40
COLLECTION_B = "0x" + "b" * 40
SELLER = "0x" + "5" * 40

DOC_URL = re.compile(r"^https://meta\.example/(0x[0-9a-f]+)/(\d+)\.json$")


class FakeChainReader(ChainReader, ListingSource):
    """In-memory chain: every token points at ``https://meta.example/<c>/<id>.json``."""

    def __init__(
        self,
        *,
        listings: list[Listing] | None = None,
        names: dict[str, str] | None = None,
        locators: dict[tuple[str, int], str] | None = None,
        fail_locator: set[tuple[str, int]] | None = None,
        fail_name: set[str] | None = None,
        crash_locator: set[tuple[str, int]] | None = None,
        delays: dict[int, float] | None = None,
    ) -> None:
        self.listings = listings or []
        self.names = names if names is not None else {}
        self.locators = locators or {}
        self.fail_locator = fail_locator or set()
        self.fail_name = fail_name or set()
        self.crash_locator = crash_locator or set()
        self.delays = delays or {}
        self.calls: list[tuple] = []

    async def read_token_locator(self, contract: str, token_id: int) -> str:
        self.calls.append(("tokenURI", contract, token_id))
        if token_id in self.delays:
            await asyncio.sleep(self.delays[token_id])
        if (contract, token_id) in self.crash_locator:
            raise RuntimeError("unexpected decoder state")
        if (contract, token_id) in self.fail_locator:
            raise ChainReadError(
                "execution reverted",
                operation="tokenURI",
                contract=contract,
                token_id=token_id,
            )
        return self.locators.get(
            (contract, token_id), f"https://meta.example/{contract}/{token_id}.json"
        )

    async def read_collection_name(self, contract: str) -> str:
        self.calls.append(("name", contract))
        if contract in self.fail_name:
            raise ChainReadError("execution reverted", operation="name", contract=contract)
        return self.names.get(contract, "Cool Apes")

    async def get_active_listings(self, offset: int, limit: int) -> list[Listing]:
        self.calls.append(("getAllActiveListings", offset, limit))
        return self.listings[offset:offset + limit]


class MetadataServer:
    """``httpx.MockTransport`` handler serving one document per token."""

    def __init__(self, *, status: dict[int, int] | None = None) -> None:
        self.status = status or {}
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        m = DOC_URL.match(url)
        if not m:
            return httpx.Response(404, text="not found")
        token_id = int(m.group(2))
        if token_id in self.status:
            return httpx.Response(self.status[token_id], text="error")
        return httpx.Response(
            200,
            json={
                "name": f"Token {token_id}",
                "description": f"Description {token_id}",
                "image": f"ipfs://QmImage{token_id}",
            },
        )


@pytest.fixture
def make_listing():
    def _make(
        token_id: int,
        *,
        contract: str = COLLECTION_A,
        price: int = 10**18,
        listed_at: int = 1_700_000_000,
    ) -> Listing:
        return Listing(
            seller=SELLER,
            nft_contract=contract,
            token_id=token_id,
            price=price,
            active=True,
            listed_at=listed_at,
        )

    return _make


@pytest.fixture
def metadata_server() -> MetadataServer:
    return MetadataServer()


@pytest.fixture
def metadata_http(metadata_server) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(metadata_server))


@pytest.fixture
def chain_factory():
    return FakeChainReader
