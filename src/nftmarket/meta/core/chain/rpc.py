# nftmarket/meta/core/chain/rpc.py
"""
Thin async JSON-RPC client for read-only contract calls.

Implements both chain collaborators over ``eth_call``::

    POST <rpc_url>
    body: {"jsonrpc": "2.0", "id": n, "method": "eth_call",
           "params": [{"to": <contract>, "data": <selector+args>}, "latest"]}
"""
from __future__ import annotations

import itertools
import logging
from typing import Any, Sequence

import httpx
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector

from nftmarket.meta.contracts.chain import ChainReader, ListingSource
from nftmarket.meta.contracts.listing import Listing
from nftmarket.meta.core.errors import ChainReadError

logger = logging.getLogger(__name__)

TOKEN_URI_SIG = "tokenURI(uint256)"
NAME_SIG = "name()"
ACTIVE_LISTINGS_SIG = "getAllActiveListings(uint256,uint256)"
LISTING_TUPLE = "(address,address,uint256,uint256,bool,uint256)"


def encode_call(signature: str, arg_types: Sequence[str] = (), args: Sequence[Any] = ()) -> str:
    """Build ``eth_call`` data: 4-byte selector followed by ABI-encoded args."""
    data = function_signature_to_4byte_selector(signature)
    if arg_types:
        data += encode(list(arg_types), list(args))
    return "0x" + data.hex()


class JsonRpcChainReader(ChainReader, ListingSource):
    """``ChainReader`` and ``ListingSource`` over an EVM JSON-RPC endpoint."""

    def __init__(
        self,
        *,
        rpc_url: str,
        marketplace_address: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._rpc_url = rpc_url
        self._marketplace = marketplace_address
        self._timeout = timeout
        self._client = client
        self._ids = itertools.count(1)

    async def read_token_locator(self, contract: str, token_id: int) -> str:
        data = encode_call(TOKEN_URI_SIG, ["uint256"], [token_id])
        raw = await self._eth_call(contract, data, operation="tokenURI", token_id=token_id)
        (uri,) = self._decode(["string"], raw, operation="tokenURI", contract=contract, token_id=token_id)
        return uri

    async def read_collection_name(self, contract: str) -> str:
        raw = await self._eth_call(contract, encode_call(NAME_SIG), operation="name")
        (name,) = self._decode(["string"], raw, operation="name", contract=contract)
        return name

    async def get_active_listings(self, offset: int, limit: int) -> list[Listing]:
        if not self._marketplace:
            raise ChainReadError(
                "No marketplace address configured", operation="getAllActiveListings"
            )
        data = encode_call(ACTIVE_LISTINGS_SIG, ["uint256", "uint256"], [offset, limit])
        raw = await self._eth_call(self._marketplace, data, operation="getAllActiveListings")
        (rows,) = self._decode(
            [f"{LISTING_TUPLE}[]"],
            raw,
            operation="getAllActiveListings",
            contract=self._marketplace,
        )
        listings = [
            Listing(
                seller=seller,
                nft_contract=nft_contract,
                token_id=token_id,
                price=price,
                active=active,
                listed_at=listed_at,
            )
            for seller, nft_contract, token_id, price, active, listed_at in rows
        ]
        logger.debug("Read %d active listing(s) offset=%d limit=%d", len(listings), offset, limit)
        return listings

    # -- JSON-RPC ---------------------------------------------------------------

    async def _eth_call(
        self,
        contract: str,
        data: str,
        *,
        operation: str,
        token_id: int | None = None,
    ) -> bytes:
        body = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "eth_call",
            "params": [{"to": contract, "data": data}, "latest"],
        }
        context = {"operation": operation, "contract": contract, "token_id": token_id}

        try:
            if self._client is not None:
                resp = await self._client.post(self._rpc_url, json=body, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(self._rpc_url, json=body)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as ex:
            raise ChainReadError(
                f"RPC {operation} failed status={ex.response.status_code}",
                cause=ex,
                **context,
            ) from ex
        except (httpx.HTTPError, ValueError) as ex:
            raise ChainReadError(f"RPC {operation} failed: {ex!r}", cause=ex, **context) from ex

        error = payload.get("error") if isinstance(payload, dict) else None
        if error:
            message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
            raise ChainReadError(f"RPC {operation} reverted: {message}", **context)

        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, str):
            raise ChainReadError(f"RPC {operation} returned no result", **context)

        try:
            return bytes.fromhex(result[2:] if result.startswith("0x") else result)
        except ValueError as ex:
            raise ChainReadError(f"RPC {operation} returned non-hex data", cause=ex, **context) from ex

    @staticmethod
    def _decode(types: list[str], raw: bytes, **context: Any) -> tuple[Any, ...]:
        if not raw:
            raise ChainReadError(f"Empty return data for {context.get('operation')}", **context)
        try:
            return decode(types, raw)
        except (DecodingError, UnicodeDecodeError) as ex:
            raise ChainReadError(
                f"Cannot decode {context.get('operation')} return data",
                cause=ex,
                **context,
            ) from ex
