# nftmarket/meta/core/metadata/fetcher.py
"""
Async fetcher for token metadata documents.

Resolves a ``tokenURI`` to a :class:`Metadata` record. ``fetch`` never
raises; failures come back as :class:`FetchFailure` so callers can apply a
single fallback policy.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

import httpx

from nftmarket.meta.contracts.metadata import Metadata
from nftmarket.meta.core.errors import MetadataError, NotFoundError, ParseError, TransportError
from nftmarket.meta.core.metadata.schema import validate_document
from nftmarket.meta.core.uri import DEFAULT_IPFS_GATEWAY, normalize_uri

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Unnamed NFT"
DATA_URI_PREFIX = "data:"


@dataclass(frozen=True)
class FetchFailure:
    """Typed failure returned in place of metadata."""

    uri: str
    error: MetadataError

    @property
    def kind(self) -> str:
        return self.error.kind


class MetadataFetcher:
    """HTTP client for metadata documents.

    Contract::

        GET <normalized tokenURI>
        200 -> { name?: str, description?: str, image?: str, ... }

    ``data:application/json`` locators are decoded in-process.
    """

    def __init__(
        self,
        *,
        gateway: str = DEFAULT_IPFS_GATEWAY,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._gateway = gateway
        self._timeout = timeout
        self._client = client

    async def fetch(self, uri: str) -> Metadata | FetchFailure:
        try:
            return await self.fetch_or_raise(uri)
        except MetadataError as exc:
            logger.warning("Metadata fetch failed uri=%s kind=%s: %s", uri, exc.kind, exc)
            return FetchFailure(uri=uri, error=exc)

    async def fetch_or_raise(self, uri: str) -> Metadata:
        if not uri:
            raise NotFoundError("Empty metadata locator", operation="fetch_metadata")

        if uri.startswith(DATA_URI_PREFIX):
            document = self._decode_data_uri(uri)
        else:
            document = await self._get_json(normalize_uri(uri, self._gateway))

        validate_document(document, uri=uri)
        return self._to_metadata(document)

    async def _get_json(self, url: str) -> Any:
        if self._client is not None:
            resp = await self._request(self._client, url)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await self._request(client, url)

        try:
            return resp.json()
        except ValueError as exc:
            raise ParseError(
                f"Metadata at {url} is not valid JSON",
                operation="parse_metadata",
                cause=exc,
            ) from exc

    async def _request(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        try:
            resp = await client.get(url, timeout=self._timeout, follow_redirects=True)
            resp.raise_for_status()
        except httpx.HTTPStatusError as ex:
            raise TransportError(
                f"Failed to fetch metadata: HTTP {ex.response.status_code} for {url}",
                status_code=ex.response.status_code,
                operation="fetch_metadata",
                cause=ex,
            ) from ex
        except (httpx.HTTPError, httpx.InvalidURL) as ex:
            raise TransportError(
                f"Failed to fetch metadata from {url}: {ex!r}",
                operation="fetch_metadata",
                cause=ex,
            ) from ex
        return resp

    @staticmethod
    def _decode_data_uri(uri: str) -> Any:
        header, sep, payload = uri[len(DATA_URI_PREFIX):].partition(",")
        if not sep:
            raise ParseError("Malformed data URI", operation="parse_metadata")
        try:
            if header.endswith(";base64"):
                raw = base64.b64decode(payload, validate=True).decode("utf-8")
            else:
                raw = unquote(payload)
            return json.loads(raw)
        except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
            raise ParseError(
                f"Undecodable data URI ({header or 'no media type'})",
                operation="parse_metadata",
                cause=exc,
            ) from exc

    def _to_metadata(self, document: dict[str, Any]) -> Metadata:
        image = document.get("image") or ""
        return Metadata(
            name=document.get("name") or DEFAULT_NAME,
            description=document.get("description") or "",
            image=normalize_uri(image, self._gateway),
        )
