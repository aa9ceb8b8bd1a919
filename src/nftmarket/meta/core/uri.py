# nftmarket/meta/core/uri.py
"""
Locator normalization.

Content-addressed ``ipfs://`` locators are rewritten to a public HTTP
gateway; everything else passes through untouched.
"""
from __future__ import annotations

from typing import Any

IPFS_SCHEME = "ipfs://"
DEFAULT_IPFS_GATEWAY = "https://ipfs.io/ipfs"


def normalize_uri(uri: Any, gateway: str = DEFAULT_IPFS_GATEWAY) -> Any:
    """Rewrite ``ipfs://<cid>/<path>`` to ``<gateway>/<cid>/<path>``.

    Total: non-string and malformed input is returned unchanged.
    """
    if not isinstance(uri, str) or not uri.startswith(IPFS_SCHEME):
        return uri

    suffix = uri[len(IPFS_SCHEME):]
    # ipfs://ipfs/<cid> is a common mistake in minted metadata
    if suffix.startswith("ipfs/"):
        suffix = suffix[len("ipfs/"):]
    return f"{gateway.rstrip('/')}/{suffix}"
