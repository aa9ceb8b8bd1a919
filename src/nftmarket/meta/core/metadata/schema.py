# nftmarket/meta/core/metadata/schema.py
"""
JSON Schema for token metadata documents (ERC-721 metadata JSON).

Only the fields we consume are constrained; anything else is allowed.
"""
from __future__ import annotations

from typing import Any

import jsonschema

from nftmarket.meta.core.errors import ParseError

METADATA_DOCUMENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": ["string", "null"]},
        "description": {"type": ["string", "null"]},
        "image": {"type": ["string", "null"]},
    },
    "additionalProperties": True,
}


def validate_document(document: Any, *, uri: str | None = None) -> dict[str, Any]:
    """Validate a decoded metadata document, raising :class:`ParseError`."""
    try:
        jsonschema.validate(document, METADATA_DOCUMENT_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise ParseError(
            f"Invalid metadata document at {uri}: {exc.message}",
            operation="parse_metadata",
            cause=exc,
        ) from exc
    return document
