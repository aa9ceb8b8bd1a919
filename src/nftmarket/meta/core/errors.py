# nftmarket/meta/core/errors.py
"""
Failure taxonomy for metadata resolution.

Every error carries enough context (operation, contract, token id) to be
logged on its own. None of them cross the enrichment boundary: the
orchestrator converts each into a fallback value.
"""
from __future__ import annotations

from typing import Any


class MetadataError(Exception):
    """Base class for all resolution failures."""

    kind = "metadata_error"

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        contract: str | None = None,
        token_id: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message
        self.operation = operation
        self.contract = contract
        self.token_id = token_id
        self.cause = cause
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.kind,
            "message": self.message,
            "operation": self.operation,
            "contract": self.contract,
            "token_id": str(self.token_id) if self.token_id is not None else None,
        }

    def __str__(self) -> str:
        return self.message


class TransportError(MetadataError):
    """Network or HTTP-level failure."""

    kind = "transport_error"

    def __init__(self, message: str, *, status_code: int | None = None, **kwargs: Any):
        self.status_code = status_code
        super().__init__(message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class ChainReadError(MetadataError):
    """RPC failure or contract revert."""

    kind = "chain_read_error"


class ParseError(MetadataError):
    """Malformed metadata document or undecodable contract return."""

    kind = "parse_error"


class NotFoundError(MetadataError):
    """No locator is available for the token."""

    kind = "not_found"
