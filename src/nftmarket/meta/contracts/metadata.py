# nftmarket/meta/contracts/metadata.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Metadata:
    """Off-chain descriptive document for a token. All fields are always set."""

    name: str
    description: str
    image: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "image": self.image,
        }
