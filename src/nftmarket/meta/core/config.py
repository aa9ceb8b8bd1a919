# nftmarket/meta/core/config.py
"""
Central configuration for the metadata enrichment service.

Environment variables (prefixed ``NFTMETA_``) override defaults. The chain
settings default to the Flow EVM testnet the marketplace is deployed on.
"""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="NFTMETA_", extra="ignore"
    )

    app_env: str = "dev"
    log_level: str = "INFO"
    log_json: bool = True

    # Chain
    rpc_url: str = Field(
        default="https://testnet.evm.nodes.onflow.org",
        description="EVM JSON-RPC endpoint",
    )
    chain_id: int = Field(default=545, description="EVM chain id")
    marketplace_address: str = Field(
        default="0x0000000000000000000000000000000000000000",
        description="Marketplace contract exposing getAllActiveListings",
    )
    rpc_timeout: float = Field(default=10.0, description="Seconds per RPC call")

    # Off-chain documents
    ipfs_gateway: str = Field(
        default="https://ipfs.io/ipfs",
        description="HTTP gateway used to rewrite ipfs:// locators",
    )
    placeholder_image_base: str = Field(
        default="https://via.placeholder.com/400",
        description="Base URL for synthetic fallback images",
    )
    http_timeout: float = Field(default=10.0, description="Seconds per document fetch")

    # Enrichment and paging
    page_size: int = Field(default=20, ge=1)
    listing_window: int = Field(
        default=100, ge=1, description="Listings read from the marketplace per request"
    )
    max_concurrent: int | None = Field(
        default=None,
        description="Upper bound on concurrent per-item resolutions (None = unbounded)",
    )


settings = Settings()
