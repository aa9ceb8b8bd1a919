from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from nftmarket.meta.contracts.listing import EnrichedListing
from nftmarket.meta.contracts.metadata import Metadata
from nftmarket.meta.core.query import ListingPage, format_price


class MetadataSchema(BaseModel):
    name: str
    description: str
    image: str

    @staticmethod
    def from_metadata(m: Metadata) -> MetadataSchema:
        return MetadataSchema(name=m.name, description=m.description, image=m.image)


class ListingSchema(BaseModel):
    """Enriched listing. 256-bit integers are serialized as decimal strings."""

    seller: str
    nft_contract: str
    token_id: str = Field(..., description="Token id, base 10")
    price: str = Field(..., description="Price in wei, base 10")
    price_eth: str = Field(..., description="Price in ether, exact decimal")
    active: bool
    listed_at: int
    metadata: MetadataSchema
    collection_name: str | None = None

    @staticmethod
    def from_enriched(item: EnrichedListing) -> ListingSchema:
        return ListingSchema(
            seller=item.seller,
            nft_contract=item.nft_contract,
            token_id=str(item.token_id),
            price=str(item.price),
            price_eth=format_price(item.price),
            active=item.active,
            listed_at=item.listed_at,
            metadata=MetadataSchema.from_metadata(item.metadata),
            collection_name=item.collection_name,
        )


class ListingPageSchema(BaseModel):
    items: list[ListingSchema]
    page: int
    page_count: int
    total: int
    collections: list[str]

    model_config = ConfigDict(extra="forbid")

    @staticmethod
    def from_page(p: ListingPage) -> ListingPageSchema:
        return ListingPageSchema(
            items=[ListingSchema.from_enriched(i) for i in p.items],
            page=p.page,
            page_count=p.page_count,
            total=p.total,
            collections=p.collections,
        )


class TokenMetadataSchema(BaseModel):
    nft_contract: str
    token_id: str
    metadata: MetadataSchema
    collection_name: str | None = None
