from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from nftmarket.meta.api.dependencies import get_marketplace_service
from nftmarket.meta.contracts.routes import (
    ListingPageSchema,
    MetadataSchema,
    TokenMetadataSchema,
)
from nftmarket.meta.core.errors import MetadataError
from nftmarket.meta.core.query import ALL_COLLECTIONS, SortKey
from nftmarket.meta.core.service import MarketplaceService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/listings",
    response_model=ListingPageSchema,
    operation_id="list_listings",
)
async def list_listings(
    service: MarketplaceService = Depends(get_marketplace_service),
    page: int = Query(default=1, ge=1),
    sort: str = Query(default=SortKey.RECENT.value),
    collection: str = Query(default=ALL_COLLECTIONS),
    search: str = Query(default=""),
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1, le=1000),
) -> ListingPageSchema:
    try:
        result = await service.browse(
            page=page,
            sort=sort,
            collection=collection,
            search=search,
            offset=offset,
            limit=limit,
        )
    except MetadataError as e:
        logger.error(f"list_listings(offset={offset}) failed: {e}")
        raise HTTPException(502, e.to_dict())
    return ListingPageSchema.from_page(result)


@router.get(
    "/metadata/{contract}/{token_id}",
    response_model=TokenMetadataSchema,
    operation_id="get_token_metadata",
)
async def get_token_metadata(
    contract: str,
    token_id: int,
    service: MarketplaceService = Depends(get_marketplace_service),
) -> TokenMetadataSchema:
    if token_id < 0:
        raise HTTPException(400, "token_id must be non-negative")
    metadata, collection_name = await service.token_metadata(contract, token_id)
    return TokenMetadataSchema(
        nft_contract=contract,
        token_id=str(token_id),
        metadata=MetadataSchema.from_metadata(metadata),
        collection_name=collection_name,
    )
