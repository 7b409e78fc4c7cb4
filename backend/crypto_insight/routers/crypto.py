"""Cryptocurrency router: listings, details, price history and search."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..dependencies import get_crypto_service
from ..services.crypto_service import MAX_PAGE_SIZE, CryptoService
from .responses import ApiResponse, PaginatedResponse

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_QUERY_LENGTH = 2


@router.get("/list", response_model=PaginatedResponse)
async def list_cryptocurrencies(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1),
    sort_by: str = "market_cap",
    order: str = "desc",
    service: CryptoService = Depends(get_crypto_service),
):
    """List cryptocurrencies. ``page_size`` above 100 is capped to 100."""
    result = await service.list_cryptocurrencies(page, min(page_size, MAX_PAGE_SIZE), sort_by, order)
    return PaginatedResponse(
        message="Cryptocurrencies retrieved successfully",
        data=result.items,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        total_items=result.total_items,
    )


@router.get("/details/{crypto_id}", response_model=ApiResponse)
async def get_details(
    crypto_id: str,
    service: CryptoService = Depends(get_crypto_service),
):
    """Get details for one cryptocurrency."""
    crypto = await service.get_details(crypto_id)
    if crypto is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cryptocurrency with ID {crypto_id} not found"
        )

    return ApiResponse(message="Cryptocurrency details retrieved successfully", data=crypto)


@router.get("/price-history/{crypto_id}", response_model=ApiResponse)
async def get_price_history(
    crypto_id: str,
    interval: str = "1d",
    days: int = Query(30, ge=1, le=365),
    service: CryptoService = Depends(get_crypto_service),
):
    """Get (synthesized) daily price history."""
    history = await service.get_price_history(crypto_id, interval, days)
    if history is None or not history.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Price history for cryptocurrency {crypto_id} not found"
        )

    return ApiResponse(message="Price history retrieved successfully", data=history)


@router.get("/search", response_model=ApiResponse)
async def search(
    query: str = "",
    service: CryptoService = Depends(get_crypto_service),
):
    """Search the top 100 cryptocurrencies by name or symbol."""
    if len(query.strip()) < MIN_QUERY_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Search query must be at least {MIN_QUERY_LENGTH} characters long"
        )

    results = await service.search(query)
    return ApiResponse(message="Search completed successfully", data=results)
