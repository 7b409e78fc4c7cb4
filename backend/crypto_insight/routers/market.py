"""Market router: overview, trending coins and global metrics."""

from fastapi import APIRouter, Depends

from ..dependencies import get_market_service
from ..services.market_service import MarketService
from .responses import ApiResponse

router = APIRouter()


@router.get("/overview", response_model=ApiResponse)
async def get_overview(service: MarketService = Depends(get_market_service)):
    """Global metrics plus trending coins."""
    overview = await service.get_overview()
    return ApiResponse(message="Market overview retrieved successfully", data=overview)


@router.get("/trending", response_model=ApiResponse)
async def get_trending(service: MarketService = Depends(get_market_service)):
    """Top 10 coins by 24h volume."""
    coins = await service.get_trending()
    return ApiResponse(message="Trending coins retrieved successfully", data=coins)


@router.get("/global-metrics", response_model=ApiResponse)
async def get_global_metrics(service: MarketService = Depends(get_market_service)):
    """Market-wide metrics."""
    metrics = await service.get_global_metrics()
    return ApiResponse(message="Global metrics retrieved successfully", data=metrics)
