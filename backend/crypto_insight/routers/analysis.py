"""Analysis router.

A missing cryptocurrency maps to 404. Any other failure maps to a generic
500 whose message names the analysis but not the cause.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_analysis_service
from ..models import DEFAULT_TIMEFRAME, AnalysisRequest
from ..services.analysis import AnalysisService, CryptoNotFoundError
from .responses import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def _run(kind: str, crypto_id: str, operation) -> ApiResponse:
    try:
        analysis = await operation()
    except CryptoNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception(f"Error retrieving {kind} analysis for {crypto_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve {kind} analysis for {crypto_id}"
        )

    return ApiResponse(message=f"{kind.capitalize()} analysis retrieved successfully", data=analysis)


@router.get("/technical/{crypto_id}", response_model=ApiResponse)
async def get_technical_analysis(
    crypto_id: str,
    timeframe: str = DEFAULT_TIMEFRAME,
    service: AnalysisService = Depends(get_analysis_service),
):
    """Technical analysis for a timeframe (default 24h)."""
    logger.info(f"Getting technical analysis for {crypto_id} with timeframe {timeframe}")
    request = AnalysisRequest(crypto_id=crypto_id, timeframe=timeframe)
    return await _run("technical", crypto_id, lambda: service.get_technical(request))


@router.get("/fundamental/{crypto_id}", response_model=ApiResponse)
async def get_fundamental_analysis(
    crypto_id: str,
    service: AnalysisService = Depends(get_analysis_service),
):
    """Fundamental analysis."""
    logger.info(f"Getting fundamental analysis for {crypto_id}")
    request = AnalysisRequest(crypto_id=crypto_id)
    return await _run("fundamental", crypto_id, lambda: service.get_fundamental(request))


@router.get("/combined/{crypto_id}", response_model=ApiResponse)
async def get_combined_analysis(
    crypto_id: str,
    timeframe: str = DEFAULT_TIMEFRAME,
    service: AnalysisService = Depends(get_analysis_service),
):
    """Combined technical + fundamental analysis with an overall score."""
    logger.info(f"Getting combined analysis for {crypto_id} with timeframe {timeframe}")
    request = AnalysisRequest(crypto_id=crypto_id, timeframe=timeframe)
    return await _run("combined", crypto_id, lambda: service.get_combined(request))
