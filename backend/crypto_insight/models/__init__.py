# Domain Models

from .crypto import (
    Cryptocurrency,
    CryptocurrencyDetails,
    PricePoint,
    PriceHistory,
    GlobalMetrics,
    MarketOverview,
)
from .analysis import (
    AnalysisType,
    TrendDirection,
    Recommendation,
    DEFAULT_TIMEFRAME,
    AnalysisRequest,
    Analysis,
    TechnicalAnalysis,
    FundamentalAnalysis,
    CombinedAnalysis,
)

__all__ = [
    "Cryptocurrency",
    "CryptocurrencyDetails",
    "PricePoint",
    "PriceHistory",
    "GlobalMetrics",
    "MarketOverview",
    "AnalysisType",
    "TrendDirection",
    "Recommendation",
    "DEFAULT_TIMEFRAME",
    "AnalysisRequest",
    "Analysis",
    "TechnicalAnalysis",
    "FundamentalAnalysis",
    "CombinedAnalysis",
]
