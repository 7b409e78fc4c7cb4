"""Analysis records produced by the aggregation service."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class AnalysisType(str, Enum):
    """Kinds of analysis the service can produce."""
    TECHNICAL = "Technical"
    FUNDAMENTAL = "Fundamental"
    COMBINED = "Combined"


class TrendDirection(str, Enum):
    """Trend labels. Extraction never produces anything else."""
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


class Recommendation(str, Enum):
    """Closed set of recommendation labels."""
    STRONG_BUY = "Strong Buy"
    BUY = "Buy"
    HOLD = "Hold"
    SELL = "Sell"
    STRONG_SELL = "Strong Sell"


DEFAULT_TIMEFRAME = "24h"


def _new_analysis_id() -> str:
    return uuid.uuid4().hex


@dataclass
class AnalysisRequest:
    """Input for the aggregation service."""
    crypto_id: str
    timeframe: Optional[str] = None


@dataclass
class Analysis:
    """Fields shared by every analysis type."""
    crypto_id: str
    crypto_name: str
    crypto_symbol: str
    summary: str
    type: AnalysisType
    recommendation: str = Recommendation.HOLD.value
    indicators: Dict[str, str] = field(default_factory=dict)
    id: str = field(default_factory=_new_analysis_id)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class TechnicalAnalysis(Analysis):
    """Price-action analysis for one timeframe."""
    type: AnalysisType = AnalysisType.TECHNICAL
    timeframe: str = DEFAULT_TIMEFRAME
    # Single entry keyed "key"
    support_levels: Dict[str, float] = field(default_factory=dict)
    resistance_levels: Dict[str, float] = field(default_factory=dict)
    trend_direction: str = TrendDirection.NEUTRAL.value
    rsi: float = 50.0
    macd: float = 0.0
    volume: float = 0.0


@dataclass
class FundamentalAnalysis(Analysis):
    """Project-level assessment."""
    type: AnalysisType = AnalysisType.FUNDAMENTAL
    team_assessment: str = ""
    technology_assessment: str = ""
    community_assessment: str = ""
    market_sentiment: str = "Neutral"
    recent_news: List[str] = field(default_factory=list)
    competitive_analysis: str = ""


@dataclass
class CombinedAnalysis(Analysis):
    """Technical and fundamental analyses merged by an integrative pass."""
    type: AnalysisType = AnalysisType.COMBINED
    technical_data: Optional[TechnicalAnalysis] = None
    fundamental_data: Optional[FundamentalAnalysis] = None
    integrated_outlook: str = ""
    overall_score: int = 50  # 0-100
