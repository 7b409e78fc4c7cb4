"""Analysis aggregation service.

Combines the market-data gateway, the narrative generator and the extraction
heuristics into technical, fundamental and combined analysis records.

Only a missing cryptocurrency is reported to the caller (as
``CryptoNotFoundError``); upstream failures have already been absorbed into
sentinel narratives, which extraction turns into default values.
"""

import logging

from ..models import (
    DEFAULT_TIMEFRAME,
    AnalysisRequest,
    CombinedAnalysis,
    CryptocurrencyDetails,
    FundamentalAnalysis,
    TechnicalAnalysis,
)
from .coinmarketcap import CoinMarketCapClient
from .extraction import (
    extract_decimal,
    extract_recommendation,
    extract_score,
    extract_section,
    extract_sentiment,
    extract_trend,
    truncate_preview,
)
from .narrative import NarrativeGenerator

logger = logging.getLogger(__name__)


class CryptoNotFoundError(LookupError):
    """The market-data provider has no data for the requested id."""

    def __init__(self, crypto_id: str):
        self.crypto_id = crypto_id
        super().__init__(f"Cryptocurrency with ID {crypto_id} not found")


class AnalysisService:
    """Builds analysis records for a cryptocurrency."""

    def __init__(self, gateway: CoinMarketCapClient, generator: NarrativeGenerator):
        self.gateway = gateway
        self.generator = generator

    async def _require_details(self, crypto_id: str) -> CryptocurrencyDetails:
        crypto = await self.gateway.get_details(crypto_id)
        if crypto is None:
            logger.warning(f"Cryptocurrency with ID {crypto_id} not found")
            raise CryptoNotFoundError(crypto_id)
        return crypto

    async def get_technical(self, request: AnalysisRequest) -> TechnicalAnalysis:
        """Generate a technical analysis.

        Raises:
            CryptoNotFoundError: If the cryptocurrency does not exist.
        """
        timeframe = request.timeframe or DEFAULT_TIMEFRAME
        logger.info(f"Generating technical analysis for crypto ID: {request.crypto_id} with timeframe: {timeframe}")

        crypto = await self._require_details(request.crypto_id)
        text = await self.generator.generate_technical(crypto, timeframe)

        support = extract_decimal(text, "support", crypto.price * 0.9)
        resistance = extract_decimal(text, "resistance", crypto.price * 1.1)
        rsi = extract_decimal(text, "RSI", 50.0)
        macd = extract_decimal(text, "MACD", 0.0)
        trend = extract_trend(text)

        return TechnicalAnalysis(
            crypto_id=crypto.id,
            crypto_name=crypto.name,
            crypto_symbol=crypto.symbol,
            summary=text,
            timeframe=timeframe,
            support_levels={"key": support},
            resistance_levels={"key": resistance},
            trend_direction=trend,
            rsi=rsi,
            macd=macd,
            volume=crypto.volume_24h,
            recommendation=extract_recommendation(text),
            indicators={
                "RSI": f"{rsi:.2f}",
                "MACD": f"{macd:.2f}",
                "Trend": trend,
            },
        )

    async def get_fundamental(self, request: AnalysisRequest) -> FundamentalAnalysis:
        """Generate a fundamental analysis.

        Raises:
            CryptoNotFoundError: If the cryptocurrency does not exist.
        """
        logger.info(f"Generating fundamental analysis for crypto ID: {request.crypto_id}")

        crypto = await self._require_details(request.crypto_id)
        text = await self.generator.generate_fundamental(crypto)

        team = extract_section(text, "Team")
        technology = extract_section(text, "Technology")
        community = extract_section(text, "Community")
        sentiment = extract_sentiment(text)

        return FundamentalAnalysis(
            crypto_id=crypto.id,
            crypto_name=crypto.name,
            crypto_symbol=crypto.symbol,
            summary=text,
            team_assessment=team,
            technology_assessment=technology,
            community_assessment=community,
            market_sentiment=sentiment,
            competitive_analysis=extract_section(text, "Competition"),
            recommendation=extract_recommendation(text),
            indicators={
                "Team": truncate_preview(team),
                "Technology": truncate_preview(technology),
                "Community": truncate_preview(community),
                "Sentiment": sentiment,
            },
        )

    async def get_combined(self, request: AnalysisRequest) -> CombinedAnalysis:
        """Generate technical and fundamental analyses, then an integrative pass.

        The sub-analyses run through their own cached paths every time.

        Raises:
            CryptoNotFoundError: If the cryptocurrency does not exist.
        """
        logger.info(f"Generating combined analysis for crypto ID: {request.crypto_id}")

        crypto = await self._require_details(request.crypto_id)

        technical = await self.get_technical(request)
        fundamental = await self.get_fundamental(request)

        text = await self.generator.generate_combined(technical.summary, fundamental.summary, crypto)
        score = extract_score(text)

        return CombinedAnalysis(
            crypto_id=crypto.id,
            crypto_name=crypto.name,
            crypto_symbol=crypto.symbol,
            summary=text,
            technical_data=technical,
            fundamental_data=fundamental,
            integrated_outlook=extract_section(text, "Outlook"),
            overall_score=score,
            recommendation=extract_recommendation(text),
            indicators={
                "Technical": technical.recommendation,
                "Fundamental": fundamental.recommendation,
                "Score": str(score),
            },
        )
