"""Market-wide views: global metrics and trending coins."""

import logging
from datetime import datetime
from typing import List

from ..models import Cryptocurrency, GlobalMetrics, MarketOverview
from .coinmarketcap import CoinMarketCapClient

logger = logging.getLogger(__name__)

TRENDING_LIMIT = 10


class MarketService:
    """Market overview built from the market-data gateway."""

    def __init__(self, gateway: CoinMarketCapClient):
        self.gateway = gateway

    async def get_overview(self) -> MarketOverview:
        logger.info("Getting market overview")
        global_metrics = await self.get_global_metrics()
        trending = await self.get_trending()
        return MarketOverview(
            global_metrics=global_metrics,
            trending_coins=trending,
            last_updated=datetime.utcnow(),
        )

    async def get_trending(self) -> List[Cryptocurrency]:
        """Top coins by 24h volume."""
        logger.info("Getting trending coins")
        return await self.gateway.list_cryptocurrencies(1, TRENDING_LIMIT, "volume", "desc")

    async def get_global_metrics(self) -> GlobalMetrics:
        logger.info("Getting global metrics")
        return await self.gateway.get_global_metrics()
