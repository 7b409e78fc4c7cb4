"""Cryptocurrency listing, details, history and search."""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..models import Cryptocurrency, CryptocurrencyDetails, PriceHistory
from .coinmarketcap import CoinMarketCapClient

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
# The listings endpoint does not report a total on the basic plan
TOTAL_ITEMS = 5000


@dataclass
class CryptoPage:
    """A page of listings with pagination metadata."""
    items: List[Cryptocurrency]
    page: int
    page_size: int
    total_items: int
    total_pages: int


def clamp_page_size(page_size: int) -> int:
    return max(1, min(page_size, MAX_PAGE_SIZE))


class CryptoService:
    """Pagination and lookup facade over the market-data gateway."""

    def __init__(self, gateway: CoinMarketCapClient):
        self.gateway = gateway

    async def list_cryptocurrencies(
        self,
        page: int = 1,
        page_size: int = 50,
        sort_by: str = "market_cap",
        order: str = "desc",
    ) -> CryptoPage:
        """Get one page of listings. ``page_size`` is capped at 100."""
        page = max(page, 1)
        page_size = clamp_page_size(page_size)
        logger.info(f"Getting cryptocurrencies with pagination: Page {page}, PageSize {page_size}")

        start = (page - 1) * page_size + 1
        items = await self.gateway.list_cryptocurrencies(start, page_size, sort_by, order)

        return CryptoPage(
            items=items,
            page=page,
            page_size=page_size,
            total_items=TOTAL_ITEMS,
            total_pages=math.ceil(TOTAL_ITEMS / page_size),
        )

    async def get_details(self, crypto_id: str) -> Optional[CryptocurrencyDetails]:
        logger.info(f"Getting cryptocurrency details for ID: {crypto_id}")
        return await self.gateway.get_details(crypto_id)

    async def get_price_history(self, crypto_id: str, interval: str, days: int) -> Optional[PriceHistory]:
        logger.info(f"Getting price history for ID: {crypto_id}, interval: {interval}, days: {days}")
        return await self.gateway.get_price_history(crypto_id, interval, days)

    async def search(self, query: str) -> List[Cryptocurrency]:
        logger.info(f"Searching cryptocurrencies with query: {query}")
        return await self.gateway.search(query)
