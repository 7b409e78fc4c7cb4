"""CoinMarketCap market-data gateway.

Every operation reads through the shared cache first. Upstream failures are
logged and turned into empty or default results; nothing here raises to the
caller, so the dashboard degrades instead of erroring.

Cache policy:
- listings: 5 minutes
- coin details: 10 minutes
- price history: 30 minutes (synthesized, the plan tier has no history API)
- global metrics: 15 minutes
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ..models import (
    Cryptocurrency,
    CryptocurrencyDetails,
    GlobalMetrics,
    PriceHistory,
    PricePoint,
)
from .cache import CacheStore
from .http_client import HttpClient

logger = logging.getLogger(__name__)

LISTINGS_TTL_SECONDS = 5 * 60
DETAILS_TTL_SECONDS = 10 * 60
HISTORY_TTL_SECONDS = 30 * 60
GLOBAL_METRICS_TTL_SECONDS = 15 * 60

SEARCH_UNIVERSE_SIZE = 100
MAX_DAILY_VOLATILITY = 0.05

# Internal sort vocabulary -> provider sort field
SORT_FIELDS = {
    "market_cap": "market_cap",
    "price": "price",
    "volume": "volume_24h",
    "change": "percent_change_24h",
    "name": "name",
}
DEFAULT_SORT_FIELD = "market_cap"


def map_sort_field(sort_field: Optional[str]) -> str:
    """Translate a sort field to the provider's name, defaulting to market cap."""
    return SORT_FIELDS.get((sort_field or "").lower(), DEFAULT_SORT_FIELD)


def map_sort_direction(sort_direction: Optional[str]) -> str:
    return "asc" if (sort_direction or "").lower() == "asc" else "desc"


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _as_float(value: Any) -> float:
    # max_supply and friends are null for uncapped coins
    if value is None:
        return 0.0
    return float(value)


def _usd_quote(item: Dict[str, Any]) -> Dict[str, Any]:
    return (item.get("quote") or {}).get("USD") or {}


class CoinMarketCapClient:
    """Read-through client for the CoinMarketCap Pro API."""

    def __init__(
        self,
        http: HttpClient,
        cache: CacheStore,
        api_key: str,
        base_url: str = "https://pro-api.coinmarketcap.com/v1",
        rng: Optional[random.Random] = None,
    ):
        """Initialize the client.

        Args:
            http: Shared HTTP helper
            cache: Shared cache store
            api_key: CoinMarketCap Pro API key
            base_url: API root, without trailing slash
            rng: Random source for synthesized price history
        """
        self.http = http
        self.cache = cache
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.rng = rng or random.Random()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-CMC_PRO_API_KEY": self.api_key,
            "Accept": "application/json",
        }

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.http.get_json(f"{self.base_url}{path}", params=params, headers=self.headers)

    @staticmethod
    def _to_cryptocurrency(item: Dict[str, Any]) -> Cryptocurrency:
        usd = _usd_quote(item)
        return Cryptocurrency(
            id=str(item["id"]),
            name=item.get("name", ""),
            symbol=item.get("symbol", ""),
            price=_as_float(usd.get("price")),
            market_cap=_as_float(usd.get("market_cap")),
            volume_24h=_as_float(usd.get("volume_24h")),
            change_percentage_24h=_as_float(usd.get("percent_change_24h")),
            rank=int(item.get("cmc_rank") or 0),
            last_updated=_parse_timestamp(item.get("last_updated")),
        )

    async def list_cryptocurrencies(
        self,
        start: int = 1,
        limit: int = 50,
        sort_field: str = "market_cap",
        sort_direction: str = "desc",
    ) -> List[Cryptocurrency]:
        """Get a page of listings.

        Args:
            start: 1-based rank offset
            limit: Number of listings
            sort_field: One of market_cap, price, volume, change, name
            sort_direction: "asc" or "desc"

        Returns:
            Listings, or an empty list if the provider is unavailable.
        """
        sort = map_sort_field(sort_field)
        direction = map_sort_direction(sort_direction)
        cache_key = f"cmc_listings_{start}_{limit}_{sort}_{direction}"

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("Retrieved cryptocurrencies from cache")
            return cached

        try:
            response = await self._get(
                "/cryptocurrency/listings/latest",
                params={"start": start, "limit": limit, "sort": sort, "sort_dir": direction},
            )
            items = (response or {}).get("data")
            if not items:
                logger.warning("No data returned from CoinMarketCap listings endpoint")
                return []

            cryptocurrencies = [self._to_cryptocurrency(item) for item in items]
        except Exception as e:
            logger.error(f"Error retrieving cryptocurrencies from CoinMarketCap: {e}")
            return []

        self.cache.set(cache_key, cryptocurrencies, LISTINGS_TTL_SECONDS)
        logger.info(f"Retrieved {len(cryptocurrencies)} cryptocurrencies from CoinMarketCap")
        return cryptocurrencies

    async def get_details(self, crypto_id: str) -> Optional[CryptocurrencyDetails]:
        """Get metadata joined with the latest quote.

        Returns:
            Details, or None if either endpoint has no data for the id or
            the provider is unavailable.
        """
        cache_key = f"cmc_crypto_{crypto_id}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Retrieved crypto details from cache for ID: {crypto_id}")
            return cached

        try:
            info_response = await self._get("/cryptocurrency/info", params={"id": crypto_id})
            info = ((info_response or {}).get("data") or {}).get(crypto_id)
            if not info:
                logger.warning(f"No data returned from CoinMarketCap info endpoint for ID: {crypto_id}")
                return None

            quotes_response = await self._get("/cryptocurrency/quotes/latest", params={"id": crypto_id})
            quote = ((quotes_response or {}).get("data") or {}).get(crypto_id)
            if not quote:
                logger.warning(f"No quotes data returned from CoinMarketCap for ID: {crypto_id}")
                return None

            usd = _usd_quote(quote)
            details = CryptocurrencyDetails(
                id=crypto_id,
                name=info.get("name", ""),
                symbol=info.get("symbol", ""),
                description=info.get("description") or "",
                algorithm=info.get("algorithm") or "N/A",
                price=_as_float(usd.get("price")),
                market_cap=_as_float(usd.get("market_cap")),
                volume_24h=_as_float(usd.get("volume_24h")),
                change_percentage_24h=_as_float(usd.get("percent_change_24h")),
                circulating_supply=_as_float(quote.get("circulating_supply")),
                total_supply=_as_float(quote.get("total_supply")),
                max_supply=_as_float(quote.get("max_supply")),
                rank=int(quote.get("cmc_rank") or 0),
                image_url=info.get("logo") or "",
                last_updated=_parse_timestamp(quote.get("last_updated")),
                tags=tuple(info.get("tags") or ()),
                price_change={
                    "1h": _as_float(usd.get("percent_change_1h")),
                    "24h": _as_float(usd.get("percent_change_24h")),
                    "7d": _as_float(usd.get("percent_change_7d")),
                    "30d": _as_float(usd.get("percent_change_30d")),
                },
            )
        except Exception as e:
            logger.error(f"Error retrieving cryptocurrency details from CoinMarketCap for ID: {crypto_id}: {e}")
            return None

        self.cache.set(cache_key, details, DETAILS_TTL_SECONDS)
        logger.info(f"Retrieved crypto details from CoinMarketCap for ID: {crypto_id}")
        return details

    def synthesize_history(
        self,
        details: CryptocurrencyDetails,
        interval: str,
        days: int,
        now: Optional[datetime] = None,
    ) -> PriceHistory:
        """Build ``days + 1`` daily points by a bounded random walk from the current price."""
        now = now or datetime.utcnow()
        price = details.price
        points = []

        for i in range(days, -1, -1):
            volatility = self.rng.random() * MAX_DAILY_VOLATILITY
            direction = -1 if self.rng.randrange(2) == 0 else 1
            price += price * volatility * direction
            if price <= 0:
                price = details.price * 0.1

            points.append(PricePoint(
                timestamp=now - timedelta(days=i),
                price=price,
                volume=details.volume_24h * (0.7 + self.rng.random() * 0.6),
            ))

        return PriceHistory(crypto_id=details.id, interval=interval, data=points)

    async def get_price_history(self, crypto_id: str, interval: str = "1d", days: int = 30) -> Optional[PriceHistory]:
        """Get (synthesized) price history.

        Returns:
            History with ``days + 1`` points, or None if the coin's current
            details are unavailable or carry no positive price.
        """
        cache_key = f"cmc_history_{crypto_id}_{interval}_{days}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Retrieved price history from cache for ID: {crypto_id}")
            return cached

        if days < 0:
            logger.warning(f"Refusing price history with negative day count {days} for ID: {crypto_id}")
            return None

        details = await self.get_details(crypto_id)
        if details is None:
            return None
        if details.price <= 0:
            logger.warning(f"No current price to seed price history for ID: {crypto_id}")
            return None

        history = self.synthesize_history(details, interval, days)
        self.cache.set(cache_key, history, HISTORY_TTL_SECONDS)
        logger.info(f"Generated price history for ID: {crypto_id}")
        return history

    async def get_global_metrics(self) -> GlobalMetrics:
        """Get market-wide metrics, or a zero-valued record on failure."""
        cache_key = "cmc_global_metrics"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("Retrieved global metrics from cache")
            return cached

        try:
            response = await self._get("/global-metrics/quotes/latest")
            data = (response or {}).get("data")
            if not data:
                logger.warning("No data returned from CoinMarketCap global metrics endpoint")
                return GlobalMetrics()

            usd = _usd_quote(data)
            metrics = GlobalMetrics(
                total_market_cap=_as_float(usd.get("total_market_cap")),
                total_volume_24h=_as_float(usd.get("total_volume_24h")),
                bitcoin_dominance=_as_float(data.get("btc_dominance")),
                active_cryptocurrencies=int(data.get("active_cryptocurrencies") or 0),
                active_exchanges=int(data.get("active_exchanges") or 0),
                market_cap_change_percentage_24h=_as_float(
                    usd.get("total_market_cap_yesterday_percentage_change")
                ),
            )
        except Exception as e:
            logger.error(f"Error retrieving global metrics from CoinMarketCap: {e}")
            return GlobalMetrics()

        self.cache.set(cache_key, metrics, GLOBAL_METRICS_TTL_SECONDS)
        logger.info("Retrieved global metrics from CoinMarketCap")
        return metrics

    async def search(self, query: Optional[str]) -> List[Cryptocurrency]:
        """Filter the top 100 by market cap on name or symbol, case-insensitively."""
        cryptocurrencies = await self.list_cryptocurrencies(1, SEARCH_UNIVERSE_SIZE, "market_cap", "desc")

        if not query or not query.strip():
            return cryptocurrencies

        needle = query.strip().lower()
        return [
            c for c in cryptocurrencies
            if needle in c.name.lower() or needle in c.symbol.lower()
        ]
