"""Pytest configuration and fixtures."""

import random
import pytest
from unittest.mock import AsyncMock, Mock
from httpx import AsyncClient, ASGITransport

from crypto_insight.dependencies import (
    get_analysis_service,
    get_crypto_service,
    get_market_service,
)
from crypto_insight.main import app
from crypto_insight.services.analysis import AnalysisService
from crypto_insight.services.cache import CacheStore
from crypto_insight.services.coinmarketcap import CoinMarketCapClient
from crypto_insight.services.crypto_service import CryptoService
from crypto_insight.services.http_client import HttpClient, UpstreamError
from crypto_insight.services.market_service import MarketService
from crypto_insight.services.narrative import NarrativeBackend, NarrativeGenerator


CMC_BASE_URL = "https://cmc.test/v1"


def _listing(coin_id, name, symbol, rank, price, volume, change):
    return {
        "id": coin_id,
        "name": name,
        "symbol": symbol,
        "cmc_rank": rank,
        "last_updated": "2024-01-01T00:00:00.000Z",
        "quote": {
            "USD": {
                "price": price,
                "market_cap": price * 1_000_000,
                "volume_24h": volume,
                "percent_change_24h": change,
            }
        },
    }


LISTINGS_RESPONSE = {
    "data": [
        _listing(1, "Bitcoin", "BTC", 1, 50000.0, 30_000_000_000.0, 2.5),
        _listing(1027, "Ethereum", "ETH", 2, 3000.0, 15_000_000_000.0, -1.2),
        _listing(74, "Dogecoin", "DOGE", 9, 0.08, 500_000_000.0, 4.0),
    ]
}

INFO_RESPONSE = {
    "data": {
        "1": {
            "id": 1,
            "name": "Bitcoin",
            "symbol": "BTC",
            "description": "Bitcoin is a peer-to-peer electronic cash system.",
            "algorithm": "SHA-256",
            "logo": "https://s2.coinmarketcap.com/static/img/coins/64x64/1.png",
            "tags": ["mineable", "pow"],
        }
    }
}

QUOTES_RESPONSE = {
    "data": {
        "1": {
            "id": 1,
            "cmc_rank": 1,
            "circulating_supply": 19_500_000,
            "total_supply": 19_500_000,
            "max_supply": 21_000_000,
            "last_updated": "2024-01-01T00:00:00.000Z",
            "quote": {
                "USD": {
                    "price": 50000.0,
                    "market_cap": 975_000_000_000.0,
                    "volume_24h": 30_000_000_000.0,
                    "percent_change_1h": 0.1,
                    "percent_change_24h": 2.5,
                    "percent_change_7d": 5.0,
                    "percent_change_30d": 10.0,
                }
            },
        }
    }
}

GLOBAL_METRICS_RESPONSE = {
    "data": {
        "btc_dominance": 52.3,
        "active_cryptocurrencies": 9000,
        "active_exchanges": 700,
        "quote": {
            "USD": {
                "total_market_cap": 2_000_000_000_000.0,
                "total_volume_24h": 80_000_000_000.0,
                "total_market_cap_yesterday_percentage_change": 1.7,
            }
        },
    }
}

CMC_RESPONSES = {
    "/cryptocurrency/listings/latest": LISTINGS_RESPONSE,
    "/cryptocurrency/info": INFO_RESPONSE,
    "/cryptocurrency/quotes/latest": QUOTES_RESPONSE,
    "/global-metrics/quotes/latest": GLOBAL_METRICS_RESPONSE,
}

TECHNICAL_TEXT = (
    "## Technical Summary\n"
    "BTC is in a clear uptrend.\n"
    "Support level near 45000 and resistance level around 55000.5 based on recent highs.\n"
    "RSI is 62.5 and MACD reads 120.3.\n"
    "Recommendation: Buy"
)

FUNDAMENTAL_TEXT = (
    "## Team Assessment\n"
    "Pseudonymous founder, strong open-source maintainers.\n"
    "## Technology Assessment\n"
    "Proof of work with a conservative upgrade path.\n"
    "## Community\n"
    "Large and very active.\n"
    "## Competition\n"
    "Faces competition from smart-contract platforms.\n"
    "Overall sentiment is positive. Recommendation: Strong Buy"
)

COMBINED_TEXT = (
    "## Integrated Overview\n"
    "Technical and fundamental signals agree.\n"
    "## Outlook\n"
    "Constructive over the medium term.\n"
    "Overall score: 82/100\n"
    "Final recommendation: Buy"
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class ScriptedBackend(NarrativeBackend):
    """Narrative backend answering from canned texts, picked by prompt kind."""

    name = "scripted"

    def __init__(self, technical=TECHNICAL_TEXT, fundamental=FUNDAMENTAL_TEXT, combined=COMBINED_TEXT, error=None):
        self.texts = {"combined": combined, "technical": technical, "fundamental": fundamental}
        self.error = error
        self.prompts = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        for kind, text in self.texts.items():
            if f"{kind} analysis for" in prompt:
                return text
        return ""


def route_get(responses):
    """Build a ``get_json`` side effect answering by URL suffix."""

    async def get_json(url, params=None, headers=None):
        for suffix, response in responses.items():
            if url.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response
        raise UpstreamError(f"GET {url} returned 404", status=404)

    return get_json


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return CacheStore(clock=clock)


@pytest.fixture
def cmc_responses():
    """Per-test copy of the upstream routes; tests may replace entries."""
    return dict(CMC_RESPONSES)


@pytest.fixture
def http(cmc_responses):
    """HttpClient stand-in answering CoinMarketCap GETs from ``cmc_responses``."""
    client = Mock(spec=HttpClient)
    client.get_json = AsyncMock(side_effect=route_get(cmc_responses))
    client.post_json = AsyncMock(return_value={})
    client.close = AsyncMock()
    return client


@pytest.fixture
def gateway(http, cache):
    return CoinMarketCapClient(
        http,
        cache,
        api_key="test-key",
        base_url=CMC_BASE_URL,
        rng=random.Random(42),
    )


@pytest.fixture
def backend():
    return ScriptedBackend()


@pytest.fixture
def generator(backend, cache):
    return NarrativeGenerator(backend, cache)


@pytest.fixture
def analysis_service(gateway, generator):
    return AnalysisService(gateway, generator)


@pytest.fixture
def crypto_service(gateway):
    return CryptoService(gateway)


@pytest.fixture
def market_service(gateway):
    return MarketService(gateway)


@pytest.fixture(scope="function")
async def client(crypto_service, market_service, analysis_service):
    """Create test client wired to stubbed upstream services."""
    app.dependency_overrides[get_crypto_service] = lambda: crypto_service
    app.dependency_overrides[get_market_service] = lambda: market_service
    app.dependency_overrides[get_analysis_service] = lambda: analysis_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
