"""Service wiring and FastAPI dependency providers.

One ``ServiceContainer`` is built per process in the application lifespan and
stored on ``app.state``. Routers get their services through the ``get_*``
providers below, which tests replace via ``app.dependency_overrides``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from .services.analysis import AnalysisService
from .services.cache import CacheStore
from .services.coinmarketcap import CoinMarketCapClient
from .services.config import ConfigService
from .services.crypto_service import CryptoService
from .services.http_client import HttpClient
from .services.market_service import MarketService
from .services.narrative import (
    GeminiBackend,
    NarrativeBackend,
    NarrativeGenerator,
    OpenAIBackend,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Process-lifetime service graph sharing one cache and one HTTP client."""
    cache: CacheStore
    http: HttpClient
    gateway: CoinMarketCapClient
    generator: NarrativeGenerator
    crypto_service: CryptoService
    market_service: MarketService
    analysis_service: AnalysisService

    async def close(self) -> None:
        await self.http.close()


def build_backend(config: ConfigService, http: HttpClient) -> NarrativeBackend:
    """Instantiate the generative-text backend named by ``analysis.provider``."""
    provider = config.get("analysis.provider", "gemini")

    if provider == "openai":
        return OpenAIBackend(
            http,
            api_key=config.get("openai.api_key", ""),
            base_url=config.get("openai.base_url"),
            model=config.get("openai.model"),
            temperature=config.get("openai.temperature", 0.2),
        )
    if provider == "gemini":
        return GeminiBackend(
            http,
            api_key=config.get("gemini.api_key", ""),
            base_url=config.get("gemini.base_url"),
            model=config.get("gemini.model"),
        )
    raise ValueError(f"Unknown analysis provider: {provider}")


def build_services(
    config: ConfigService,
    cache: Optional[CacheStore] = None,
    http: Optional[HttpClient] = None,
) -> ServiceContainer:
    """Build the service graph from configuration."""
    if cache is None:
        cache = CacheStore()
    if http is None:
        http = HttpClient(timeout_seconds=config.get("http.timeout_seconds", 30))

    gateway = CoinMarketCapClient(
        http,
        cache,
        api_key=config.get("coinmarketcap.api_key", ""),
        base_url=config.get("coinmarketcap.base_url"),
    )
    backend = build_backend(config, http)
    generator = NarrativeGenerator(backend, cache)
    logger.info(f"Narrative generation provider: {backend.name}")

    return ServiceContainer(
        cache=cache,
        http=http,
        gateway=gateway,
        generator=generator,
        crypto_service=CryptoService(gateway),
        market_service=MarketService(gateway),
        analysis_service=AnalysisService(gateway, generator),
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_crypto_service(request: Request) -> CryptoService:
    return get_services(request).crypto_service


def get_market_service(request: Request) -> MarketService:
    return get_services(request).market_service


def get_analysis_service(request: Request) -> AnalysisService:
    return get_services(request).analysis_service
