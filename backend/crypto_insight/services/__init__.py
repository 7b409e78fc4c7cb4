# Business Logic Services

from .cache import CacheStore
from .http_client import HttpClient, UpstreamError
from .coinmarketcap import CoinMarketCapClient
from .crypto_service import CryptoService, CryptoPage
from .market_service import MarketService
from .narrative import (
    NarrativeBackend,
    NarrativeGenerator,
    OpenAIBackend,
    GeminiBackend,
)
from .analysis import AnalysisService, CryptoNotFoundError
from .config import (
    ConfigService,
    config_service,
    ConfigValidationException,
    ConfigValidationError,
)
from .logging_service import setup_logging

__all__ = [
    # Infrastructure
    "CacheStore",
    "HttpClient",
    "UpstreamError",
    # Market data
    "CoinMarketCapClient",
    "CryptoService",
    "CryptoPage",
    "MarketService",
    # Narrative
    "NarrativeBackend",
    "NarrativeGenerator",
    "OpenAIBackend",
    "GeminiBackend",
    # Analysis
    "AnalysisService",
    "CryptoNotFoundError",
    # Config
    "ConfigService",
    "config_service",
    "ConfigValidationException",
    "ConfigValidationError",
    # Logging
    "setup_logging",
]
