"""Market data records.

Snapshots returned by the market-data gateway. They are frozen: a refresh
replaces the cached object instead of mutating it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Cryptocurrency:
    """Listing-level snapshot of a cryptocurrency."""
    id: str
    name: str
    symbol: str
    price: float = 0.0
    market_cap: float = 0.0
    volume_24h: float = 0.0
    change_percentage_24h: float = 0.0
    rank: int = 0
    last_updated: Optional[datetime] = None
    image_url: str = ""


@dataclass(frozen=True)
class CryptocurrencyDetails(Cryptocurrency):
    """Cryptocurrency snapshot joined with project metadata."""
    description: str = ""
    algorithm: str = "N/A"
    circulating_supply: float = 0.0
    total_supply: float = 0.0
    max_supply: float = 0.0
    # keys: 1h, 24h, 7d, 30d
    price_change: Dict[str, float] = field(default_factory=dict)
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PricePoint:
    """Single point of a price series."""
    timestamp: datetime
    price: float
    volume: float


@dataclass(frozen=True)
class PriceHistory:
    """Price series for a cryptocurrency, oldest point first."""
    crypto_id: str
    interval: str
    data: List[PricePoint] = field(default_factory=list)


@dataclass(frozen=True)
class GlobalMetrics:
    """Market-wide metrics. All-zero instance means the provider was unavailable."""
    total_market_cap: float = 0.0
    total_volume_24h: float = 0.0
    bitcoin_dominance: float = 0.0
    active_cryptocurrencies: int = 0
    active_exchanges: int = 0
    market_cap_change_percentage_24h: float = 0.0


@dataclass
class MarketOverview:
    """Global metrics plus the currently trending coins."""
    global_metrics: GlobalMetrics
    trending_coins: List[Cryptocurrency]
    last_updated: datetime = field(default_factory=datetime.utcnow)
