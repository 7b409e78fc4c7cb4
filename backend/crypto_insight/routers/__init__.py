# API Routers

from . import health, crypto, market, analysis

__all__ = ["health", "crypto", "market", "analysis"]
