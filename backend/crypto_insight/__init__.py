"""Crypto Insight: market data and generated analysis behind one REST API."""

__version__ = "1.0.0"
