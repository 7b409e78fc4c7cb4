"""
Narrative generation over interchangeable generative-text backends.

A backend only knows how to turn a prompt into text. The generator owns the
prompts, the cache policy and the failure policy, so both backends behave
identically apart from the wire format.
"""
import logging
from abc import ABC, abstractmethod

from ...models import CryptocurrencyDetails
from ..cache import CacheStore
from .prompts import (
    build_combined_prompt,
    build_fundamental_prompt,
    build_technical_prompt,
)

logger = logging.getLogger(__name__)

TECHNICAL_TTL_SECONDS = 60 * 60
FUNDAMENTAL_TTL_SECONDS = 24 * 60 * 60
COMBINED_TTL_SECONDS = 60 * 60

EMPTY_RESPONSE_TEXT = "No analysis could be generated at this time."


def failure_text(kind: str) -> str:
    """Sentinel returned in place of a narrative when generation fails."""
    return f"Unable to generate {kind} analysis at this time due to an error."


class NarrativeBackend(ABC):
    """A generative-text provider."""

    #: Short provider name, used as the cache-key prefix
    name: str = ""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Generate text for ``prompt``.

        Returns ``EMPTY_RESPONSE_TEXT`` for a well-formed response with no
        content. Raises ``UpstreamError`` (or a decoding error) on failure.
        """


class NarrativeGenerator:
    """Produces technical, fundamental and combined narratives.

    The three ``generate_*`` methods are the error boundary: any failure is
    logged and replaced by a sentinel string, which is never cached.
    """

    def __init__(self, backend: NarrativeBackend, cache: CacheStore):
        self.backend = backend
        self.cache = cache

    @property
    def provider(self) -> str:
        return self.backend.name

    async def _generate(self, kind: str, cache_key: str, ttl_seconds: int, prompt_factory, symbol: str) -> str:
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Retrieved {kind} analysis from cache for {symbol}")
            return cached

        try:
            analysis = await self.backend.complete(prompt_factory())
        except Exception as e:
            logger.error(f"Error generating {kind} analysis for {symbol} via {self.provider}: {e}")
            return failure_text(kind)

        if not analysis or not analysis.strip():
            logger.warning(f"Blank {kind} analysis from {self.provider} for {symbol}")
            return failure_text(kind)

        self.cache.set(cache_key, analysis, ttl_seconds)
        return analysis

    async def generate_technical(self, crypto: CryptocurrencyDetails, timeframe: str) -> str:
        """Technical narrative for one timeframe, cached for an hour."""
        return await self._generate(
            "technical",
            f"{self.provider}_technical_{crypto.id}_{timeframe}",
            TECHNICAL_TTL_SECONDS,
            lambda: build_technical_prompt(crypto, timeframe),
            crypto.symbol,
        )

    async def generate_fundamental(self, crypto: CryptocurrencyDetails) -> str:
        """Fundamental narrative, cached for a day."""
        return await self._generate(
            "fundamental",
            f"{self.provider}_fundamental_{crypto.id}",
            FUNDAMENTAL_TTL_SECONDS,
            lambda: build_fundamental_prompt(crypto),
            crypto.symbol,
        )

    async def generate_combined(self, technical: str, fundamental: str, crypto: CryptocurrencyDetails) -> str:
        """Integrative narrative over the two prior narratives, cached for an hour."""
        return await self._generate(
            "combined",
            f"{self.provider}_combined_{crypto.id}",
            COMBINED_TTL_SECONDS,
            lambda: build_combined_prompt(technical, fundamental, crypto),
            crypto.symbol,
        )
