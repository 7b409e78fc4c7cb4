"""
Google Gemini generateContent backend.
"""
import logging
from typing import Any, Dict

from ..http_client import HttpClient
from .base import EMPTY_RESPONSE_TEXT, NarrativeBackend

logger = logging.getLogger(__name__)


class GeminiBackend(NarrativeBackend):
    """Single-turn generateContent request; the API key travels in the query string."""

    name = "gemini"

    def __init__(
        self,
        http: HttpClient,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-2.0-flash",
    ):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model

    @staticmethod
    def build_payload(prompt: str) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    async def complete(self, prompt: str) -> str:
        response = await self.http.post_json(
            f"{self.base_url}/models/{self.model}:generateContent",
            self.build_payload(prompt),
            params={"key": self.api_key},
            headers={"Content-Type": "application/json"},
        )

        candidates = (response or {}).get("candidates") or []
        parts = ((candidates[0].get("content") or {}).get("parts") or []) if candidates else []
        if not parts:
            logger.warning("Empty response received from Gemini")
            return EMPTY_RESPONSE_TEXT

        return parts[0]["text"]
