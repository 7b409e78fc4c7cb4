"""
OpenAI chat-completions backend.
"""
import logging
from typing import Any, Dict

from ..http_client import HttpClient
from .base import EMPTY_RESPONSE_TEXT, NarrativeBackend
from .prompts import SYSTEM_INSTRUCTION

logger = logging.getLogger(__name__)


class OpenAIBackend(NarrativeBackend):
    """Sends the prompt as a user message after a fixed system instruction."""

    name = "openai"

    def __init__(
        self,
        http: HttpClient,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o",
        temperature: float = 0.2,
    ):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
        }

    async def complete(self, prompt: str) -> str:
        response = await self.http.post_json(
            f"{self.base_url}/chat/completions",
            self.build_payload(prompt),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

        choices = (response or {}).get("choices") or []
        if not choices:
            logger.warning("Empty response received from OpenAI")
            return EMPTY_RESPONSE_TEXT

        return choices[0]["message"]["content"]
