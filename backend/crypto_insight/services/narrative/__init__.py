# Narrative Generation
from .base import (
    NarrativeBackend,
    NarrativeGenerator,
    EMPTY_RESPONSE_TEXT,
    failure_text,
)
from .openai import OpenAIBackend
from .gemini import GeminiBackend

__all__ = [
    # Base
    "NarrativeBackend",
    "NarrativeGenerator",
    "EMPTY_RESPONSE_TEXT",
    "failure_text",
    # Backends
    "OpenAIBackend",
    "GeminiBackend",
]
