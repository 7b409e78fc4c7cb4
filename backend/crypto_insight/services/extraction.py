"""Heuristic extraction of structured fields from narrative analysis text.

Everything here is a pure function of its inputs. Each heuristic is an
ordered series of case-insensitive substring or regex checks with a fixed
fallback, and none of them raise for ordinary input: malformed or unexpected
model output always resolves to a documented default so the aggregation
service can build a complete analysis record.

The heuristics are approximate on purpose. "buy" matches inside "buyers",
"hold" inside "holders", and the first number after a keyword wins even if
it belongs to a different sentence.
"""

import logging
import re
from typing import Optional, Sequence, Tuple

from ..models import Recommendation, TrendDirection

logger = logging.getLogger(__name__)

NUMBER_WINDOW = 100
NUMBER_PATTERN = re.compile(r"[-+]?\d*\.?\d+")

# A line that starts a new section: markdown heading or "Capitalized Words:"
NEXT_SECTION_PATTERN = re.compile(r"(\n#+\s|\n[A-Z][a-zA-Z\s]+:)")
SECTION_SUFFIXES = ("", " Assessment", " Analysis", " Evaluation")

PREVIEW_LENGTH = 100

TREND_RULES: Sequence[Tuple[Tuple[str, ...], TrendDirection]] = (
    (("uptrend", "bullish"), TrendDirection.BULLISH),
    (("downtrend", "bearish"), TrendDirection.BEARISH),
    (("sideways", "neutral", "ranging"), TrendDirection.NEUTRAL),
)

# "strong ..." must be checked before the plain label it contains
RECOMMENDATION_RULES: Sequence[Tuple[Tuple[str, ...], Recommendation]] = (
    (("strong buy",), Recommendation.STRONG_BUY),
    (("buy",), Recommendation.BUY),
    (("strong sell",), Recommendation.STRONG_SELL),
    (("sell",), Recommendation.SELL),
    (("hold", "neutral"), Recommendation.HOLD),
)

# Order is significant: first keyword found wins
SENTIMENT_KEYWORDS: Sequence[Tuple[str, str]] = (
    ("very positive", "Very Positive"),
    ("positive", "Positive"),
    ("neutral", "Neutral"),
    ("negative", "Negative"),
    ("very negative", "Very Negative"),
    ("bullish", "Bullish"),
    ("bearish", "Bearish"),
)
DEFAULT_SENTIMENT = "Neutral"

SCORE_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"score:?\s*(\d+)(?:/100)?",
        r"rating:?\s*(\d+)(?:/100)?",
        r"overall\s+score:?\s*(\d+)(?:/100)?",
        r"overall\s+rating:?\s*(\d+)(?:/100)?",
    )
)

RECOMMENDATION_SCORES = {
    Recommendation.STRONG_BUY.value: 90,
    Recommendation.BUY.value: 75,
    Recommendation.HOLD.value: 50,
    Recommendation.SELL.value: 25,
    Recommendation.STRONG_SELL.value: 10,
}
DEFAULT_SCORE = 50


def clamp_score(score: int) -> int:
    return max(0, min(100, score))


def extract_decimal(text: Optional[str], keyword: str, default: float) -> float:
    """Return the first number within 100 characters of ``keyword``.

    The window starts at the first case-insensitive occurrence of the
    keyword. Falls back to ``default`` when the keyword or a number is
    missing.

    >>> extract_decimal("Resistance level around 45231.7 based on...", "resistance", 0)
    45231.7
    """
    if not text or not keyword:
        return default

    index = text.lower().find(keyword.lower())
    if index < 0:
        return default

    match = NUMBER_PATTERN.search(text[index:index + NUMBER_WINDOW])
    if match is None:
        return default

    try:
        return float(match.group())
    except ValueError:
        return default


def _contains_any(haystack: str, needles: Sequence[str]) -> bool:
    return any(needle in haystack for needle in needles)


def extract_trend(text: Optional[str]) -> str:
    """Classify the trend as Bullish, Bearish or Neutral (the default)."""
    lowered = (text or "").lower()
    for keywords, trend in TREND_RULES:
        if _contains_any(lowered, keywords):
            return trend.value
    return TrendDirection.NEUTRAL.value


def extract_recommendation(text: Optional[str]) -> str:
    """Map the text to one of the five recommendation labels, Hold by default."""
    lowered = (text or "").lower()
    for keywords, recommendation in RECOMMENDATION_RULES:
        if _contains_any(lowered, keywords):
            return recommendation.value
    return Recommendation.HOLD.value


def extract_section(text: Optional[str], section_name: str) -> str:
    """Return the body of the first section whose header mentions ``section_name``.

    Header variants are tried in order: the bare name, then with
    " Assessment", " Analysis" and " Evaluation". The body runs from the line
    after the header to the next heading-like line.
    """
    name = section_name.lower()
    try:
        lowered = text.lower()
        for suffix in SECTION_SUFFIXES:
            header_index = lowered.find(name + suffix.lower())
            if header_index < 0:
                continue

            newline_index = text.find("\n", header_index)
            if newline_index < 0:
                continue

            start = newline_index + 1
            next_section = NEXT_SECTION_PATTERN.search(text, start)
            end = next_section.start() if next_section else len(text)
            return text[start:end].strip()

        return f"No {name} assessment available."
    except Exception as e:
        logger.warning(f"Failed to extract {section_name} section: {e}")
        return f"Error extracting {name} information."


def extract_sentiment(text: Optional[str]) -> str:
    """Return the label of the first sentiment keyword found, Neutral by default."""
    lowered = (text or "").lower()
    for keyword, label in SENTIMENT_KEYWORDS:
        if keyword in lowered:
            return label
    return DEFAULT_SENTIMENT


def score_for_recommendation(recommendation: str) -> int:
    return RECOMMENDATION_SCORES.get(recommendation, DEFAULT_SCORE)


def extract_score(text: Optional[str]) -> int:
    """Extract a 0-100 score.

    Tries "score", "rating", "overall score" and "overall rating" patterns in
    that order; if none match, derives the score from the recommendation
    (Strong Buy 90, Buy 75, Hold 50, Sell 25, Strong Sell 10).
    """
    try:
        source = text or ""
        for pattern in SCORE_PATTERNS:
            match = pattern.search(source)
            if not match:
                continue
            try:
                return clamp_score(int(match.group(1)))
            except ValueError:
                continue

        return score_for_recommendation(extract_recommendation(source))
    except Exception as e:
        logger.warning(f"Failed to extract score, using default: {e}")
        return DEFAULT_SCORE


def truncate_preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """Shorten ``text`` to ``length`` characters plus an ellipsis."""
    if len(text) > length:
        return text[:length] + "..."
    return text
