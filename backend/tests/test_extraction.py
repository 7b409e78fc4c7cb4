"""Tests for heuristic extraction from narrative text."""

import sys
import pytest

from crypto_insight.services.extraction import (
    clamp_score,
    extract_decimal,
    extract_recommendation,
    extract_score,
    extract_section,
    extract_sentiment,
    extract_trend,
    truncate_preview,
)


# =============================================================================
# Numbers
# =============================================================================

class TestExtractDecimal:
    """First number within 100 characters of a keyword."""

    def test_finds_number_after_keyword(self):
        text = "Resistance level around 45231.7 based on..."
        assert extract_decimal(text, "resistance", 0) == 45231.7

    def test_missing_keyword_returns_default(self):
        assert extract_decimal("no support mentioned", "resistance", 999) == 999

    def test_keyword_without_number_returns_default(self):
        assert extract_decimal("no resistance mentioned", "resistance", 999) == 999

    def test_number_outside_window_ignored(self):
        text = "RSI" + " " * 120 + "70"
        assert extract_decimal(text, "RSI", 50.0) == 50.0

    def test_negative_number(self):
        assert extract_decimal("MACD: -12.5 and falling", "MACD", 0.0) == -12.5

    def test_first_occurrence_wins(self):
        text = "support at 100. Later, another support at 200."
        assert extract_decimal(text, "support", 0) == 100

    def test_empty_or_none_text(self):
        assert extract_decimal("", "support", 1.5) == 1.5
        assert extract_decimal(None, "support", 1.5) == 1.5


# =============================================================================
# Labels
# =============================================================================

class TestExtractTrend:
    """Bullish, Bearish, Neutral in priority order."""

    @pytest.mark.parametrize("text,expected", [
        ("Price is in a strong uptrend", "Bullish"),
        ("Bullish momentum continues", "Bullish"),
        ("Clear DOWNTREND on the daily chart", "Bearish"),
        ("bearish divergence on RSI", "Bearish"),
        ("Trading sideways", "Neutral"),
        ("The market is ranging", "Neutral"),
        ("Nothing to see here", "Neutral"),
        ("", "Neutral"),
    ])
    def test_classification(self, text, expected):
        assert extract_trend(text) == expected

    def test_bullish_checked_before_bearish(self):
        assert extract_trend("short-term bearish, long-term bullish") == "Bullish"

    def test_none_defaults_to_neutral(self):
        assert extract_trend(None) == "Neutral"


class TestExtractRecommendation:
    """Strong variants take precedence over plain labels."""

    @pytest.mark.parametrize("text,expected", [
        ("strong buy this dip", "Strong Buy"),
        ("I'd buy more", "Buy"),
        ("consider to hold", "Hold"),
        ("STRONG SELL now", "Strong Sell"),
        ("time to sell", "Sell"),
        ("neutral stance", "Hold"),
        ("no opinion", "Hold"),
    ])
    def test_classification(self, text, expected):
        assert extract_recommendation(text) == expected

    def test_buy_checked_before_sell(self):
        assert extract_recommendation("sell the rip, buy the dip") == "Buy"

    def test_substring_matches_count(self):
        # "buyers" contains "buy"
        assert extract_recommendation("buyers are absent, hold") == "Buy"

    def test_result_always_a_known_label(self):
        labels = {"Strong Buy", "Buy", "Hold", "Sell", "Strong Sell"}
        for text in ("", "%%%", "12345", None):
            assert extract_recommendation(text) in labels


class TestExtractSentiment:
    """First keyword in table order wins."""

    def test_positive(self):
        assert extract_sentiment("Market sentiment is positive") == "Positive"

    def test_very_positive(self):
        assert extract_sentiment("Very positive reception") == "Very Positive"

    def test_table_order_not_text_order(self):
        # "neutral" is checked before "negative" regardless of position
        assert extract_sentiment("negative news, neutral outlook") == "Neutral"

    def test_very_negative_shadowed_by_negative(self):
        assert extract_sentiment("very negative") == "Negative"

    def test_bullish_when_no_polarity_word(self):
        assert extract_sentiment("holders are bullish") == "Bullish"

    def test_default_neutral(self):
        assert extract_sentiment("no signal") == "Neutral"
        assert extract_sentiment(None) == "Neutral"


# =============================================================================
# Sections
# =============================================================================

FUNDAMENTAL = (
    "# Overview\n"
    "A layer one chain.\n"
    "## Team Assessment\n"
    "Experienced founders.\n"
    "Strong engineering bench.\n"
    "## Technology\n"
    "Novel consensus.\n"
    "Community Evaluation:\n"
    "Growing fast.\n"
)


class TestExtractSection:
    """Section bodies between heading-like lines."""

    def test_markdown_heading_terminates_section(self):
        assert extract_section(FUNDAMENTAL, "Team") == "Experienced founders.\nStrong engineering bench."

    def test_capitalized_label_terminates_section(self):
        assert extract_section(FUNDAMENTAL, "Technology") == "Novel consensus."

    def test_last_section_runs_to_end(self):
        assert extract_section(FUNDAMENTAL, "Community") == "Growing fast."

    def test_header_with_trailing_words(self):
        text = "Intro\nCompetition Analysis\nCrowded field.\n"
        assert extract_section(text, "Competition") == "Crowded field."

    def test_missing_section_placeholder(self):
        assert extract_section(FUNDAMENTAL, "Tokenomics") == "No tokenomics assessment available."

    def test_header_on_last_line_has_no_body(self):
        assert extract_section("Some text\nTeam", "Team") == "No team assessment available."

    def test_none_text_returns_error_placeholder(self):
        assert extract_section(None, "Team") == "Error extracting team information."


# =============================================================================
# Score
# =============================================================================

class TestExtractScore:
    """Explicit score first, recommendation-derived score second."""

    def test_overall_score(self):
        assert extract_score("Overall Score: 83/100") == 83

    def test_rating(self):
        assert extract_score("Rating 64") == 64

    def test_derived_from_recommendation(self):
        assert extract_score("no score mentioned, but Buy recommended") == 75

    @pytest.mark.parametrize("text,expected", [
        ("Strong Buy", 90),
        ("Hold", 50),
        ("Sell", 25),
        ("Strong Sell", 10),
        ("nothing useful", 50),
    ])
    def test_recommendation_mapping(self, text, expected):
        assert extract_score(text) == expected

    def test_clamped_to_100(self):
        assert extract_score("Score: 250") == 100

    @pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="int parsing has no digit limit")
    def test_unparseable_match_falls_through_to_next_pattern(self):
        text = "score: " + "9" * 5000 + "\nRating: 40"
        assert extract_score(text) == 40

    def test_sentinel_text_yields_default(self):
        text = "Unable to generate combined analysis at this time due to an error."
        assert extract_score(text) == 50

    @pytest.mark.parametrize("text", ["", None, "\x00\xff", "score: ", "rating::::", "9" * 500])
    def test_garbage_stays_in_range(self, text):
        score = extract_score(text)
        assert 0 <= score <= 100


class TestHelpers:
    """Small formatting helpers."""

    @pytest.mark.parametrize("value,expected", [(-5, 0), (0, 0), (42, 42), (100, 100), (101, 100)])
    def test_clamp_score(self, value, expected):
        assert clamp_score(value) == expected

    def test_truncate_preview_long(self):
        text = "x" * 150
        assert truncate_preview(text) == "x" * 100 + "..."

    def test_truncate_preview_short(self):
        assert truncate_preview("short") == "short"
