"""Tests for analysis API endpoints."""

import pytest
from unittest.mock import AsyncMock

from crypto_insight.services.http_client import UpstreamError


@pytest.mark.asyncio
async def test_technical_analysis(client):
    """Test technical analysis envelope and record."""
    response = await client.get("/api/analysis/technical/1", params={"timeframe": "7d"})
    assert response.status_code == 200
    body = response.json()

    assert body["success"] is True
    assert body["message"] == "Technical analysis retrieved successfully"
    data = body["data"]
    assert data["type"] == "Technical"
    assert data["timeframe"] == "7d"
    assert data["recommendation"] in {"Strong Buy", "Buy", "Hold", "Sell", "Strong Sell"}
    assert data["trend_direction"] in {"Bullish", "Bearish", "Neutral"}
    assert data["support_levels"] == {"key": 45000.0}


@pytest.mark.asyncio
async def test_technical_analysis_not_found(client):
    """Unknown ids are 404, not a generic failure."""
    response = await client.get("/api/analysis/technical/999")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Cryptocurrency with ID 999 not found"
    assert data["error_code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_fundamental_analysis(client):
    response = await client.get("/api/analysis/fundamental/1")
    assert response.status_code == 200
    data = response.json()["data"]

    assert data["type"] == "Fundamental"
    assert data["market_sentiment"] == "Positive"
    assert data["recent_news"] == []


@pytest.mark.asyncio
async def test_combined_analysis(client):
    response = await client.get("/api/analysis/combined/1")
    assert response.status_code == 200
    data = response.json()["data"]

    assert data["type"] == "Combined"
    assert data["overall_score"] == 82
    assert data["technical_data"]["type"] == "Technical"
    assert data["fundamental_data"]["type"] == "Fundamental"


@pytest.mark.asyncio
async def test_combined_analysis_not_found(client):
    response = await client.get("/api/analysis/combined/999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_generator_outage_still_returns_analysis(client, backend):
    """A failing narrative backend degrades to sentinel text with default fields."""
    backend.error = UpstreamError("quota exceeded", status=429)

    response = await client.get("/api/analysis/combined/1")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["overall_score"] == 50
    assert data["summary"] == "Unable to generate combined analysis at this time due to an error."


@pytest.mark.asyncio
async def test_unexpected_error_is_generic_500(client, analysis_service):
    """Internal failures never leak details."""
    analysis_service.get_fundamental = AsyncMock(side_effect=RuntimeError("secret stack detail"))

    response = await client.get("/api/analysis/fundamental/1")
    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Failed to retrieve fundamental analysis for 1"
    assert "secret" not in response.text
