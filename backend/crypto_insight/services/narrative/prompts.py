"""Prompt builders for the narrative generator."""

from typing import List

from ...models import CryptocurrencyDetails

SYSTEM_INSTRUCTION = (
    "You are a professional cryptocurrency analyst specializing in both technical "
    "and fundamental analysis. Provide detailed, data-driven insights without "
    "disclosures or disclaimers."
)

FORMAT_INSTRUCTION = (
    "Format the response in a clear, professional structure with headers for each "
    "section. Do not include any disclaimers or reminders that this is AI-generated content."
)

TECHNICAL_SECTIONS = (
    "A summary of the current technical situation",
    "Key support and resistance levels",
    "Technical indicators (RSI, MACD, Moving Averages, etc.)",
    "Volume analysis",
    "An overall trend direction assessment",
    "A clear recommendation (Buy, Sell, Hold)",
)

FUNDAMENTAL_SECTIONS = (
    "Project overview and core value proposition",
    "Team assessment (based on general knowledge)",
    "Technology assessment and innovation potential",
    "Market positioning and competition",
    "Tokenomics analysis (supply, distribution, utility)",
    "Community strength and ecosystem development",
    "An overall project assessment",
    "A clear recommendation (Strong Buy, Buy, Hold, Sell, Strong Sell)",
)

COMBINED_SECTIONS = (
    "An integrated overview that weighs both technical and fundamental factors",
    "Identification of any conflicting signals between technical and fundamental indicators",
    "A balanced investment thesis considering short, medium, and long-term outlook",
    "Risk assessment highlighting key concerns from both perspectives",
    "An overall rating score from 0-100",
    "A final recommendation with conviction level (Strong Buy, Buy, Hold, Sell, Strong Sell)",
)


def _numbered(lines: List[str], items) -> None:
    for number, item in enumerate(items, start=1):
        lines.append(f"{number}. {item}")


def build_technical_prompt(crypto: CryptocurrencyDetails, timeframe: str) -> str:
    lines = [
        f"Provide a detailed technical analysis for {crypto.name} ({crypto.symbol}) with the following data:",
        f"- Current Price: ${crypto.price}",
        f"- Market Cap: ${crypto.market_cap}",
        f"- 24h Volume: ${crypto.volume_24h}",
        f"- 24h Change: {crypto.change_percentage_24h}%",
    ]
    if crypto.price_change:
        lines.append("- Price Changes:")
        lines.extend(f"  - {period}: {change}%" for period, change in crypto.price_change.items())

    lines.append(f"Timeframe for analysis: {timeframe}")
    lines.append("Include the following in your analysis:")
    _numbered(lines, TECHNICAL_SECTIONS)
    lines.append(FORMAT_INSTRUCTION)
    return "\n".join(lines) + "\n"


def build_fundamental_prompt(crypto: CryptocurrencyDetails) -> str:
    lines = [
        f"Provide a detailed fundamental analysis for {crypto.name} ({crypto.symbol}) with the following data:",
        f"- Current Price: ${crypto.price}",
        f"- Market Cap: ${crypto.market_cap}",
        f"- Circulating Supply: {crypto.circulating_supply}",
        f"- Total Supply: {crypto.total_supply}",
        f"- Max Supply: {crypto.max_supply}",
    ]
    if crypto.tags:
        lines.append("- Tags/Categories:")
        lines.extend(f"  - {tag}" for tag in crypto.tags)

    lines.append(f"- Project Description: {crypto.description}")
    lines.append("Include the following in your analysis:")
    _numbered(lines, FUNDAMENTAL_SECTIONS)
    lines.append(FORMAT_INSTRUCTION)
    return "\n".join(lines) + "\n"


def build_combined_prompt(technical: str, fundamental: str, crypto: CryptocurrencyDetails) -> str:
    lines = [
        f"Create a comprehensive combined analysis for {crypto.name} ({crypto.symbol}) "
        "by integrating the technical and fundamental analyses below.",
        "",
        "=== TECHNICAL ANALYSIS ===",
        "",
        technical,
        "",
        "=== FUNDAMENTAL ANALYSIS ===",
        "",
        fundamental,
        "",
        "Based on both analyses, provide:",
    ]
    _numbered(lines, COMBINED_SECTIONS)
    lines.append(FORMAT_INSTRUCTION)
    return "\n".join(lines) + "\n"
