"""Shared pytest fixtures for the Research Portal test suite."""

import pytest


@pytest.fixture
def financial_payload() -> dict:
    """Income statement as the model returns it (camelCase JSON)."""
    return {
        "companyName": "Acme Industrial Corp.",
        "reportType": "10-K",
        "documentTitle": "Annual Report 2023",
        "periods": ["FY2023", "FY2022"],
        "currency": "USD",
        "unit": "millions",
        "lineItems": [
            {
                "label": "Net sales",
                "standardLabel": "Total Revenue",
                "category": "Revenue",
                "isTotal": True,
                "values": {"FY2023": 1250.0, "FY2022": 1000.0},
                "confidence": "high",
                "notes": "",
            },
            {
                "label": "Cost of products sold",
                "standardLabel": "Cost of Revenue",
                "category": "Cost",
                "isTotal": False,
                "values": {"FY2023": -700.0, "FY2022": -560.0},
                "confidence": "medium",
                "notes": "",
            },
            {
                "label": "Research and development",
                "standardLabel": "R&D Expense",
                "category": "Operating Expense",
                "isTotal": False,
                "values": {"FY2023": -90.5, "FY2022": None},
                "confidence": "low",
                "notes": "Prior year not disclosed",
            },
            {
                "label": "Net income",
                "standardLabel": "Net Income",
                "category": "Net Income",
                "isTotal": True,
                "values": {"FY2023": 210.0},
                "confidence": "missing",
                "notes": "",
            },
        ],
        "extractionNotes": "Clean statement on page 42.",
    }


@pytest.fixture
def financial_result(financial_payload: dict):
    from research_portal.agents.schemas.financial import FinancialExtractionResult

    return FinancialExtractionResult.model_validate(financial_payload)


@pytest.fixture
def earnings_payload() -> dict:
    """Earnings analysis as the model returns it."""
    return {
        "companyName": "Acme Industrial Corp.",
        "reportPeriod": "Q4 FY2024",
        "callDate": "February 6, 2025",
        "overallTone": {
            "overall": "optimistic",
            "confidence": "high",
            "rationale": "Management cited record orders and raised guidance.",
        },
        "keyPositives": [
            {
                "point": "Record backlog entering the new year",
                "supporting_quote": "Our backlog stands at a record $2.1 billion.",
                "category": "Revenue Growth",
            },
            {
                "point": "Gross margin expanded 150 bps",
                "supporting_quote": "Gross margin reached 38.5%, up 150 basis points.",
                "category": "Margin Expansion",
            },
        ],
        "keyConcerns": [
            {
                "point": "European demand remains soft",
                "supporting_quote": "We continue to see softness in Europe.",
                "category": "Macro Headwind",
            },
        ],
        "forwardGuidance": {
            "revenue": {"guidance": "$5.2B to $5.4B", "specificity": "specific"},
            "margin": {"guidance": "Modest expansion", "specificity": "vague"},
            "capex": {"guidance": "Not provided", "specificity": "not_mentioned"},
            "other": [{"topic": "Buybacks", "guidance": "$300M authorization"}],
        },
        "capacityUtilization": {
            "current": "82%",
            "trend": "improving",
            "details": "Up from 78% a year ago.",
        },
        "growthInitiatives": [
            {
                "name": "Monterrey plant",
                "description": "New facility for heat exchangers.",
                "timeline": "Operational 2026",
                "investment": "$150M",
            },
        ],
        "extractionNotes": "Full transcript including Q&A.",
    }


@pytest.fixture
def clear_settings():
    """Drop the cached settings so monkeypatched env vars take effect."""
    from research_portal.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
