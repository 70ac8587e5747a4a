"""Pydantic schemas for the Financial Extraction Agent output.

Attributes are snake_case; the JSON boundary uses the camelCase keys the
extraction prompt asks the model for.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator, model_validator

from research_portal.agents.schemas.base import Record

Confidence = Literal["high", "medium", "low", "missing"]
Unit = Literal["billions", "millions", "thousands", "actual"]

CONFIDENCE_LEVELS: tuple[str, ...] = ("high", "medium", "low", "missing")

CATEGORIES: tuple[str, ...] = (
    "Revenue",
    "Cost",
    "Gross Profit",
    "Operating Expense",
    "Operating Income",
    "Non-Operating",
    "Pre-tax Income",
    "Tax",
    "Net Income",
    "Per Share",
    "Other",
)

_CATEGORY_LOOKUP = {c.lower(): c for c in CATEGORIES}


class FinancialLineItem(Record):
    """A single income statement row as extracted from the document."""

    label: str = Field(description="Exact original label from the document")
    standard_label: str = Field(default="", description="Standardized name")
    category: str
    is_total: bool = False
    values: dict[str, float | None] = Field(default_factory=dict)
    confidence: Confidence
    notes: str = ""

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        key = " ".join(value.split()).lower()
        if key not in _CATEGORY_LOOKUP:
            raise ValueError(f"unknown category {value!r}")
        return _CATEGORY_LOOKUP[key]

    @field_validator("confidence", mode="before")
    @classmethod
    def _lower_confidence(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("notes", mode="before")
    @classmethod
    def _none_notes(cls, value: object) -> object:
        return "" if value is None else value

    @model_validator(mode="after")
    def _default_standard_label(self) -> FinancialLineItem:
        if not self.standard_label:
            # frozen model: bypass __setattr__ during validation
            object.__setattr__(self, "standard_label", self.label)
        return self

    def value_for(self, period: str) -> float | None:
        """Value for a period; absent periods read as missing."""
        return self.values.get(period)


class FinancialExtractionResult(Record):
    """One document's extracted income statement."""

    company_name: str = Field(min_length=1)
    report_type: str = ""
    document_title: str = ""
    periods: list[str] = Field(description="Period labels, most recent first")
    currency: str = "USD"
    unit: Unit = "millions"
    line_items: list[FinancialLineItem]
    extraction_notes: str = ""

    @field_validator("currency", mode="before")
    @classmethod
    def _upper_currency(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("unit", mode="before")
    @classmethod
    def _lower_unit(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("report_type", "document_title", "extraction_notes", mode="before")
    @classmethod
    def _none_text(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("periods")
    @classmethod
    def _unique_periods(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("period labels must be unique")
        return value

    def confidence_counts(self) -> dict[str, int]:
        """Number of line items at each confidence level, in fixed order."""
        counts = dict.fromkeys(CONFIDENCE_LEVELS, 0)
        for item in self.line_items:
            counts[item.confidence] += 1
        return counts

    def with_note_prefix(self, prefix: str) -> FinancialExtractionResult:
        """Copy of this result with ``prefix`` prepended to the notes."""
        return self.model_copy(update={"extraction_notes": prefix + self.extraction_notes})
