"""Pydantic schemas for the Earnings Analysis Agent output."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from research_portal.agents.schemas.base import Record

NOT_MENTIONED = "Not mentioned in document"


class ToneAssessment(Record):
    overall: Literal["optimistic", "cautious", "neutral", "pessimistic"]
    confidence: Literal["high", "medium", "low"]
    rationale: str = ""


class KeyPoint(Record):
    """A positive or concern raised on the call, backed by a quote."""

    point: str
    supporting_quote: str = Field(default="", alias="supporting_quote")
    category: str = "Other"


class GuidanceItem(Record):
    guidance: str = "Not provided"
    specificity: Literal["specific", "vague", "not_mentioned"] = "not_mentioned"


class OtherGuidance(Record):
    topic: str
    guidance: str


class ForwardGuidance(Record):
    revenue: GuidanceItem = Field(default_factory=GuidanceItem)
    margin: GuidanceItem = Field(default_factory=GuidanceItem)
    capex: GuidanceItem = Field(default_factory=GuidanceItem)
    other: list[OtherGuidance] = Field(default_factory=list)


class CapacityUtilization(Record):
    current: str = "Not mentioned"
    trend: Literal["improving", "declining", "stable", "not_mentioned"] = "not_mentioned"
    details: str = ""


class GrowthInitiative(Record):
    name: str
    description: str = ""
    timeline: str = "Not specified"
    investment: str = "Not specified"


class EarningsAnalysisResult(Record):
    """Structured analysis of an earnings call or management commentary."""

    company_name: str = Field(min_length=1)
    report_period: str = ""
    call_date: str = "Not specified"
    overall_tone: ToneAssessment

    key_positives: list[KeyPoint] = Field(default_factory=list)
    key_concerns: list[KeyPoint] = Field(default_factory=list)

    forward_guidance: ForwardGuidance = Field(default_factory=ForwardGuidance)
    capacity_utilization: CapacityUtilization = Field(default_factory=CapacityUtilization)
    growth_initiatives: list[GrowthInitiative] = Field(default_factory=list)

    extraction_notes: str = ""

    def with_note_prefix(self, prefix: str) -> EarningsAnalysisResult:
        """Copy of this result with ``prefix`` prepended to the notes."""
        return self.model_copy(update={"extraction_notes": prefix + self.extraction_notes})
