"""Plain-text report for an earnings analysis."""

from __future__ import annotations

from datetime import datetime

from research_portal.agents.schemas.earnings import EarningsAnalysisResult, KeyPoint
from research_portal.config.settings import get_settings

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

EMPTY_SECTION = "None identified."


def _section(title: str) -> list[str]:
    return ["", title, "-" * 40]


def _key_points(points: list[KeyPoint]) -> list[str]:
    if not points:
        return [EMPTY_SECTION]
    lines = []
    for i, p in enumerate(points, 1):
        lines.append(f"{i}. {p.point}")
        if p.supporting_quote:
            lines.append(f'   "{p.supporting_quote}"')
        lines.append(f"   Category: {p.category}")
    return lines


def render_summary(
    result: EarningsAnalysisResult,
    document_name: str = "",
    generated_at: datetime | None = None,
) -> str:
    """Serialize an earnings analysis into a flat, human-readable report."""
    if generated_at is None:
        generated_at = datetime.now()
    tool = get_settings().tool_name
    tone = result.overall_tone
    guidance = result.forward_guidance
    capacity = result.capacity_utilization

    lines = [
        f"{tool} - Earnings Call Analysis",
        "=" * 60,
        f"Company: {result.company_name}",
        f"Period: {result.report_period}",
        f"Call Date: {result.call_date}",
        "",
        f"OVERALL TONE: {tone.overall.upper()} (Confidence: {tone.confidence})",
        f"Rationale: {tone.rationale}",
    ]

    lines += _section("KEY POSITIVES")
    lines += _key_points(result.key_positives)

    lines += _section("KEY CONCERNS")
    lines += _key_points(result.key_concerns)

    lines += _section("FORWARD GUIDANCE")
    lines += [
        f"Revenue: {guidance.revenue.guidance} [{guidance.revenue.specificity}]",
        f"Margin:  {guidance.margin.guidance} [{guidance.margin.specificity}]",
        f"CapEx:   {guidance.capex.guidance} [{guidance.capex.specificity}]",
    ]
    lines += [f"{i}. {o.topic}: {o.guidance}" for i, o in enumerate(guidance.other, 1)]

    lines += _section("CAPACITY UTILIZATION")
    lines += [
        f"Current: {capacity.current}",
        f"Trend: {capacity.trend}",
        f"Details: {capacity.details}",
    ]

    lines += _section("GROWTH INITIATIVES")
    if not result.growth_initiatives:
        lines.append(EMPTY_SECTION)
    for i, g in enumerate(result.growth_initiatives, 1):
        lines += [
            f"{i}. {g.name}",
            f"   {g.description}",
            f"   Timeline: {g.timeline} | Investment: {g.investment}",
        ]

    lines += _section("EXTRACTION NOTES")
    lines.append(result.extraction_notes or EMPTY_SECTION)

    source = f" | Source: {document_name}" if document_name else ""
    lines += ["", f"Generated by {tool}{source} | {generated_at:%Y-%m-%d %H:%M:%S}"]
    return "\n".join(lines) + "\n"
