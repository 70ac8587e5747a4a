"""Spreadsheet design constants.

Colours are ARGB hex strings as openpyxl expects them. The structures are
frozen; a renderer receives one ``SpreadsheetStyle`` and never edits it.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Palette:
    # Confidence backgrounds
    conf_high: str = "FFD1FAE5"
    conf_medium: str = "FFFEF3C7"
    conf_low: str = "FFFCE7D3"
    conf_missing: str = "FFFEE2E2"

    # Confidence badge fonts
    badge_high: str = "FF065F46"
    badge_medium: str = "FF92400E"
    badge_low: str = "FF9A3412"
    badge_missing: str = "FF991B1B"

    # Category banners
    cat_revenue: str = "FFDBEAFE"
    cat_cost: str = "FFFDE8D8"
    cat_profit: str = "FFD1FAE5"
    cat_expense: str = "FFFEF3C7"
    cat_income: str = "FFE0E7FF"
    cat_tax: str = "FFF3F4F6"
    cat_other: str = "FFF9FAFB"

    # Total rows
    total_bg: str = "FFE8EAF6"
    total_font: str = "FF3730A3"

    # Headers
    header_bg: str = "FF1E1B4B"
    header_font: str = "FFFFFFFF"
    sub_header_bg: str = "FF4338CA"

    # Growth
    growth_pos: str = "FF065F46"
    growth_neg: str = "FF9B1C1C"

    negative_value: str = "FF991B1B"
    muted: str = "FF9CA3AF"
    note_font: str = "FF6B7280"
    body_font: str = "FF374151"
    border: str = "FFCBD5E1"
    notes_bg: str = "FFFFF7ED"

    white: str = "FFFFFFFF"
    light_gray: str = "FFF8FAFC"

    def confidence_fill(self, confidence: str) -> str:
        return {
            "high": self.conf_high,
            "medium": self.conf_medium,
            "low": self.conf_low,
            "missing": self.conf_missing,
        }[confidence]

    def confidence_font(self, confidence: str) -> str:
        return {
            "high": self.badge_high,
            "medium": self.badge_medium,
            "low": self.badge_low,
            "missing": self.badge_missing,
        }[confidence]


@dataclass(frozen=True)
class ColumnWidths:
    category: float = 22
    line_item: float = 38
    period: float = 16
    growth: float = 12
    confidence: float = 12
    notes: float = 40

    # Raw Data sheet
    raw_category: float = 20
    raw_label: float = 40
    raw_standard_label: float = 30
    raw_confidence: float = 14
    raw_notes: float = 50

    # Extraction Report sheet
    report_key: float = 30
    report_value: float = 80


@dataclass(frozen=True)
class SpreadsheetStyle:
    palette: Palette = field(default_factory=Palette)
    widths: ColumnWidths = field(default_factory=ColumnWidths)
    value_format: str = "#,##0.0"
    # Zero gets an explicit sign too
    growth_format: str = "+0.0%;-0.0%;+0.0%"
    missing_marker: str = "N/A"
    creator: str = "AI Research Portal"
    legend: str = (
        "CONFIDENCE LEGEND:   High (green) = Confirmed   Medium (yellow) = Reasonable   "
        "Low (orange) = Uncertain   Missing (red) = Not found in document"
    )


DEFAULT_STYLE = SpreadsheetStyle()


def category_color(category: str, palette: Palette = DEFAULT_STYLE.palette) -> str:
    """Banner colour for a category; first matching substring wins.

    "Net Income" matches the income check before the tax/net one.
    """
    name = category.lower()
    if "revenue" in name:
        return palette.cat_revenue
    if "cost" in name:
        return palette.cat_cost
    if "gross" in name:
        return palette.cat_profit
    if "expense" in name:
        return palette.cat_expense
    if "income" in name or "ebit" in name:
        return palette.cat_income
    if "tax" in name or "net" in name:
        return palette.cat_tax
    return palette.cat_other
