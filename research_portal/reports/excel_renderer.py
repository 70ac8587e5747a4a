"""Financial statement workbook renderer.

Turns one FinancialExtractionResult into an .xlsx document with three
sheets, in order:

- Income Statement: formatted grid grouped by category, with YoY growth,
  confidence badges and notes
- Raw Data: one row per line item in input order, original and standard
  labels side by side
- Extraction Report: key/value summary with confidence counts

Rendering is pure: no network, no filesystem, and the input is never
modified. Only the embedded generation timestamp varies between runs.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from datetime import datetime

import pandas as pd
from openpyxl.cell.cell import Cell
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.properties import PageSetupProperties
from openpyxl.worksheet.worksheet import Worksheet
from pydantic import ValidationError

from research_portal.agents.schemas.financial import (
    FinancialExtractionResult,
    FinancialLineItem,
)
from research_portal.agents.tools.financial_calc import (
    compute_growth_rate,
    get_currency_symbol,
)
from research_portal.config.logging_config import get_logger
from research_portal.errors import InvalidInputError
from research_portal.reports.styles import DEFAULT_STYLE, SpreadsheetStyle, category_color

logger = get_logger("reports.excel")

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

INCOME_SHEET = "Income Statement"
RAW_SHEET = "Raw Data"
REPORT_SHEET = "Extraction Report"
SHEET_NAMES = (INCOME_SHEET, RAW_SHEET, REPORT_SHEET)

# Income Statement layout: rows 1-6 are the header block
TITLE_ROW = 1
META_ROW = 2
LEGEND_ROW = 3
HEADER_ROW = 5
UNITS_ROW = 6
FIRST_DATA_ROW = 7

CONFIDENCE_LABELS = {
    "high": "High",
    "medium": "Medium",
    "low": "Low",
    "missing": "Missing",
}


# ---------------------------------------------------------------------------
# Layout helpers
# ---------------------------------------------------------------------------

class ColumnLayout:
    """Column positions of the Income Statement sheet (1-based)."""

    def __init__(self, periods: list[str]) -> None:
        self.periods = list(periods)
        self.growth_pairs = list(zip(self.periods, self.periods[1:]))
        self.category = 1
        self.line_item = 2
        self.first_period = 3
        self.first_growth = self.first_period + len(self.periods)
        self.confidence = self.first_growth + len(self.growth_pairs)
        self.notes = self.confidence + 1

    @property
    def total(self) -> int:
        return self.notes

    @property
    def last_letter(self) -> str:
        return get_column_letter(self.total)


def group_line_items(
    items: list[FinancialLineItem],
) -> list[tuple[str, list[FinancialLineItem]]]:
    """Group items by category, categories ordered by first appearance.

    Stable within each group, so contiguous input comes back unchanged and
    interleaved input never produces a repeated banner.
    """
    groups: dict[str, list[FinancialLineItem]] = {}
    for item in items:
        groups.setdefault(item.category, []).append(item)
    return list(groups.items())


def validate_financial_payload(payload: object) -> FinancialExtractionResult:
    """Validate a JSON payload before any rendering happens.

    Raises:
        InvalidInputError: listing the offending field paths.
    """
    if isinstance(payload, FinancialExtractionResult):
        return payload
    if not isinstance(payload, dict):
        raise InvalidInputError("Invalid JSON body: expected an object.")
    try:
        return FinancialExtractionResult.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "body" for err in exc.errors()})
        raise InvalidInputError("Missing or invalid financial data fields.", fields=fields) from exc


def _fill(argb: str) -> PatternFill:
    return PatternFill(fill_type="solid", fgColor=argb)


def _set_text(cell: Cell, value: str | None) -> None:
    """Write free text verbatim; a leading "=" never becomes a formula."""
    cell.value = value
    if isinstance(value, str):
        cell.data_type = "s"


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------

class ExcelRenderer:
    """Renders FinancialExtractionResult records to .xlsx bytes."""

    def __init__(
        self,
        style: SpreadsheetStyle = DEFAULT_STYLE,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.style = style
        self.palette = style.palette
        self.clock = clock

    def render(
        self,
        result: FinancialExtractionResult,
        generated_at: datetime | None = None,
    ) -> bytes:
        """Render the three-sheet workbook.

        Args:
            result: Validated extraction result.
            generated_at: Timestamp embedded in the workbook (defaults to the clock).

        Returns:
            The .xlsx document as bytes.
        """
        if not isinstance(result, FinancialExtractionResult):
            raise InvalidInputError(
                f"Expected FinancialExtractionResult, got {type(result).__name__}",
            )
        if generated_at is None:
            generated_at = self.clock()

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            book = writer.book
            book.properties.creator = self.style.creator
            book.properties.lastModifiedBy = self.style.creator
            book.properties.created = generated_at
            book.properties.modified = generated_at
            book.properties.title = f"{result.company_name} Financial Statement"

            self._write_income_statement(book.create_sheet(INCOME_SHEET), result, generated_at)
            self._write_raw_data(writer, result)
            self._write_extraction_report(writer, result, generated_at)

        content = buffer.getvalue()
        logger.info(
            "workbook_rendered",
            company=result.company_name,
            periods=len(result.periods),
            line_items=len(result.line_items),
            size=len(content),
        )
        return content

    # -- shared cell styling ------------------------------------------------

    def _border(self, weight: str = "thin") -> Border:
        side = Side(style=weight, color=self.palette.border)
        return Border(left=side, right=side, top=side, bottom=side)

    def _banner(
        self,
        ws: Worksheet,
        row: int,
        last_col: int,
        value: str,
        font: Font,
        fill: str,
        height: float,
        horizontal: str = "center",
        wrap: bool = False,
    ) -> None:
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=last_col)
        cell = ws.cell(row=row, column=1)
        _set_text(cell, value)
        cell.font = font
        cell.fill = _fill(fill)
        indent = 1 if horizontal == "left" else 0
        cell.alignment = Alignment(
            horizontal=horizontal, vertical="center", wrap_text=wrap, indent=indent,
        )
        ws.row_dimensions[row].height = height

    def _header_cell(self, ws: Worksheet, row: int, col: int, value: str) -> None:
        cell = ws.cell(row=row, column=col)
        _set_text(cell, value)
        cell.font = Font(bold=True, size=10, color=self.palette.header_font)
        cell.fill = _fill(self.palette.header_bg)
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.border = self._border("medium")

    # -- Sheet 1 ------------------------------------------------------------

    def _write_income_statement(
        self,
        ws: Worksheet,
        result: FinancialExtractionResult,
        generated_at: datetime,
    ) -> None:
        palette = self.palette
        widths = self.style.widths
        layout = ColumnLayout(result.periods)

        ws.freeze_panes = ws.cell(row=FIRST_DATA_ROW, column=layout.first_period)
        ws.page_setup.orientation = "landscape"
        ws.page_setup.fitToWidth = 1
        ws.sheet_properties.pageSetUpPr = PageSetupProperties(fitToPage=True)

        ws.column_dimensions["A"].width = widths.category
        ws.column_dimensions["B"].width = widths.line_item
        for i in range(len(layout.periods)):
            ws.column_dimensions[get_column_letter(layout.first_period + i)].width = widths.period
        for i in range(len(layout.growth_pairs)):
            ws.column_dimensions[get_column_letter(layout.first_growth + i)].width = widths.growth
        ws.column_dimensions[get_column_letter(layout.confidence)].width = widths.confidence
        ws.column_dimensions[get_column_letter(layout.notes)].width = widths.notes

        # Header block
        self._banner(
            ws, TITLE_ROW, layout.total, result.company_name,
            Font(bold=True, size=16, color=palette.header_font), palette.header_bg, 36,
        )
        generated = f"{generated_at:%B} {generated_at.day}, {generated_at.year}"
        meta = (
            f"{result.report_type or 'Financial Statement'} | Currency: {result.currency} | "
            f"Values in: {result.unit} | Generated: {generated}"
        )
        self._banner(
            ws, META_ROW, layout.total, meta,
            Font(italic=True, size=10, color=palette.header_font), palette.sub_header_bg, 22,
        )
        self._banner(
            ws, LEGEND_ROW, layout.total, self.style.legend,
            Font(italic=True, size=9, color=palette.body_font), palette.light_gray, 18,
            horizontal="left",
        )
        ws.row_dimensions[LEGEND_ROW + 1].height = 8

        symbol = get_currency_symbol(result.currency).strip()
        self._header_cell(ws, HEADER_ROW, layout.category, "Category")
        self._header_cell(ws, HEADER_ROW, layout.line_item, "Line Item")
        for i, period in enumerate(layout.periods):
            self._header_cell(
                ws, HEADER_ROW, layout.first_period + i, f"{period}\n({symbol} {result.unit})",
            )
        for i, (current, prior) in enumerate(layout.growth_pairs):
            self._header_cell(ws, HEADER_ROW, layout.first_growth + i, f"YoY\n{current}/{prior}")
        self._header_cell(ws, HEADER_ROW, layout.confidence, "Confidence")
        self._header_cell(ws, HEADER_ROW, layout.notes, "Notes")
        ws.row_dimensions[HEADER_ROW].height = 28

        ws.merge_cells(
            start_row=UNITS_ROW, start_column=1, end_row=UNITS_ROW, end_column=2,
        )
        units = ws.cell(
            row=UNITS_ROW, column=1,
            value=f"All values in {result.currency} {result.unit} unless noted",
        )
        units.font = Font(italic=True, size=9, color=palette.note_font)
        units.alignment = Alignment(horizontal="left", indent=1)
        ws.row_dimensions[UNITS_ROW].height = 16

        # Data rows, one banner per category group
        row = FIRST_DATA_ROW
        for category, items in group_line_items(result.line_items):
            self._banner(
                ws, row, layout.total, category.upper(),
                Font(bold=True, size=9, color=palette.body_font),
                category_color(category, palette), 20, horizontal="left",
            )
            row += 1
            for item in items:
                self._write_statement_row(ws, row, item, layout)
                row += 1

        # Footer after one blank row
        footer_row = row + 1
        self._banner(
            ws, footer_row, layout.total, f"Extraction Notes: {result.extraction_notes}",
            Font(italic=True, size=9, color=palette.note_font), palette.notes_bg, 40,
            horizontal="left", wrap=True,
        )

    def _write_statement_row(
        self,
        ws: Worksheet,
        row: int,
        item: FinancialLineItem,
        layout: ColumnLayout,
    ) -> None:
        palette = self.palette
        marker = self.style.missing_marker
        border = self._border()

        # Total rows use their own style whatever the confidence
        bg = palette.total_bg if item.is_total else palette.confidence_fill(item.confidence)
        font_color = palette.total_font if item.is_total else None
        size = 10 if item.is_total else 9
        row_fill = _fill(bg)
        ws.row_dimensions[row].height = 18

        cat_cell = ws.cell(row=row, column=layout.category)
        cat_cell.fill = row_fill
        cat_cell.border = border

        label_cell = ws.cell(row=row, column=layout.line_item)
        _set_text(label_cell, item.standard_label)
        label_cell.font = Font(bold=item.is_total, size=size, color=font_color)
        label_cell.fill = row_fill
        label_cell.alignment = Alignment(
            horizontal="left", vertical="center", indent=1 if item.is_total else 3,
        )
        label_cell.border = border

        for i, period in enumerate(layout.periods):
            value = item.value_for(period)
            cell = ws.cell(row=row, column=layout.first_period + i)
            if value is None:
                cell.value = marker
                cell.font = Font(italic=True, size=size, color=palette.muted)
            else:
                cell.value = value
                cell.number_format = self.style.value_format
                color = palette.negative_value if value < 0 else font_color
                cell.font = Font(bold=item.is_total, size=size, color=color)
            cell.fill = row_fill
            cell.alignment = Alignment(horizontal="right", vertical="center")
            cell.border = border

        for i, (current, prior) in enumerate(layout.growth_pairs):
            growth = compute_growth_rate(item.value_for(current), item.value_for(prior))
            cell = ws.cell(row=row, column=layout.first_growth + i)
            if growth is None:
                cell.value = marker
                cell.font = Font(italic=True, size=9, color=palette.muted)
            else:
                cell.value = growth / 100
                cell.number_format = self.style.growth_format
                color = palette.growth_pos if growth >= 0 else palette.growth_neg
                cell.font = Font(bold=item.is_total, size=9, color=color)
            cell.fill = _fill(palette.light_gray)
            cell.alignment = Alignment(horizontal="right", vertical="center")
            cell.border = border

        conf_cell = ws.cell(
            row=row, column=layout.confidence, value=CONFIDENCE_LABELS[item.confidence],
        )
        conf_cell.font = Font(bold=True, size=9, color=palette.confidence_font(item.confidence))
        conf_cell.fill = row_fill
        conf_cell.alignment = Alignment(horizontal="center", vertical="center")
        conf_cell.border = border

        notes = item.notes
        if item.label != item.standard_label:
            notes = f"Source label: {item.label}" + (f"\n{notes}" if notes else "")
        notes_cell = ws.cell(row=row, column=layout.notes)
        _set_text(notes_cell, notes or None)
        notes_cell.font = Font(italic=True, size=8, color=palette.note_font)
        notes_cell.fill = _fill(palette.light_gray)
        notes_cell.alignment = Alignment(
            horizontal="left", vertical="center", wrap_text=True, indent=1,
        )
        notes_cell.border = border

    # -- Sheet 2 ------------------------------------------------------------

    def _write_raw_data(self, writer: pd.ExcelWriter, result: FinancialExtractionResult) -> None:
        marker = self.style.missing_marker
        widths = self.style.widths
        periods = result.periods

        columns = [
            "Category",
            "Original Label (from document)",
            "Standard Label",
            "Confidence",
            *periods,
            "Notes",
        ]
        rows = []
        for item in result.line_items:
            values = [item.value_for(p) for p in periods]
            rows.append([
                item.category,
                item.label,
                item.standard_label,
                item.confidence.upper(),
                *[marker if v is None else v for v in values],
                item.notes,
            ])
        frame = pd.DataFrame(rows, columns=columns, dtype=object)
        frame.to_excel(writer, sheet_name=RAW_SHEET, index=False)

        ws = writer.sheets[RAW_SHEET]
        ws.column_dimensions["A"].width = widths.raw_category
        ws.column_dimensions["B"].width = widths.raw_label
        ws.column_dimensions["C"].width = widths.raw_standard_label
        ws.column_dimensions["D"].width = widths.raw_confidence
        for i in range(len(periods)):
            ws.column_dimensions[get_column_letter(5 + i)].width = widths.period
        notes_col = 5 + len(periods)
        ws.column_dimensions[get_column_letter(notes_col)].width = widths.raw_notes

        for col in range(1, len(columns) + 1):
            self._header_cell(ws, 1, col, columns[col - 1])
        ws.row_dimensions[1].height = 22

        border = self._border()
        shade = _fill(self.palette.light_gray)
        for idx in range(len(rows)):
            row = idx + 2
            ws.row_dimensions[row].height = 16
            for col in range(1, len(columns) + 1):
                cell = ws.cell(row=row, column=col)
                cell.alignment = Alignment(vertical="center", wrap_text=True)
                cell.border = border
                if isinstance(cell.value, str):
                    cell.data_type = "s"
                if 5 <= col < notes_col and isinstance(cell.value, (int, float)):
                    cell.number_format = self.style.value_format
                if idx % 2 == 1:
                    cell.fill = shade

    # -- Sheet 3 ------------------------------------------------------------

    def _write_extraction_report(
        self,
        writer: pd.ExcelWriter,
        result: FinancialExtractionResult,
        generated_at: datetime,
    ) -> None:
        counts = result.confidence_counts()
        entries = [
            ("Company", result.company_name),
            ("Document Type", result.report_type),
            ("Document Title", result.document_title or "Not specified"),
            ("Periods Extracted", ", ".join(result.periods)),
            ("Currency", result.currency),
            ("Units", result.unit),
            ("Total Line Items", len(result.line_items)),
            ("High Confidence", counts["high"]),
            ("Medium Confidence", counts["medium"]),
            ("Low Confidence", counts["low"]),
            ("Missing Data", counts["missing"]),
            ("Extraction Notes", result.extraction_notes),
            ("Generated", generated_at.isoformat(timespec="seconds")),
            ("Tool", f"{self.style.creator} - Financial Statement Extractor"),
        ]
        frame = pd.DataFrame(entries, columns=["Field", "Value"], dtype=object)
        frame.to_excel(writer, sheet_name=REPORT_SHEET, index=False, header=False, startrow=1)

        ws = writer.sheets[REPORT_SHEET]
        widths = self.style.widths
        ws.column_dimensions["A"].width = widths.report_key
        ws.column_dimensions["B"].width = widths.report_value

        self._banner(
            ws, 1, 2, f"{self.style.creator} - Extraction Quality Report",
            Font(bold=True, size=14, color=self.palette.header_font),
            self.palette.header_bg, 36,
        )

        border = self._border()
        for idx, (key, _value) in enumerate(entries):
            row = idx + 2
            fill = _fill(self.palette.light_gray if idx % 2 == 0 else self.palette.white)
            key_cell = ws.cell(row=row, column=1)
            _set_text(key_cell, key)
            key_cell.font = Font(bold=True, size=10)
            key_cell.fill = fill
            key_cell.alignment = Alignment(vertical="top")
            key_cell.border = border
            value_cell = ws.cell(row=row, column=2)
            if isinstance(value_cell.value, str):
                value_cell.data_type = "s"
            value_cell.font = Font(size=10)
            value_cell.fill = fill
            value_cell.alignment = Alignment(horizontal="left", vertical="top", wrap_text=True)
            value_cell.border = border
            ws.row_dimensions[row].height = 60 if key == "Extraction Notes" else 18


def render(
    result: FinancialExtractionResult,
    style: SpreadsheetStyle = DEFAULT_STYLE,
    generated_at: datetime | None = None,
) -> bytes:
    """Render ``result`` to .xlsx bytes with the given style."""
    return ExcelRenderer(style=style).render(result, generated_at=generated_at)


def render_payload(payload: object, generated_at: datetime | None = None) -> bytes:
    """Validate a JSON payload, then render it."""
    return render(validate_financial_payload(payload), generated_at=generated_at)
