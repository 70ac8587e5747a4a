#!/usr/bin/env python3
"""Extract an income statement from a document and write a formatted workbook.

Usage:
    python scripts/extract_financials.py reports/acme_10k.pdf
    python scripts/extract_financials.py acme.txt --output out/acme.xlsx --save-json acme.json
    python scripts/extract_financials.py --from-json acme.json

Requires ANTHROPIC_API_KEY unless --from-json is given.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import pandas as pd

from research_portal.agents.financial_agent import FinancialExtractionAgent
from research_portal.agents.schemas.financial import FinancialExtractionResult
from research_portal.agents.tools.document_parser import parse_document
from research_portal.agents.tools.financial_calc import (
    compute_growth_rate,
    format_financial_value,
    format_growth,
)
from research_portal.config.logging_config import get_logger, setup_logging
from research_portal.errors import PortalError
from research_portal.reports.excel_renderer import render, validate_financial_payload
from research_portal.reports.filenames import excel_filename

logger = get_logger("scripts.extract_financials")


def preview_frame(result: FinancialExtractionResult) -> pd.DataFrame:
    """Display table: one row per line item, formatted period values and YoY."""
    records = []
    for item in result.line_items:
        row = {"Category": item.category, "Line Item": item.standard_label}
        for period in result.periods:
            row[period] = format_financial_value(
                item.value_for(period), result.unit, result.currency,
            )
        for current, prior in zip(result.periods, result.periods[1:]):
            growth = compute_growth_rate(item.value_for(current), item.value_for(prior))
            row[f"YoY {current}/{prior}"] = format_growth(growth)
        row["Confidence"] = item.confidence
        records.append(row)
    return pd.DataFrame(records)


def load_result(args: argparse.Namespace) -> FinancialExtractionResult:
    if args.from_json:
        payload = json.loads(Path(args.from_json).read_text(encoding="utf-8"))
        return validate_financial_payload(payload)

    path = Path(args.document)
    doc = parse_document(path.read_bytes(), path.name)
    result = FinancialExtractionAgent().extract(doc.text, doc.truncated)
    if doc.truncated:
        result = result.with_note_prefix(doc.truncation_note())
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extract an income statement to Excel")
    parser.add_argument("document", nargs="?", help="PDF or TXT document to extract from")
    parser.add_argument(
        "--from-json",
        help="Render a saved extraction result instead of calling the LLM",
    )
    parser.add_argument(
        "--output", "-o",
        help="Output .xlsx path (default: <company>_FinancialStatement.xlsx)",
    )
    parser.add_argument("--save-json", help="Also write the extraction result as JSON")
    args = parser.parse_args(argv)

    if not args.document and not args.from_json:
        parser.error("a document path or --from-json is required")

    setup_logging()
    try:
        result = load_result(args)
    except PortalError as exc:
        logger.error("extraction_failed", error_type=exc.error_type, error=exc.message)
        print(f"Error [{exc.error_type}]: {exc.message}", file=sys.stderr)
        return 1

    frame = preview_frame(result)
    print(f"{result.company_name} | {result.report_type} | {result.currency} {result.unit}")
    if frame.empty:
        print("No line items extracted.")
    else:
        print(frame.to_string(index=False))

    if args.save_json:
        Path(args.save_json).write_text(
            result.model_dump_json(by_alias=True, indent=2), encoding="utf-8",
        )

    output = Path(args.output or excel_filename(result.company_name))
    output.parent.mkdir(parents=True, exist_ok=True)
    content = render(result)
    output.write_bytes(content)
    print(f"Workbook written: {output} ({len(content):,} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
