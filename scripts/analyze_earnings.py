#!/usr/bin/env python3
"""Analyze an earnings call transcript and write a plain-text summary.

Usage:
    python scripts/analyze_earnings.py transcripts/acme_q4.pdf
    python scripts/analyze_earnings.py acme_q4.txt --output out/acme.txt
    python scripts/analyze_earnings.py --from-json acme_analysis.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from research_portal.agents.earnings_agent import EarningsAgent
from research_portal.agents.schemas.earnings import EarningsAnalysisResult
from research_portal.agents.tools.document_parser import parse_document
from research_portal.config.logging_config import get_logger, setup_logging
from research_portal.errors import PortalError
from research_portal.reports.filenames import summary_filename
from research_portal.reports.text_summary import render_summary

logger = get_logger("scripts.analyze_earnings")


def load_result(args: argparse.Namespace) -> tuple[EarningsAnalysisResult, str]:
    """Return the analysis and the name of the document it came from."""
    if args.from_json:
        path = Path(args.from_json)
        payload = json.loads(path.read_text(encoding="utf-8"))
        return EarningsAnalysisResult.model_validate(payload), path.name

    path = Path(args.document)
    doc = parse_document(path.read_bytes(), path.name)
    result = EarningsAgent().analyze(doc.text, doc.truncated)
    if doc.truncated:
        result = result.with_note_prefix(doc.truncation_note())
    return result, path.name


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Summarize an earnings call transcript")
    parser.add_argument("document", nargs="?", help="PDF or TXT transcript")
    parser.add_argument("--from-json", help="Summarize a saved analysis result")
    parser.add_argument(
        "--output", "-o",
        help="Output .txt path (default: <company>_EarningsAnalysis.txt)",
    )
    args = parser.parse_args(argv)

    if not args.document and not args.from_json:
        parser.error("a document path or --from-json is required")

    setup_logging()
    try:
        result, source = load_result(args)
    except PortalError as exc:
        logger.error("analysis_failed", error_type=exc.error_type, error=exc.message)
        print(f"Error [{exc.error_type}]: {exc.message}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"Error [INVALID_INPUT]: {exc.error_count()} invalid field(s)", file=sys.stderr)
        return 1

    text = render_summary(result, document_name=source)
    output = Path(args.output or summary_filename(result.company_name))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    print(text)
    print(f"Summary written: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
