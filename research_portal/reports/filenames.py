"""Download filenames derived from company names."""

from __future__ import annotations

import re

MAX_STEM = 40

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


def safe_stem(company_name: str) -> str:
    """Company name reduced to ``[A-Za-z0-9_-]``, at most 40 characters."""
    stem = _UNSAFE.sub("_", company_name.strip())[:MAX_STEM]
    return stem or "Company"


def excel_filename(company_name: str) -> str:
    return f"{safe_stem(company_name)}_FinancialStatement.xlsx"


def summary_filename(company_name: str) -> str:
    return f"{safe_stem(company_name)}_EarningsAnalysis.txt"
