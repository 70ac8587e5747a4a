"""Financial calculation and display helpers.

Growth rates, currency symbols, and the number formats shared by the
spreadsheet renderer, the API, and the command-line preview.
"""

from __future__ import annotations

MISSING = "N/A"

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "CAD": "C$",
    "AUD": "A$",
    "CHF": "Fr",
    "CNY": "¥",
    "KRW": "₩",
}


def compute_growth_rate(current: float | None, prior: float | None) -> float | None:
    """Year-over-year growth in percent.

    ``(current - prior) / |prior| * 100``; None when either side is missing
    or the prior value is zero.
    """
    if current is None or prior is None or prior == 0:
        return None
    return (current - prior) / abs(prior) * 100


def get_currency_symbol(currency: str) -> str:
    """Display symbol for a currency code, or ``"<code> "`` when unknown."""
    code = (currency or "").upper()
    return CURRENCY_SYMBOLS.get(code, f"{currency} ")


def format_value(value: float | None) -> str:
    """One decimal place with thousands separators."""
    if value is None:
        return MISSING
    return f"{value:,.1f}"


def format_growth(value: float | None, decimals: int = 1) -> str:
    """Signed percentage, e.g. ``+20.5%`` or ``-3.0%``."""
    if value is None:
        return MISSING
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_financial_value(value: float | None, unit: str, currency: str) -> str:
    """Human-readable amount: currency symbol, negatives in parentheses.

    Examples:
        >>> format_financial_value(-1234.5, "millions", "USD")
        '($1,234.5)'
        >>> format_financial_value(3.2, "billions", "EUR")
        '€3.2B'
    """
    if value is None:
        return MISSING

    magnitude = abs(value)
    if unit == "billions":
        body = f"{magnitude:.1f}B"
    elif unit == "millions":
        body = f"{magnitude:,.1f}"
    else:
        body = f"{magnitude:,.0f}"

    symbol = get_currency_symbol(currency)
    if value < 0:
        return f"({symbol}{body})"
    return f"{symbol}{body}"
