"""Currency, percentage and date presentation helpers."""

import math

import pandas as pd

type Amount = float | int

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
    "CNY": "¥",
    "CAD": "CA$",
    "AUD": "A$",
    "BRL": "R$",
    "PLN": "zł",
}


NOT_AVAILABLE = "Not Available"


def format_currency(amount: Amount | None, currency: str | None = "USD") -> str:
    """Render a whole-unit amount, e.g. ``$82,500`` or ``82,500 CHF``."""
    code = (currency or "USD").strip().upper()
    if amount is None or (isinstance(amount, float) and math.isnan(amount)):
        amount = 0
    rounded = round(float(amount))
    sign = "-" if rounded < 0 else ""
    body = f"{abs(rounded):,}"

    match CURRENCY_SYMBOLS.get(code):
        case None:
            return f"{sign}{body} {code}"
        case "zł" as symbol:
            return f"{sign}{body} {symbol}"
        case symbol:
            return f"{sign}{symbol}{body}"


def format_percentage(value: Amount | None, decimals: int = 1) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return NOT_AVAILABLE
    return f"{float(value):.{decimals}f}%"


def format_months(months: int) -> str:
    """Render a month count as ``N years, M months``."""
    years, rest = divmod(max(int(months), 0), 12)
    return f"{years} years, {rest} months"


def format_date(value) -> str:
    if value is None or value == "":
        return NOT_AVAILABLE
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return NOT_AVAILABLE
    return parsed.strftime("%b %d, %Y")
