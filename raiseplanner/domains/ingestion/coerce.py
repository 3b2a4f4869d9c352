"""Per-field value coercion for mapped export rows.

Coercion never raises: a value that cannot be converted is returned as
given and left for row validation to reject.
"""

import re

NUMERIC_FIELDS = frozenset({
    "baseSalary",
    "baseSalaryUSD",
    "salaryGradeMin",
    "salaryGradeMid",
    "salaryGradeMax",
    "comparatio",
    "timeInRole",
    "businessImpactScore",
    "retentionRisk",
})

TRUTHY_FLAGS = frozenset({"yes", "y", "true"})
FALSY_FLAGS = frozenset({"no", "n", "false"})

_QUOTES = re.compile(r"[\"']")
_CURRENCY_SYMBOLS = re.compile(r"[$,£€¥₹]")
_NON_NUMERIC = re.compile(r"[^\d.\-]")
_LEADING_NUMBER = re.compile(r"^\s*(-?(?:\d+\.?\d*|\.\d+))")
_PLAIN_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def parse_number(text: str) -> float | None:
    """Parse the longest leading numeric prefix of ``text``."""
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    return float(match.group(1))


def clean_numeric(value: str) -> float | str:
    """Strip quotes, currency symbols and separators, then parse as a float."""
    cleaned = _QUOTES.sub("", value)
    cleaned = _CURRENCY_SYMBOLS.sub("", cleaned)
    cleaned = _NON_NUMERIC.sub("", cleaned).strip()
    number = parse_number(cleaned)
    return value if number is None else number


def coerce_rating(value: str) -> float | str:
    """Keep text ratings; turn "87%" into 0.87 and "4.5" into 4.5."""
    value = value.strip()
    if "%" in value:
        number = parse_number(value.replace("%", "").strip())
        if number is not None:
            return number / 100
    if _PLAIN_NUMBER.fullmatch(value):
        return float(value)
    return value


def coerce_flag(value):
    """Map yes/no style answers to 1/0, passing anything else through."""
    match value.strip().lower():
        case flag if flag in TRUTHY_FLAGS:
            return 1
        case flag if flag in FALSY_FLAGS:
            return 0
        case _:
            return value


def coerce_value(field: str, value):
    if not isinstance(value, str) or value == "":
        return value

    if field in NUMERIC_FIELDS:
        value = clean_numeric(value)

    if isinstance(value, str):
        if field == "performanceRating":
            value = coerce_rating(value)
        elif field == "retentionRisk":
            value = coerce_flag(value)

    return value
