"""Tenure, time-in-role and time-since-raise calculations."""

import logging
from datetime import date, datetime, timedelta

import pandas as pd

from raiseplanner.domains.analysis.fields import extract_field, extract_number, to_number
from raiseplanner.domains.analysis.models import TenureInfo
from raiseplanner.utils.types import DateLike, EmployeeRecord, TenureBand

logger = logging.getLogger(__name__)

# Spreadsheet day serials (1954-09 .. 2119-01) and their epoch
EXCEL_SERIAL_RANGE = (20_000, 80_000)
EXCEL_EPOCH = date(1899, 12, 30)


def parse_date(value: DateLike) -> date | None:
    """Best-effort date parsing; anything unusable is ``None``."""
    match value:
        case None | "":
            return None
        case datetime():
            return value.date()
        case date():
            return value
        case bool():
            return None

    serial = to_number(value)
    if serial is not None and str(value).strip().replace(".", "", 1).isdigit():
        low, high = EXCEL_SERIAL_RANGE
        if low <= serial <= high:
            return EXCEL_EPOCH + timedelta(days=int(serial))
        return None

    parsed = pd.to_datetime(str(value).strip(), errors="coerce")
    if pd.isna(parsed):
        logger.debug("Unparseable date: %r", value)
        return None
    return parsed.date()


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end``, floored at zero."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


def tenure_band(total_months: int, hire_date_known: bool = True) -> TenureBand:
    if not hire_date_known:
        return TenureBand.UNKNOWN
    if total_months < 12:
        return TenureBand.NEW
    elif total_months < 36:
        return TenureBand.EARLY
    elif total_months < 84:
        return TenureBand.ESTABLISHED
    else:
        return TenureBand.SENIOR


def calculate_tenure(
    hire_date: DateLike,
    role_start_date: DateLike = None,
    last_raise_date: DateLike = None,
    time_in_role_months: float | None = None,
    as_of: date | None = None,
) -> TenureInfo:
    today = as_of or date.today()
    hired = parse_date(hire_date)
    role_started = parse_date(role_start_date)
    last_raise = parse_date(last_raise_date)

    total_months = months_between(hired, today) if hired else 0

    if role_started:
        in_role = months_between(role_started, today)
    elif time_in_role_months is not None and time_in_role_months >= 0:
        in_role = int(time_in_role_months)
    else:
        in_role = 0

    return TenureInfo(
        years_of_service=total_months // 12,
        total_tenure_months=total_months,
        time_in_role_months=in_role,
        tenure_band=tenure_band(total_months, hired is not None),
        last_raise_months_ago=months_between(last_raise, today) if last_raise else None,
    )


def tenure_for(employee: EmployeeRecord, as_of: date | None = None) -> TenureInfo:
    return calculate_tenure(
        extract_field(employee, "hireDate"),
        extract_field(employee, "roleStartDate"),
        extract_field(employee, "lastRaiseDate"),
        extract_number(employee, "timeInRole"),
        as_of=as_of,
    )
