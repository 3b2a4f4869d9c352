"""Ordered alias lists for reading logical fields off employee records.

Records reach the engine from fresh ingestion, from a restored session or
from a backup snapshot, so the same logical field can sit under several
keys. Each alias list is consulted in order; the first present, non-blank
value wins.
"""

import math

from raiseplanner.domains.ingestion.coerce import clean_numeric
from raiseplanner.utils.types import EmployeeRecord

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "employeeId": ("employeeId", "employee_id", "id", "Employee ID", "Employee Number"),
    "name": ("name", "full_name", "Employee Full name", "Name"),
    "baseSalaryUSD": (
        "baseSalaryUSD", "base_salary_usd", "salary_usd", "annual_salary_usd",
        "Base Salary USD", "Annual Salary USD", "USD Salary",
    ),
    "baseSalary": (
        "baseSalary", "base_salary", "salary", "annual_salary",
        "Base Salary", "Annual Salary", "Base Pay All Countries", "Total Base Pay",
        "Annual Calculated Base Pay All Countries",
    ),
    "salaryGradeMin": (
        "salaryGradeMin", "salary_grade_min", "grade_min", "min_salary",
        "Min Pay Grade Value", "Salary Grade Min",
    ),
    "salaryGradeMid": (
        "salaryGradeMid", "salary_grade_mid", "grade_mid", "mid_salary",
        "Mid Pay Grade Value", "Salary Grade Mid",
    ),
    "salaryGradeMax": (
        "salaryGradeMax", "salary_grade_max", "grade_max", "max_salary",
        "Max Pay Grade Value", "Salary Grade Max",
    ),
    "comparatio": ("comparatio", "Comparatio", "comp_ratio", "comparatio_percent"),
    "performanceRating": (
        "performanceRating", "performance_rating", "rating", "performance",
        "Performance Rating", "Overall Performance Rating", "Performance: What (Current)",
        "Performance: How (Current)", "Overall Performance Rating (Current)",
    ),
    "timeInRole": (
        "timeInRole", "time_in_role", "months_in_role", "tenure",
        "Time in Role", "Months in Role",
    ),
    "hireDate": (
        "hireDate", "Latest Hire Date", "hire_date", "start_date", "Hire Date", "Start Date",
    ),
    "roleStartDate": (
        "roleStartDate", "Job Entry Start Date", "role_start_date", "current_role_start",
        "Role Start Date", "Current Role Start",
    ),
    "lastRaiseDate": (
        "lastRaiseDate", "last_raise_date", "last_increase_date",
        "Last Raise Date", "Last Salary Change Date",
    ),
    "location": ("country", "location", "Country", "Location"),
    "currency": ("currency", "Currency"),
    "retentionRisk": ("retentionRisk", "retention_risk", "Retention Risk"),
    "proposedRaise": ("proposedRaise", "proposed_raise"),
}


def _present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return not (isinstance(value, str) and value.strip() == "")


def extract_field(record: EmployeeRecord, field: str, default=None):
    for alias in FIELD_ALIASES.get(field, (field,)):
        value = record.get(alias)
        if _present(value):
            return value
    return default


def to_number(value) -> float | None:
    """Numeric view of a record value; text goes through the ingestion cleaner."""
    if isinstance(value, bool) or not _present(value):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = clean_numeric(str(value))
    return cleaned if isinstance(cleaned, float) else None


def extract_number(record: EmployeeRecord, field: str, default: float | None = None) -> float | None:
    for alias in FIELD_ALIASES.get(field, (field,)):
        number = to_number(record.get(alias))
        if number is not None:
            return number
    return default
