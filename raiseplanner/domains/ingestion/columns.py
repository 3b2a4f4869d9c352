"""Header synonym tables and column mapping for salary and performance exports.

Each table maps a normalized source header (lowercase, trimmed) to a
canonical field name. The two tables are independent because the same
header means different things per sheet type; for instance "identified as
future talent?" feeds ``retentionRisk`` on a performance sheet.
"""

import logging
import re

from raiseplanner.domains.ingestion.coerce import coerce_value
from raiseplanner.utils.types import MappedRow, RawRow, SynonymTable

logger = logging.getLogger(__name__)

SALARY_COLUMN_MAPPINGS: SynonymTable = {
    # Employee ID
    "employee_id": "employeeId",
    "employeeid": "employeeId",
    "emp_id": "employeeId",
    "id": "employeeId",
    "employee id": "employeeId",
    "employee number": "employeeId",
    "employee_number": "employeeId",
    # Email
    "email": "email",
    "email_address": "email",
    "e-mail": "email",
    "work_email": "email",
    # Names
    "name": "name",
    "full_name": "name",
    "employee_name": "name",
    "full name": "name",
    "employee full name": "name",
    "employee_full_name": "name",
    "first_name": "firstName",
    "firstname": "firstName",
    "first name": "firstName",
    "last_name": "lastName",
    "lastname": "lastName",
    "last name": "lastName",
    # Location and currency
    "country": "country",
    "location": "country",
    "country iso2": "country",
    "currency": "currency",
    "curr": "currency",
    # Base pay in local currency
    "base_salary": "baseSalary",
    "basesalary": "baseSalary",
    "salary": "baseSalary",
    "annual_salary": "baseSalary",
    "base salary": "baseSalary",
    "annual salary": "baseSalary",
    "base pay all countries": "baseSalary",
    "total base pay": "baseSalary",
    "annual calculated base pay all countries": "baseSalary",
    # Base pay already converted to USD
    "base_salary_usd": "baseSalaryUSD",
    "base salary usd": "baseSalaryUSD",
    "salary_usd": "baseSalaryUSD",
    "annual salary usd": "baseSalaryUSD",
    "usd salary": "baseSalaryUSD",
    # Grade bounds
    "salary_grade_min": "salaryGradeMin",
    "grade_min": "salaryGradeMin",
    "min_salary": "salaryGradeMin",
    "min pay grade value": "salaryGradeMin",
    "salary_grade_mid": "salaryGradeMid",
    "grade_mid": "salaryGradeMid",
    "mid_salary": "salaryGradeMid",
    "mid pay grade value": "salaryGradeMid",
    "salary_grade_max": "salaryGradeMax",
    "grade_max": "salaryGradeMax",
    "max_salary": "salaryGradeMax",
    "max pay grade value": "salaryGradeMax",
    # Comparatio
    "comparatio": "comparatio",
    "compa ratio": "comparatio",
    "comp_ratio": "comparatio",
    "compa-ratio": "comparatio",
    # Time in role (months)
    "time_in_role": "timeInRole",
    "months_in_role": "timeInRole",
    "tenure": "timeInRole",
    "time in role": "timeInRole",
    # Dates
    "latest hire date": "hireDate",
    "hire_date": "hireDate",
    "start_date": "hireDate",
    "job entry start date": "roleStartDate",
    "role_start_date": "roleStartDate",
    "current_role_start": "roleStartDate",
    "last_raise_date": "lastRaiseDate",
    "last raise date": "lastRaiseDate",
    "last salary change date": "lastRaiseDate",
    # Organisation
    "department": "departmentCode",
    "department_code": "departmentCode",
    "department - cc based": "departmentCode",
    "job_title": "jobTitle",
    "title": "jobTitle",
    "business title": "jobTitle",
    "job profile": "jobTitle",
    "job function": "jobTitle",
    "job family": "jobTitle",
    "manager_id": "managerId",
    "manager id": "managerId",
    "manager employee number": "managerId",
    "manager_name": "managerName",
    "manager name": "managerName",
    "manager full name": "managerName",
    "manager_full_name": "managerName",
    "first line manager": "managerName",
    "direct manager": "managerName",
    "supervisor": "managerName",
    "grade band": "gradeLevel",
    "grade_band": "gradeLevel",
    "compensation grade profile": "gradeLevel",
    # Range placement flags
    "salary range segment": "salaryRangeSegment",
    "salary_range_segment": "salaryRangeSegment",
    "range_segment": "salaryRangeSegment",
    "below range minimum?": "belowRangeMinimum",
    "below_range_minimum?": "belowRangeMinimum",
    "below range minimum": "belowRangeMinimum",
    "below_range_minimum": "belowRangeMinimum",
    "is_below_minimum": "belowRangeMinimum",
}

PERFORMANCE_COLUMN_MAPPINGS: SynonymTable = {
    # Identification (Details_View exports use "Associate ID" and "Worker")
    "employee_id": "employeeId",
    "employeeid": "employeeId",
    "emp_id": "employeeId",
    "id": "employeeId",
    "employee id": "employeeId",
    "employee number": "employeeId",
    "employee_number": "employeeId",
    "associate id": "employeeId",
    "associate_id": "employeeId",
    "email": "email",
    "name": "name",
    "employee_name": "name",
    "employee full name": "name",
    "employee_full_name": "name",
    "worker": "name",
    # Ratings
    "performance_rating": "performanceRating",
    "rating": "performanceRating",
    "performance": "performanceRating",
    "perf_rating": "performanceRating",
    "performance rating": "performanceRating",
    "overall performance rating": "performanceRating",
    "overall_performance_rating": "performanceRating",
    "overall performance rating (current)": "performanceRating",
    "performance: what (current)": "performanceRating",
    "performance: how (current)": "performanceRating",
    # Talent calibration exports
    "calibrated value: overall performance rating": "performanceRating",
    "calibrated value: performance: what": "performanceRating",
    "calibrated value: performance: how": "performanceRating",
    "pre-calibrated value: overall performance rating": "performanceRating",
    "calibrated value: identified as future talent?": "futureTalent",
    "calibrated value: movement readiness": "movementReadiness",
    "calibrated value: proposed talent actions": "proposedTalentActions",
    "calibrated value: future talent: growth agility": "businessImpactScore",
    "calibrated value: future talent: change agility": "businessImpactScore",
    "business_impact": "businessImpactScore",
    "business_impact_score": "businessImpactScore",
    "impact_score": "businessImpactScore",
    "business impact": "businessImpactScore",
    # Retention risk, either a 0-100 score or a yes/no flag
    "retention_risk": "retentionRisk",
    "risk_score": "retentionRisk",
    "retention risk": "retentionRisk",
    "flight_risk": "retentionRisk",
    "identified as future talent?": "retentionRisk",
    "identified as future talent? (current)": "retentionRisk",
}

# Performance fields carried onto salary rows when one sheet holds both
COMBINED_PERFORMANCE_FIELDS = ("performanceRating", "businessImpactScore", "retentionRisk")

_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"[_\-]+")


def normalize_header(header: str) -> str:
    return _WHITESPACE.sub(" ", str(header).strip().lower())


def _separator_variant(key: str) -> str:
    return _WHITESPACE.sub(" ", _SEPARATORS.sub(" ", key)).strip()


def build_lookup(table: SynonymTable) -> dict[str, str]:
    """Index a synonym table by exact key and by its separator-insensitive variant.

    Exact keys take precedence over variants.
    """
    lookup = {_separator_variant(key): field for key, field in table.items()}
    lookup.update(table)
    return lookup


def resolve_field(header: str, lookup: dict[str, str]) -> str | None:
    key = normalize_header(header)
    return lookup.get(key) or lookup.get(_separator_variant(key))


def mapped_headers(headers, table: SynonymTable) -> dict[str, str]:
    """Return the subset of headers that resolve in ``table``, with their fields."""
    lookup = build_lookup(table)
    resolved = {}
    for header in headers:
        if field := resolve_field(header, lookup):
            resolved[header] = field
    return resolved


def map_columns(rows: list[RawRow], table: SynonymTable) -> list[MappedRow]:
    """Map raw rows onto canonical fields, coercing each value by field class.

    Unmatched columns are dropped. Output rows keep the input order and
    length so two mappings of the same rows stay index-aligned.
    """
    lookup = build_lookup(table)
    mapped_rows = []
    for row in rows:
        mapped: MappedRow = {}
        for header, value in row.items():
            field = resolve_field(header, lookup)
            if field is None:
                continue
            mapped[field] = coerce_value(field, value)
        mapped_rows.append(mapped)

    logger.debug("Mapped %d rows against %d synonyms", len(mapped_rows), len(table))
    return mapped_rows
