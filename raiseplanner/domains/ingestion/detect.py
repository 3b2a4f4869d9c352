"""Structural checks and salary/performance layout detection for decoded rows."""

import logging

from raiseplanner.domains.ingestion.columns import (
    PERFORMANCE_COLUMN_MAPPINGS,
    SALARY_COLUMN_MAPPINGS,
    mapped_headers,
)
from raiseplanner.domains.ingestion.models import StructureValidation
from raiseplanner.utils.types import FileType, RawRow

logger = logging.getLogger(__name__)

# Identity fields (employeeId, name, email) appear in both layouts and count for neither
SALARY_SIGNATURE_FIELDS = frozenset({
    "firstName",
    "lastName",
    "country",
    "currency",
    "baseSalary",
    "baseSalaryUSD",
    "salaryGradeMin",
    "salaryGradeMid",
    "salaryGradeMax",
    "comparatio",
    "timeInRole",
    "hireDate",
    "roleStartDate",
    "lastRaiseDate",
    "departmentCode",
    "jobTitle",
    "managerId",
    "managerName",
    "gradeLevel",
    "salaryRangeSegment",
    "belowRangeMinimum",
})

PERFORMANCE_SIGNATURE_FIELDS = frozenset({
    "performanceRating",
    "futureTalent",
    "movementReadiness",
    "proposedTalentActions",
    "businessImpactScore",
    "retentionRisk",
})

EMPTY_FILE_MESSAGE = "File is empty or contains no valid data rows"
UNRECOGNIZED_MESSAGE = (
    "No recognizable columns found. Expected columns such as Employee ID, "
    "Name, Base Salary or Performance Rating."
)
MISSING_ID_SHARE = 0.5


def collect_headers(rows: list[RawRow]) -> list[str]:
    """Headers across all rows, in first-seen order."""
    seen: dict[str, None] = {}
    for row in rows:
        for header in row:
            seen.setdefault(header, None)
    return list(seen)


def detect_file_type(headers: list[str]) -> FileType:
    salary_fields = mapped_headers(headers, SALARY_COLUMN_MAPPINGS).values()
    performance_fields = mapped_headers(headers, PERFORMANCE_COLUMN_MAPPINGS).values()
    salary_hits = sum(f in SALARY_SIGNATURE_FIELDS for f in salary_fields)
    performance_hits = sum(f in PERFORMANCE_SIGNATURE_FIELDS for f in performance_fields)

    match (salary_hits, performance_hits):
        case (0, 0):
            return FileType.UNKNOWN
        case (s, p) if s >= p:
            return FileType.SALARY
        case _:
            return FileType.PERFORMANCE


def validate_structure(rows: list[RawRow], file_name: str) -> StructureValidation:
    """Decide whether decoded rows are worth mapping at all.

    Hard errors (no rows, nothing recognizable) abort ingestion; warnings
    describe gaps that row validation will surface per row anyway.
    """
    if not rows:
        return StructureValidation(
            is_valid=False,
            detected_format=FileType.UNKNOWN,
            errors=[EMPTY_FILE_MESSAGE],
        )

    headers = collect_headers(rows)
    salary_columns = mapped_headers(headers, SALARY_COLUMN_MAPPINGS)
    performance_columns = mapped_headers(headers, PERFORMANCE_COLUMN_MAPPINGS)
    detected = detect_file_type(headers)

    if not salary_columns and not performance_columns:
        logger.info("%s: none of %d headers are recognizable", file_name, len(headers))
        return StructureValidation(
            is_valid=False,
            detected_format=detected,
            errors=[UNRECOGNIZED_MESSAGE],
        )

    warnings: list[str] = []
    id_headers = [
        header
        for header, field in {**salary_columns, **performance_columns}.items()
        if field == "employeeId"
    ]
    if not id_headers:
        warnings.append(
            "No employee ID column found (expected e.g. 'Employee ID', "
            "'Employee Number' or 'Associate ID')"
        )
    else:
        missing = sum(
            all(not str(row.get(h, "")).strip() for h in id_headers) for row in rows
        )
        if missing / len(rows) > MISSING_ID_SHARE:
            warnings.append(f"{missing} of {len(rows)} rows have no employee ID")

    match detected:
        case FileType.SALARY if "baseSalary" not in salary_columns.values():
            warnings.append("No base salary column found")
        case FileType.PERFORMANCE if "performanceRating" not in performance_columns.values():
            warnings.append("No performance rating column found")
        case _:
            pass

    logger.info(
        "%s: detected %s layout (%d salary, %d performance columns)",
        file_name,
        detected,
        len(salary_columns),
        len(performance_columns),
    )
    return StructureValidation(is_valid=True, detected_format=detected, warnings=warnings)
