"""Row-level validation for mapped salary and performance rows."""

import logging
import math

from raiseplanner.domains.ingestion.models import ValidationResult
from raiseplanner.utils.types import FileType, MappedRow

logger = logging.getLogger(__name__)

NAME_FIELDS = ("name", "firstName", "lastName")


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not (
        isinstance(value, float) and math.isnan(value)
    )


def _row_label(row: MappedRow, index: int) -> str:
    employee_id = row.get("employeeId")
    return f"Row {index + 1}" if is_blank(employee_id) else str(employee_id)


def validate_salary_row(row: MappedRow, index: int) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if is_blank(row.get("employeeId")):
        errors.append("Employee ID is required")

    if all(is_blank(row.get(name)) for name in NAME_FIELDS):
        errors.append("Employee name is required")

    salary = row.get("baseSalary")
    if is_blank(salary) or (is_number(salary) and salary <= 0):
        errors.append("Valid base salary is required")
    elif not is_number(salary):
        errors.append("Base salary must be a number")

    if is_blank(row.get("country")):
        warnings.append("Country/location information is missing")

    if is_blank(row.get("currency")):
        warnings.append("Currency information is missing")

    time_in_role = row.get("timeInRole")
    if not is_blank(time_in_role) and (not is_number(time_in_role) or time_in_role < 0):
        warnings.append("Time in role should be a positive number (months)")

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        employee_id=_row_label(row, index),
    )


def validate_performance_row(row: MappedRow, index: int) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if is_blank(row.get("employeeId")):
        errors.append("Employee ID is required")

    # Text ratings ("Successful Performer") and numeric 0-5 ratings are both accepted
    rating = row.get("performanceRating")
    if is_number(rating) and not 0 <= rating <= 5:
        warnings.append("Numeric performance rating should be between 0 and 5")
    elif isinstance(rating, str) and rating.strip() == "":
        warnings.append("Performance rating cannot be empty")

    risk = row.get("retentionRisk")
    if not is_blank(risk) and risk != 0 and (not is_number(risk) or not 0 <= risk <= 100):
        warnings.append("Retention risk should be between 0 and 100")

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        employee_id=_row_label(row, index),
    )


def validate_rows(rows: list[MappedRow], file_type: FileType) -> list[ValidationResult]:
    match file_type:
        case FileType.SALARY:
            validator = validate_salary_row
        case FileType.PERFORMANCE:
            validator = validate_performance_row
        case other:
            raise ValueError(f"No row validator for file type: {other}")

    results = [validator(row, index) for index, row in enumerate(rows)]
    logger.debug(
        "%s rows: %d of %d valid",
        file_type,
        sum(r.is_valid for r in results),
        len(results),
    )
    return results


def validity_rate(results: list[ValidationResult]) -> float:
    if not results:
        return 0.0
    return sum(r.is_valid for r in results) / len(results)
