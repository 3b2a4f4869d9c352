"""Assemble employee records from salary and performance uploads."""

import logging

import numpy as np
import pandas as pd

from raiseplanner.domains.analysis.fields import extract_field, extract_number
from raiseplanner.domains.analysis.salary import compute_comparatio
from raiseplanner.domains.ingestion.models import FileUploadResult
from raiseplanner.domains.ingestion.rows import is_blank
from raiseplanner.domains.session.models import ProcessResult, employee_schema
from raiseplanner.utils.types import EmployeeRecord, FileType
from raiseplanner.utils.validators import validate_dataframe, validate_unique

logger = logging.getLogger(__name__)

NUMERIC_COLUMNS = ["baseSalary", "baseSalaryUSD", "salaryGradeMin", "salaryGradeMid", "salaryGradeMax"]


def employee_key(row: EmployeeRecord) -> str:
    value = extract_field(row, "employeeId")
    return "" if value is None else str(value).strip()


def _collect(results: list[FileUploadResult]) -> tuple[dict[str, EmployeeRecord], dict[str, EmployeeRecord]]:
    """Rows by employee id per file type; later uploads replace earlier rows."""
    salary: dict[str, EmployeeRecord] = {}
    performance: dict[str, EmployeeRecord] = {}
    for result in results:
        match result.file_type:
            case FileType.SALARY:
                target = salary
            case FileType.PERFORMANCE:
                target = performance
            case other:
                logger.warning("Skipping %s: unsupported file type %r", result.file_name, other)
                continue
        for row in result.data:
            key = employee_key(row)
            if key:
                target[key] = {**row, "employeeId": key}
    return salary, performance


def _merge(salary_row: EmployeeRecord, performance_row: EmployeeRecord | None) -> EmployeeRecord:
    record = dict(salary_row)
    for key, value in (performance_row or {}).items():
        if is_blank(record.get(key)) and not is_blank(value):
            record[key] = value
    return record


def _fill_names(record: EmployeeRecord) -> None:
    first = str(record.get("firstName") or "").strip()
    last = str(record.get("lastName") or "").strip()
    name = str(record.get("name") or "").strip()

    if not name and (first or last):
        record["name"] = f"{first} {last}".strip()
    elif name and not (first or last):
        parts = name.split()
        record["firstName"] = parts[0]
        record["lastName"] = " ".join(parts[1:])


def usd_ratios(frame: pd.DataFrame) -> dict[str, float]:
    """Median USD-per-local-unit observed for each currency."""
    known = frame[(frame["baseSalary"] > 0) & (frame["baseSalaryUSD"] > 0)]
    if known.empty:
        return {}
    ratios = known["baseSalaryUSD"] / known["baseSalary"]
    return {
        currency: float(np.median(group.to_numpy()))
        for currency, group in ratios.groupby(known["currency"])
    }


def _derive_usd(frame: pd.DataFrame) -> pd.Series:
    ratios = usd_ratios(frame)
    usd = frame["baseSalaryUSD"].copy()
    missing = usd.isna() | (usd <= 0)
    for idx in frame.index[missing]:
        currency = frame.at[idx, "currency"]
        base = frame.at[idx, "baseSalary"]
        if pd.isna(base):
            continue
        rate = 1.0 if currency == "USD" else ratios.get(currency, 1.0)
        usd.at[idx] = round(base * rate, 2)
    return usd


def _to_frame(records: list[EmployeeRecord]) -> pd.DataFrame:
    frame = pd.DataFrame(records)
    for column in NUMERIC_COLUMNS:
        source = [extract_number(r, column) for r in records]
        frame[column] = pd.Series(source, index=frame.index, dtype="float64")
    return frame


def build_employees(results: list[FileUploadResult], default_currency: str = "USD") -> ProcessResult:
    """Merge uploads into analysable employee records.

    Salary rows define the population. Performance values fill fields the
    salary row leaves blank, joined by employee id. Missing USD salaries are
    derived from the median exchange ratio seen for the same currency.
    """
    salary, performance = _collect(results)
    warnings: list[str] = []

    unmatched = sorted(set(performance) - set(salary))
    if unmatched:
        warnings.append(
            f"{len(unmatched)} performance record(s) have no matching salary record: "
            + ", ".join(unmatched[:5])
        )

    records = []
    for key, row in salary.items():
        record = _merge(row, performance.get(key))
        _fill_names(record)
        if is_blank(record.get("currency")):
            record["currency"] = default_currency
        record["currency"] = str(record["currency"]).strip().upper()
        records.append(record)

    if not records:
        logger.info("No salary records to build employees from")
        return ProcessResult(employees=[], warnings=warnings)

    frame = _to_frame(records)
    frame["baseSalaryUSD"] = _derive_usd(frame)

    for record, (_, row) in zip(records, frame.iterrows()):
        if not pd.isna(row["baseSalaryUSD"]):
            record["baseSalaryUSD"] = float(row["baseSalaryUSD"])
        if is_blank(record.get("comparatio")) and row["baseSalary"] > 0 and row["salaryGradeMid"] > 0:
            record["comparatio"] = compute_comparatio(row["baseSalary"], row["salaryGradeMid"])
        record["proposedRaise"] = 0

    frame["proposedRaise"] = 0.0
    for outcome in (validate_dataframe(frame, employee_schema), validate_unique(frame, ["employeeId"])):
        warnings.extend(outcome["errors"])

    logger.info("Built %d employees (%d with performance data)", len(records), len(set(salary) & set(performance)))
    return ProcessResult(employees=records, warnings=warnings)
