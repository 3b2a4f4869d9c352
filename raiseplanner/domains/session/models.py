"""Session snapshots, upload metadata and the merged employee schema."""

from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd
import pandera as pa
from pandera import Check, Column

from raiseplanner.utils.types import EmployeeRecord, FileType


@dataclass(frozen=True)
class ProcessResult:
    employees: list[EmployeeRecord]
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FileMetadata:
    name: str
    file_type: FileType
    row_count: int


@dataclass(frozen=True)
class SessionMetadata:
    """What was uploaded in the stored session, without the row data."""

    salary_file: FileMetadata | None = None
    performance_file: FileMetadata | None = None


@dataclass(frozen=True)
class BackupSnapshot:
    employees: list[EmployeeRecord]
    total_budget: float
    budget_currency: str
    saved_at: str = ""

    def to_dict(self) -> dict:
        return {
            "employees": [dict(e) for e in self.employees],
            "budget": {"totalBudget": self.total_budget, "budgetCurrency": self.budget_currency},
            "savedAt": self.saved_at or datetime.now().isoformat(timespec="seconds"),
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "BackupSnapshot":
        budget = payload.get("budget", {})
        return cls(
            employees=list(payload.get("employees", [])),
            total_budget=float(budget.get("totalBudget", 0) or 0),
            budget_currency=budget.get("budgetCurrency") or "USD",
            saved_at=payload.get("savedAt", ""),
        )


def _grade_ordered(df: pd.DataFrame) -> pd.Series:
    lo, mid, hi = df["salaryGradeMin"], df["salaryGradeMid"], df["salaryGradeMax"]
    complete = lo.notna() & mid.notna() & hi.notna()
    return ~complete | ((lo <= mid) & (mid <= hi))


employee_schema = pa.DataFrameSchema(
    {
        "employeeId": Column(str, Check.str_length(min_value=1), nullable=False),
        "name": Column(nullable=True, required=False),
        "currency": Column(str, nullable=False),
        "baseSalary": Column(float, Check.greater_than(0), nullable=True),
        "baseSalaryUSD": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
        "salaryGradeMin": Column(float, nullable=True, required=False),
        "salaryGradeMid": Column(float, nullable=True, required=False),
        "salaryGradeMax": Column(float, nullable=True, required=False),
        "proposedRaise": Column(float, Check.greater_than_or_equal_to(0)),
    },
    checks=[Check(_grade_ordered, name="grade_bounds_ordered")],
    strict=False,
    coerce=True,
)
