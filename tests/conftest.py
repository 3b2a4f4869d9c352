"""Shared fixtures: export bytes and employee records."""

import io
from datetime import date

import pandas as pd
import pytest

AS_OF = date(2024, 7, 1)


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def csv_bytes():
    """Build CSV bytes from a header line and data lines."""

    def _build(*lines: str, encoding: str = "utf-8") -> bytes:
        return ("\n".join(lines) + "\n").encode(encoding)

    return _build


@pytest.fixture
def xlsx_bytes():
    """Build a single-sheet XLSX workbook from records."""

    def _build(records: list[dict], columns: list[str] | None = None) -> bytes:
        buffer = io.BytesIO()
        pd.DataFrame(records, columns=columns).to_excel(buffer, index=False, engine="openpyxl")
        return buffer.getvalue()

    return _build


@pytest.fixture
def salary_csv(csv_bytes) -> bytes:
    return csv_bytes(
        "Employee ID,Name,Country,Currency,Base Salary,Base Salary USD,Salary Grade Min,Salary Grade Mid,Salary Grade Max",
        "E1,Ann Lee,United States,USD,75000,75000,80000,100000,120000",
        "E2,Raj Patel,India,INR,2500000,30000,2400000,3000000,3600000",
        "E3,Eva Nowak,Poland,PLN,240000,60000,200000,250000,300000",
    )


@pytest.fixture
def performance_csv(csv_bytes) -> bytes:
    return csv_bytes(
        "Associate ID,Worker,Overall Performance Rating,Identified as Future Talent?",
        "E1,Ann Lee,Exceeds Expectations,Yes",
        "E2,Raj Patel,87%,No",
    )


@pytest.fixture
def make_employee():
    """Employee record at grade 80k/100k/120k USD, hired two years before AS_OF."""

    def _make(**overrides) -> dict:
        employee = {
            "employeeId": "E1",
            "name": "Ann Lee",
            "country": "United States",
            "currency": "USD",
            "baseSalary": 75000.0,
            "baseSalaryUSD": 75000.0,
            "salaryGradeMin": 80000.0,
            "salaryGradeMid": 100000.0,
            "salaryGradeMax": 120000.0,
            "performanceRating": 4.8,
            "hireDate": "2022-07-01",
            "proposedRaise": 0,
        }
        employee.update(overrides)
        return employee

    return _make
