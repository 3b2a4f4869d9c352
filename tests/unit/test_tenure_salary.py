"""Tests for tenure, salary position and raise projection."""

from datetime import date, datetime

import pytest

from raiseplanner.config import AnalysisConfig
from raiseplanner.domains.analysis.fields import extract_field, extract_number
from raiseplanner.domains.analysis.salary import (
    analyze_salary,
    classify_position,
    compute_comparatio,
    conversion_rate,
    project_raise,
)
from raiseplanner.domains.analysis.tenure import calculate_tenure, months_between, parse_date, tenure_band
from raiseplanner.utils.types import PositionInRange, TenureBand


class TestParseDate:
    def test_iso_string(self):
        assert parse_date("2023-06-01") == date(2023, 6, 1)

    def test_us_string(self):
        assert parse_date("06/15/2021") == date(2021, 6, 15)

    def test_datetime(self):
        assert parse_date(datetime(2020, 1, 2, 9, 30)) == date(2020, 1, 2)

    def test_excel_serial(self):
        assert parse_date(45000) == date(2023, 3, 15)
        assert parse_date("45000") == date(2023, 3, 15)

    @pytest.mark.parametrize("value", [None, "", "not a date", "12", True])
    def test_unusable(self, value):
        assert parse_date(value) is None


class TestTenure:
    def test_whole_months(self):
        assert months_between(date(2023, 1, 31), date(2023, 2, 28)) == 0
        assert months_between(date(2023, 1, 15), date(2024, 1, 15)) == 12
        assert months_between(date(2025, 1, 1), date(2024, 1, 1)) == 0

    @pytest.mark.parametrize(
        ("months", "band"),
        [
            (0, TenureBand.NEW),
            (11, TenureBand.NEW),
            (12, TenureBand.EARLY),
            (35, TenureBand.EARLY),
            (36, TenureBand.ESTABLISHED),
            (83, TenureBand.ESTABLISHED),
            (84, TenureBand.SENIOR),
        ],
    )
    def test_band_cut_points(self, months, band):
        assert tenure_band(months) == band

    def test_calculate(self, as_of):
        info = calculate_tenure("2020-01-15", "2022-07-01", "2023-01-01", as_of=as_of)
        assert info.total_tenure_months == 53
        assert info.years_of_service == 4
        assert info.time_in_role_months == 24
        assert info.last_raise_months_ago == 18
        assert info.tenure_band == TenureBand.ESTABLISHED

    def test_time_in_role_fallback(self, as_of):
        info = calculate_tenure("2020-01-15", time_in_role_months=14.5, as_of=as_of)
        assert info.time_in_role_months == 14

    def test_unparseable_dates_yield_empty_tenure(self, as_of):
        info = calculate_tenure("garbage", "also garbage", None, as_of=as_of)
        assert info.total_tenure_months == 0
        assert info.years_of_service == 0
        assert info.time_in_role_months == 0
        assert info.last_raise_months_ago is None
        assert info.tenure_band == TenureBand.UNKNOWN


class TestFieldExtraction:
    def test_first_present_alias_wins(self):
        record = {"employeeId": " ", "employee_id": "E7", "id": "X"}
        assert extract_field(record, "employeeId") == "E7"

    def test_default_when_absent(self):
        assert extract_field({}, "country", "n/a") == "n/a"

    def test_nan_is_absent(self):
        assert extract_field({"country": float("nan"), "Location": "Brazil"}, "location") == "Brazil"

    def test_numbers_from_text(self):
        assert extract_number({"Base Salary": "$90,000"}, "baseSalary") == 90000
        assert extract_number({"baseSalary": "unknown"}, "baseSalary", 1.0) == 1.0


class TestSalaryAnalysis:
    def test_position_and_comparatio(self):
        analysis = analyze_salary({
            "baseSalary": 90000, "salaryGradeMin": 80000, "salaryGradeMid": 100000, "salaryGradeMax": 120000,
        })
        assert analysis.comparatio == 90
        assert analysis.position_in_range == PositionInRange.LOWER_THIRD
        assert analysis.room_for_growth == 30000
        assert analysis.current_salary_usd == 90000

    def test_fallback_grade_from_ratios(self):
        analysis = analyze_salary({"baseSalary": 100000})
        assert analysis.salary_grade_min == pytest.approx(80000)
        assert analysis.salary_grade_mid == pytest.approx(110000)
        assert analysis.salary_grade_max == pytest.approx(140000)
        assert analysis.comparatio == 91

    def test_configured_ratios(self):
        config = AnalysisConfig(grade_mid_ratio=1.0)
        assert analyze_salary({"baseSalary": 100000}, config).comparatio == 100

    def test_ratio_comparatio_scaled(self):
        analysis = analyze_salary({"baseSalary": 90000, "comparatio": 0.95})
        assert analysis.comparatio == pytest.approx(95)

    @pytest.mark.parametrize(("supplied", "expected"), [(1.5, 150), (2.0, 2.0), (3.0, 3.0), (3.5, 3.5), (78, 78)])
    def test_supplied_comparatio_from_two_up_is_a_percentage(self, supplied, expected):
        analysis = analyze_salary({"baseSalary": 90000, "comparatio": supplied})
        assert analysis.comparatio == pytest.approx(expected)

    def test_local_currency_fallback_grade(self):
        employee = {"baseSalary": 2_500_000, "baseSalaryUSD": 30_000, "currency": "INR"}
        analysis = analyze_salary(employee)
        assert analysis.current_salary == 2_500_000
        assert analysis.current_salary_usd == 30_000
        assert analysis.salary_grade_mid == pytest.approx(2_750_000)

    def test_usd_only_record(self):
        analysis = analyze_salary({"baseSalaryUSD": 50000})
        assert analysis.current_salary == 50000

    @pytest.mark.parametrize(
        ("salary", "position"),
        [
            (70000, PositionInRange.BELOW_MIN),
            (85000, PositionInRange.LOWER_THIRD),
            (100000, PositionInRange.MIDDLE_THIRD),
            (115000, PositionInRange.UPPER_THIRD),
            (120000, PositionInRange.AT_OR_ABOVE_MAX),
        ],
    )
    def test_positions(self, salary, position):
        assert classify_position(salary, 80000, 120000) == position

    def test_comparatio_without_midpoint(self):
        assert compute_comparatio(50000, 0) == 0

    def test_room_for_growth_floored(self):
        analysis = analyze_salary({
            "baseSalary": 130000, "salaryGradeMin": 80000, "salaryGradeMid": 100000, "salaryGradeMax": 120000,
        })
        assert analysis.room_for_growth == 0


class TestProjection:
    def test_conversion_rate(self):
        assert conversion_rate({"baseSalary": 830000, "baseSalaryUSD": 10000}) == 83
        assert conversion_rate({"baseSalary": 50000}) == 1.0

    def test_project_raise_in_local_currency(self):
        employee = {"baseSalary": 830000, "baseSalaryUSD": 10000, "salaryGradeMid": 1_000_000}
        projection = project_raise(employee, 1000)
        assert projection.raise_local == pytest.approx(83000)
        assert projection.new_salary == pytest.approx(913000)
        assert projection.raise_percent == 10.0
        assert projection.new_comparatio == 91
