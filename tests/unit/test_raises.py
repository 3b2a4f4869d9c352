"""Tests for raise recommendations and the recommendation table."""

import math

import pandas as pd
import pytest

from raiseplanner.config import AnalysisConfig
from raiseplanner.domains.analysis import BudgetContext, analyze_employee, build_recommendation_table
from raiseplanner.domains.analysis.models import SalaryAnalysis
from raiseplanner.domains.analysis.raises import grade_headroom_percent, max_raise_percent, raise_priority
from raiseplanner.utils.types import PositionInRange, Priority, RiskLevel


class TestBudgetContext:
    def test_available_floored(self):
        assert BudgetContext(1000, 1500).available == 0
        assert BudgetContext(1000, 250).available == 750


class TestRecommendation:
    def test_underpaid_top_performer_new_hire(self, make_employee, as_of):
        employee = make_employee(comparatio=75, hireDate="2024-01-01")
        analysis = analyze_employee(employee, BudgetContext(50000), as_of)
        rec = analysis.recommendation

        assert analysis.tenure.total_tenure_months == 6
        assert rec.max_percent == 12
        assert rec.recommended_amount > 0
        assert rec.recommended_amount <= 75000 * 0.12
        assert rec.recommended_amount <= 50000

    def test_reasoning_trail(self, make_employee, as_of):
        rec = analyze_employee(make_employee(), BudgetContext(50000), as_of).recommendation
        assert rec.recommended_amount == 9000
        assert rec.recommended_percent == 12.0
        assert rec.priority == Priority.CRITICAL
        assert rec.reasoning == (
            "Below market - comparatio 75%",
            "High performer retention risk",
            "Retention risk: Critical (72/100)",
            "Capped at 12% maximum for location",
        )

    def test_limited_by_budget(self, make_employee, as_of):
        rec = analyze_employee(make_employee(), BudgetContext(10000, 8000), as_of).recommendation
        assert rec.recommended_amount == 2000
        assert rec.reasoning[-1] == "Limited by remaining budget ($2,000 available)"

    def test_exhausted_budget(self, make_employee, as_of):
        rec = analyze_employee(make_employee(), BudgetContext(10000, 12000), as_of).recommendation
        assert rec.recommended_amount == 0
        assert rec.available == 0

    def test_restricted_market_cap(self, make_employee, as_of):
        rec = analyze_employee(make_employee(country="India"), BudgetContext(50000), as_of).recommendation
        assert rec.max_percent == 10
        assert rec.recommended_amount == 7500
        assert "Capped at 10% maximum for location" in rec.reasoning

    def test_well_paid_low_risk_gets_nothing(self, make_employee, as_of):
        employee = make_employee(baseSalary=110000.0, baseSalaryUSD=110000.0, performanceRating=3.0)
        analysis = analyze_employee(employee, BudgetContext(50000), as_of)
        assert analysis.risk.risk_level == RiskLevel.LOW
        assert analysis.recommendation.recommended_amount == 0
        assert analysis.recommendation.priority == Priority.LOW

    def test_weak_performer_adjusted_down(self, make_employee, as_of):
        strong = analyze_employee(make_employee(baseSalary=97000.0, baseSalaryUSD=97000.0), BudgetContext(1e6), as_of)
        weak = analyze_employee(
            make_employee(baseSalary=97000.0, baseSalaryUSD=97000.0, performanceRating=1.5),
            BudgetContext(1e6),
            as_of,
        )
        assert weak.recommendation.recommended_amount < strong.recommendation.recommended_amount
        assert "Performance below expectations" in weak.recommendation.reasoning

    @pytest.mark.parametrize("available", [1e6, 5000])
    def test_lowest_rating_never_outranks_middle_rating(self, make_employee, as_of, available):
        lowest = analyze_employee(make_employee(performanceRating=1), BudgetContext(available), as_of).recommendation
        middle = analyze_employee(make_employee(performanceRating=3.0), BudgetContext(available), as_of).recommendation
        assert lowest.recommended_amount <= middle.recommended_amount
        assert "High performer retention risk" not in lowest.reasoning

    def test_amount_in_usd_for_local_currency(self, make_employee, as_of):
        employee = make_employee(
            country="Poland", currency="PLN",
            baseSalary=300000.0, baseSalaryUSD=75000.0,
            salaryGradeMin=320000.0, salaryGradeMid=400000.0, salaryGradeMax=480000.0,
        )
        rec = analyze_employee(employee, BudgetContext(50000), as_of).recommendation
        assert rec.recommended_amount == 9000

    @pytest.mark.parametrize("available", [0, 1, 500, 4321.9, 100000])
    def test_never_exceeds_constraints(self, make_employee, as_of, available):
        rec = analyze_employee(make_employee(), BudgetContext(available), as_of).recommendation
        assert 0 <= rec.recommended_amount <= math.floor(available)
        assert rec.recommended_amount <= 75000 * rec.max_percent / 100


class TestHelpers:
    def test_max_percent(self):
        config = AnalysisConfig()
        assert max_raise_percent("Bangalore, India", config) == 10
        assert max_raise_percent("Brazil", config) == 12
        assert max_raise_percent(None, config) == 12

    def test_grade_headroom(self):
        salary = SalaryAnalysis(95000, 95000, 80000, 90000, 100000, 105.0, PositionInRange.UPPER_THIRD, 5000)
        assert grade_headroom_percent({}, salary) == pytest.approx(5000 / 95000 * 100)

    def test_priority(self):
        config = AnalysisConfig()
        assert raise_priority(75, 0, 0, config) == Priority.CRITICAL
        assert raise_priority(55, 0, 0, config) == Priority.HIGH
        assert raise_priority(35, 100, 1.0, config) == Priority.MEDIUM
        assert raise_priority(10, 100, 6.0, config) == Priority.MEDIUM
        assert raise_priority(35, 0, 0, config) == Priority.LOW
        assert raise_priority(10, 100, 2.0, config) == Priority.LOW


class TestRecommendationTable:
    def test_shared_budget_committed_serially(self, make_employee, as_of):
        employees = [make_employee(employeeId=f"E{i}", name=f"Person {i}") for i in range(3)]
        df = build_recommendation_table(employees, 20000, as_of)
        assert list(df["recommendedAmount"]) == [9000, 9000, 2000]
        assert df["recommendedAmount"].sum() <= 20000
        assert list(df["employeeId"]) == ["E0", "E1", "E2"]

    def test_columns(self, make_employee, as_of):
        df = build_recommendation_table([make_employee()], 50000, as_of)
        row = df.iloc[0]
        assert row["riskLevel"] == "Critical"
        assert row["tenureBand"] == "Early (1-3 years)"
        assert row["positionInRange"] == "Below Minimum"
        assert "Capped at 12% maximum for location" in row["reasoning"]

    def test_empty(self):
        df = build_recommendation_table([], 1000)
        assert isinstance(df, pd.DataFrame)
        assert df.empty
