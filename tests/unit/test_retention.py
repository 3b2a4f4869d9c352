"""Tests for performance tiers and retention risk scoring."""

import pytest

from raiseplanner.config import AnalysisConfig
from raiseplanner.domains.analysis.retention import (
    calculate_retention_risk,
    classify_performance,
    comparatio_component,
    is_flagged_talent,
    market_component,
    performance_component,
    performance_tier,
    risk_level,
    tenure_component,
)
from raiseplanner.domains.analysis.salary import analyze_salary
from raiseplanner.domains.analysis.tenure import calculate_tenure, tenure_for
from raiseplanner.utils.types import PerformanceTier, RiskLevel


class TestPerformanceTier:
    @pytest.mark.parametrize(
        ("rating", "tier"),
        [
            (4.8, PerformanceTier.TOP),
            (4.0, PerformanceTier.STRONG),
            (3.2, PerformanceTier.SOLID),
            (2.0, PerformanceTier.DEVELOPING),
            (1.0, PerformanceTier.LOW),
            (1, PerformanceTier.LOW),
            (0.87, PerformanceTier.STRONG),
            (1.5, PerformanceTier.LOW),
            (0, PerformanceTier.UNKNOWN),
            (None, PerformanceTier.UNKNOWN),
            ("", PerformanceTier.UNKNOWN),
            ("4.6", PerformanceTier.TOP),
            ("Outstanding", PerformanceTier.TOP),
            ("Exceeds Expectations", PerformanceTier.STRONG),
            ("Successful Performer", PerformanceTier.SOLID),
            ("Partially Meets", PerformanceTier.DEVELOPING),
            ("Does Not Meet Expectations", PerformanceTier.LOW),
            ("Something else", PerformanceTier.SOLID),
        ],
    )
    def test_tiers(self, rating, tier):
        assert performance_tier(rating) == tier

    def test_badges(self):
        assert classify_performance(4.6) == ("Excellent", "excellent")
        assert classify_performance(4.1) == ("Good", "good")
        assert classify_performance(3.6) == ("Fair", "fair")
        assert classify_performance(3.2) == ("Poor", "poor")
        assert classify_performance(2.0) == ("Critical", "critical")
        assert classify_performance(1) == ("Critical", "critical")
        assert classify_performance(0.5) == ("Critical", "critical")
        assert classify_performance(0.92) == ("Excellent", "excellent")
        assert classify_performance(None) == ("N/A", "noData")
        assert classify_performance("Successful Performer") == ("Successful Performer", "good")


class TestComponents:
    def test_comparatio_tiers(self):
        assert comparatio_component(75)[0] == 40
        assert comparatio_component(85)[0] == 30
        assert comparatio_component(92)[0] == 20
        assert comparatio_component(98)[0] == 10
        assert comparatio_component(100) == (0, None)
        assert comparatio_component(None) == (0, None)

    def test_lower_comparatio_never_lowers_risk(self):
        scores = [comparatio_component(c)[0] for c in range(130, 40, -1)]
        assert scores == sorted(scores)

    def test_performance_depends_on_pay(self):
        assert performance_component(PerformanceTier.TOP, 85)[0] == 30
        assert performance_component(PerformanceTier.TOP, 95)[0] == 25
        assert performance_component(PerformanceTier.TOP, 110)[0] == 15
        assert performance_component(PerformanceTier.STRONG, 95)[0] == 15
        assert performance_component(PerformanceTier.SOLID, 105) == (0, None)
        assert performance_component(PerformanceTier.LOW, 70) == (0, None)

    def test_unknown_comparatio_treated_as_midpoint(self):
        assert performance_component(PerformanceTier.TOP, None)[0] == 15

    def test_tenure_capped(self, as_of):
        info = calculate_tenure("2024-03-01", "2019-01-01", "2020-01-01", as_of=as_of)
        score, text = tenure_component(info)
        assert score == 20
        assert text.startswith("Tenure: New hire (4 months)")

    def test_tenure_without_signals(self, as_of):
        info = calculate_tenure("2020-01-01", as_of=as_of)
        assert tenure_component(info) == (0, None)

    def test_market_points(self):
        config = AnalysisConfig()
        assert market_component("India", None, config)[0] == 6
        assert market_component("Warsaw, Poland", None, config)[0] == 4
        assert market_component("Germany", None, config) == (1, None)
        assert market_component(None, None, config) == (0, None)
        assert market_component("India", 1, config)[0] == 10

    @pytest.mark.parametrize(("flag", "flagged"), [(1, True), (0, False), (85, True), (40, False), ("text", False)])
    def test_flagged_talent(self, flag, flagged):
        assert is_flagged_talent(flag) is flagged

    def test_levels(self):
        config = AnalysisConfig()
        assert risk_level(70, config) == RiskLevel.CRITICAL
        assert risk_level(50, config) == RiskLevel.HIGH
        assert risk_level(30, config) == RiskLevel.MEDIUM
        assert risk_level(29, config) == RiskLevel.LOW


class TestRetentionRisk:
    def test_underpaid_top_performer(self, make_employee, as_of):
        employee = make_employee()
        risk = calculate_retention_risk(employee, tenure_for(employee, as_of), analyze_salary(employee))
        assert risk.comparatio_risk == 40
        assert risk.performance_risk == 30
        assert risk.market_risk == 2
        assert risk.total_risk == 72
        assert risk.risk_level == RiskLevel.CRITICAL
        assert risk.risk_factors == (
            "Significantly below market pay (comparatio 75%)",
            "Top performer paid well below midpoint",
            "Market: Competitive market (United States)",
        )

    def test_factor_order_is_fixed(self, make_employee, as_of):
        employee = make_employee(country="India", retentionRisk=1, lastRaiseDate="2022-01-01")
        risk = calculate_retention_risk(employee, tenure_for(employee, as_of), analyze_salary(employee))
        assert [f.split(" ")[0] for f in risk.risk_factors] == ["Significantly", "Top", "Tenure:", "Market:"]

    def test_total_is_bounded(self, make_employee, as_of):
        employee = make_employee(
            country="India", retentionRisk=1, hireDate="2024-05-01", lastRaiseDate="2020-01-01",
            roleStartDate="2018-01-01", baseSalary=50000.0, baseSalaryUSD=50000.0,
        )
        risk = calculate_retention_risk(employee, tenure_for(employee, as_of), analyze_salary(employee))
        assert risk.total_risk == 100

    def test_deterministic(self, make_employee, as_of):
        employee = make_employee()
        first = calculate_retention_risk(employee, tenure_for(employee, as_of), analyze_salary(employee))
        second = calculate_retention_risk(employee, tenure_for(employee, as_of), analyze_salary(employee))
        assert first == second

    def test_lowest_numeric_rating_is_not_a_top_performer(self, make_employee, as_of):
        employee = make_employee(performanceRating=1)
        risk = calculate_retention_risk(employee, tenure_for(employee, as_of), analyze_salary(employee))
        assert risk.performance_risk == 0
        assert risk.total_risk == 42
        assert "Top performer paid well below midpoint" not in risk.risk_factors
