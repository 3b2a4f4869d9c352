"""Analysis result types and the pandera schema for recommendation tables."""

from dataclasses import dataclass

import pandera as pa
from pandera import Check, Column

from raiseplanner.utils.types import PositionInRange, Priority, RiskLevel, TenureBand


@dataclass(frozen=True)
class BudgetContext:
    total_budget: float
    current_usage: float = 0.0

    @property
    def available(self) -> float:
        return max(0.0, float(self.total_budget) - float(self.current_usage))


@dataclass(frozen=True)
class TenureInfo:
    years_of_service: int
    total_tenure_months: int
    time_in_role_months: int
    tenure_band: TenureBand
    last_raise_months_ago: int | None


@dataclass(frozen=True)
class SalaryAnalysis:
    current_salary: float
    current_salary_usd: float
    salary_grade_min: float
    salary_grade_mid: float
    salary_grade_max: float
    comparatio: float
    position_in_range: PositionInRange
    room_for_growth: float


@dataclass(frozen=True)
class RetentionRisk:
    comparatio_risk: int
    performance_risk: int
    tenure_risk: int
    market_risk: int
    total_risk: int
    risk_level: RiskLevel
    risk_factors: tuple[str, ...]


@dataclass(frozen=True)
class RaiseRecommendation:
    recommended_amount: int
    recommended_percent: float
    priority: Priority
    reasoning: tuple[str, ...]
    max_percent: float
    available: float


@dataclass(frozen=True)
class EmployeeAnalysis:
    employee_id: str
    tenure: TenureInfo
    salary: SalaryAnalysis
    risk: RetentionRisk
    recommendation: RaiseRecommendation


@dataclass(frozen=True)
class RaiseProjection:
    """Effect of a proposed USD raise, expressed in the employee's currency."""

    raise_local: float
    new_salary: float
    raise_percent: float
    new_comparatio: int


recommendation_schema = pa.DataFrameSchema(
    {
        "employeeId": Column(str, nullable=False),
        "name": Column(nullable=True),
        "comparatio": Column(float, Check.greater_than_or_equal_to(0)),
        "positionInRange": Column(str, Check.isin([p.value for p in PositionInRange])),
        "tenureBand": Column(str, Check.isin([b.value for b in TenureBand])),
        "totalRisk": Column(int, Check.in_range(0, 100)),
        "riskLevel": Column(str, Check.isin([r.value for r in RiskLevel])),
        "recommendedAmount": Column(int, Check.greater_than_or_equal_to(0)),
        "recommendedPercent": Column(float, Check.greater_than_or_equal_to(0)),
        "priority": Column(str, Check.isin([p.value for p in Priority])),
        "proposedRaise": Column(float, Check.greater_than_or_equal_to(0)),
    },
    strict=False,
    coerce=True,
)
