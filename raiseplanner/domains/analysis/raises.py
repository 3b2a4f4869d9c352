"""Budget-constrained raise recommendation.

Amounts are whole US dollars. The percentage is built up from the risk
level, the gap to grade midpoint and a performance adjustment, then cut
back by the location cap, the grade maximum and the remaining budget, in
that order.
"""

import logging
import math

import numpy as np

from raiseplanner.config import AnalysisConfig
from raiseplanner.domains.analysis.fields import extract_field
from raiseplanner.domains.analysis.models import (
    BudgetContext,
    RaiseRecommendation,
    RetentionRisk,
    SalaryAnalysis,
    TenureInfo,
)
from raiseplanner.domains.analysis.retention import performance_tier
from raiseplanner.domains.analysis.salary import conversion_rate
from raiseplanner.utils.formatting import format_currency
from raiseplanner.utils.types import EmployeeRecord, PerformanceTier, Priority, RiskLevel

logger = logging.getLogger(__name__)

BASE_PERCENT = {
    RiskLevel.CRITICAL: 8.0,
    RiskLevel.HIGH: 6.0,
    RiskLevel.MEDIUM: 4.0,
    RiskLevel.LOW: 2.0,
}

PERFORMANCE_ADJUSTMENT = {
    PerformanceTier.TOP: 2.0,
    PerformanceTier.STRONG: 1.0,
    PerformanceTier.DEVELOPING: -1.0,
    PerformanceTier.LOW: -2.0,
}

# Share of the distance to midpoint closed by the recommendation
MIDPOINT_GAP_SHARE = 0.25


def max_raise_percent(location: str | None, config: AnalysisConfig) -> float:
    """Location cap: restricted markets get their own ceiling."""
    place = (location or "").strip().lower()
    for market, cap in config.restricted_market_caps.items():
        if market in place:
            return float(cap)
    return float(config.default_max_raise_percent)


def grade_headroom_percent(employee: EmployeeRecord, salary: SalaryAnalysis) -> float:
    """Largest raise, as a percent of USD salary, that keeps pay within grade max."""
    if salary.current_salary_usd <= 0:
        return 0.0
    headroom_usd = max(0.0, salary.salary_grade_max - salary.current_salary) / conversion_rate(employee)
    return headroom_usd / salary.current_salary_usd * 100


def raise_priority(total_risk: int, amount: int, percent: float, config: AnalysisConfig) -> Priority:
    if total_risk >= config.critical_risk_threshold:
        return Priority.CRITICAL
    elif total_risk >= config.high_risk_threshold:
        return Priority.HIGH
    elif amount > 0 and (total_risk >= config.medium_risk_threshold or percent >= 5):
        return Priority.MEDIUM
    return Priority.LOW


def _tenure_reasons(tenure: TenureInfo) -> list[str]:
    reasons = []
    if tenure.last_raise_months_ago is not None and tenure.last_raise_months_ago >= 18:
        reasons.append(f"No raise in {tenure.last_raise_months_ago} months")
    if tenure.time_in_role_months >= 36:
        reasons.append(f"{tenure.time_in_role_months} months in current role")
    return reasons


def recommend_raise(
    employee: EmployeeRecord,
    tenure: TenureInfo,
    salary: SalaryAnalysis,
    risk: RetentionRisk,
    budget: BudgetContext,
    config: AnalysisConfig | None = None,
) -> RaiseRecommendation:
    config = config or AnalysisConfig()
    location = extract_field(employee, "location")
    max_percent = max_raise_percent(location, config)
    available = budget.available
    comparatio = salary.comparatio
    tier = performance_tier(extract_field(employee, "performanceRating"))
    reasoning: list[str] = []

    percent = BASE_PERCENT[risk.risk_level]
    if 0 < comparatio < 100:
        percent += (100 - comparatio) * MIDPOINT_GAP_SHARE
        reasoning.append(f"Below market - comparatio {comparatio:.0f}%")
    percent += PERFORMANCE_ADJUSTMENT.get(tier, 0.0)
    if tier in (PerformanceTier.TOP, PerformanceTier.STRONG) and comparatio < 100:
        reasoning.append("High performer retention risk")
    elif tier in (PerformanceTier.DEVELOPING, PerformanceTier.LOW):
        reasoning.append("Performance below expectations")
    percent = max(percent, 0.0)

    if risk.total_risk >= config.medium_risk_threshold:
        reasoning.append(f"Retention risk: {risk.risk_level} ({risk.total_risk}/100)")
    reasoning.extend(_tenure_reasons(tenure))

    if comparatio >= 100 and risk.total_risk < config.medium_risk_threshold:
        percent = 0.0
        reasoning.append("At or above grade midpoint with low retention risk")

    if percent > max_percent:
        percent = max_percent
        reasoning.append(f"Capped at {max_percent:g}% maximum for location")

    headroom = grade_headroom_percent(employee, salary)
    if percent > headroom:
        percent = headroom
        reasoning.append("Limited by salary grade maximum")

    amount = math.floor(salary.current_salary_usd * percent / 100) if percent > 0 else 0
    if amount > available:
        amount = math.floor(available)
        reasoning.append(f"Limited by remaining budget ({format_currency(available)} available)")

    amount = int(np.clip(amount, 0, None))
    effective = amount / salary.current_salary_usd * 100 if salary.current_salary_usd > 0 else 0.0
    effective = round(effective, 2)

    if amount == 0 and not reasoning:
        reasoning.append("No raise recommended")
    logger.debug(
        "Recommendation %s: $%d (%.2f%%) risk=%d",
        extract_field(employee, "employeeId", "?"), amount, effective, risk.total_risk,
    )

    return RaiseRecommendation(
        recommended_amount=amount,
        recommended_percent=effective,
        priority=raise_priority(risk.total_risk, amount, effective, config),
        reasoning=tuple(reasoning),
        max_percent=max_percent,
        available=available,
    )
