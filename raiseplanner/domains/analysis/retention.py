"""Multi-factor retention risk scoring.

Four independently capped components are summed into a 0-100 score:

- comparatio (0-40): below-market pay
- performance (0-30): strong performers who are under-paid
- tenure (0-20): very new hires, overdue raises, long stints in one role
- market (0-10): location pressure plus a talent flag from the performance sheet

Risk factor wording is shown verbatim to users, so it is fixed text
derived only from the inputs.
"""

import logging

from raiseplanner.config import AnalysisConfig
from raiseplanner.domains.analysis.fields import extract_field, to_number
from raiseplanner.domains.analysis.models import RetentionRisk, SalaryAnalysis, TenureInfo
from raiseplanner.utils.types import EmployeeRecord, PerformanceTier, RiskLevel

logger = logging.getLogger(__name__)

type Component = tuple[int, str | None]  # (points, risk factor text)

COMPARATIO_RISK_CAP = 40
PERFORMANCE_RISK_CAP = 30
TENURE_RISK_CAP = 20
MARKET_RISK_CAP = 10

# Checked in order, so negative phrasings ("does not meet") win over positive ones
RATING_KEYWORDS: list[tuple[PerformanceTier, tuple[str, ...]]] = [
    (PerformanceTier.LOW, ("not meet", "unsatisf", "below", "poor", "needs", "evolving")),
    (PerformanceTier.DEVELOPING, ("partial", "developing", "fair", "inconsistent")),
    (PerformanceTier.TOP, ("exceptional", "outstanding", "excellent", "high", "impact", "top")),
    (PerformanceTier.STRONG, ("exceeds", "strong", "very good")),
    (PerformanceTier.SOLID, ("successful", "good", "meets", "solid", "achiev")),
]

# (comparatio < 90, comparatio < 100, otherwise)
PERFORMANCE_RISK_POINTS = {
    PerformanceTier.TOP: (30, 25, 15),
    PerformanceTier.STRONG: (20, 15, 8),
    PerformanceTier.SOLID: (10, 5, 0),
}

TIER_LABELS = {
    PerformanceTier.TOP: "Top performer",
    PerformanceTier.STRONG: "Strong performer",
    PerformanceTier.SOLID: "Solid performer",
}


def performance_tier(rating) -> PerformanceTier:
    """Classify a numeric or text rating.

    Numbers from 1 up are read on the 0-5 scale; values strictly between 0 and 1
    are percentage fractions ("87%" -> 0.87) and are scaled to it.
    """
    number = rating if isinstance(rating, (int, float)) and not isinstance(rating, bool) else None
    if number is None and isinstance(rating, str):
        number = to_number(rating) if rating.strip().replace(".", "", 1).isdigit() else None

    if number is not None:
        score = number * 5 if 0 < number < 1 else number
        if score >= 4.5:
            return PerformanceTier.TOP
        elif score >= 4.0:
            return PerformanceTier.STRONG
        elif score >= 3.0:
            return PerformanceTier.SOLID
        elif score >= 2.0:
            return PerformanceTier.DEVELOPING
        elif score > 0:
            return PerformanceTier.LOW
        return PerformanceTier.UNKNOWN

    if not isinstance(rating, str) or not rating.strip():
        return PerformanceTier.UNKNOWN

    text = rating.lower()
    for tier, keywords in RATING_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return tier
    return PerformanceTier.SOLID


def classify_performance(rating) -> tuple[str, str]:
    """Display badge ``(text, css class)`` for a rating."""
    tier = performance_tier(rating)
    if isinstance(rating, str) and not rating.strip().replace(".", "", 1).isdigit():
        match tier:
            case PerformanceTier.TOP:
                return rating, "excellent"
            case PerformanceTier.STRONG | PerformanceTier.SOLID:
                return rating, "good"
            case PerformanceTier.DEVELOPING:
                return rating, "fair"
            case PerformanceTier.LOW:
                return rating, "poor"
            case _:
                return "N/A", "noData"

    number = to_number(rating)
    if number is None or number <= 0:
        return "N/A", "noData"
    score = number * 5 if number < 1 else number
    if score >= 4.5:
        return "Excellent", "excellent"
    elif score >= 4.0:
        return "Good", "good"
    elif score >= 3.5:
        return "Fair", "fair"
    elif score >= 3.0:
        return "Poor", "poor"
    return "Critical", "critical"


def comparatio_component(comparatio: float | None) -> Component:
    if comparatio is None or comparatio <= 0:
        return 0, None
    shown = f"{comparatio:.0f}%"
    if comparatio < 80:
        return 40, f"Significantly below market pay (comparatio {shown})"
    elif comparatio < 90:
        return 30, f"Below market pay (comparatio {shown})"
    elif comparatio < 95:
        return 20, f"Slightly below market pay (comparatio {shown})"
    elif comparatio < 100:
        return 10, f"Paid below grade midpoint (comparatio {shown})"
    return 0, None


def performance_component(tier: PerformanceTier, comparatio: float | None) -> Component:
    points = PERFORMANCE_RISK_POINTS.get(tier)
    if points is None:
        return 0, None

    effective = comparatio if comparatio and comparatio > 0 else 100.0
    if effective < 90:
        score, situation = points[0], "paid well below midpoint"
    elif effective < 100:
        score, situation = points[1], "paid below midpoint"
    else:
        score, situation = points[2], "attractive to competitors"

    if score == 0:
        return 0, None
    return score, f"{TIER_LABELS[tier]} {situation}"


def tenure_component(tenure: TenureInfo) -> Component:
    reasons = []
    score = 0

    known = tenure.tenure_band.value != "Unknown"
    if known and tenure.total_tenure_months < 6:
        score += 12
        reasons.append(f"new hire ({tenure.total_tenure_months} months)")
    elif known and tenure.total_tenure_months < 12:
        score += 8
        reasons.append(f"new hire ({tenure.total_tenure_months} months)")

    since_raise = tenure.last_raise_months_ago
    if since_raise is not None:
        if since_raise >= 24:
            score += 12
        elif since_raise >= 18:
            score += 8
        elif since_raise >= 12:
            score += 4
        if since_raise >= 12:
            reasons.append(f"no raise in {since_raise} months")

    if tenure.time_in_role_months >= 48:
        score += 6
    elif tenure.time_in_role_months >= 36:
        score += 4
    if tenure.time_in_role_months >= 36:
        reasons.append(f"{tenure.time_in_role_months} months in current role")

    if score == 0:
        return 0, None
    text = "; ".join(reasons)
    return min(score, TENURE_RISK_CAP), f"Tenure: {text[0].upper()}{text[1:]}"


def is_flagged_talent(retention_flag) -> bool:
    """Yes/no flags arrive as 1/0; numeric sources use a 0-100 score."""
    number = to_number(retention_flag)
    if number is None:
        return False
    return number == 1 or number >= 70


def market_component(location: str | None, retention_flag, config: AnalysisConfig) -> Component:
    reasons = []
    score = 0

    if location:
        place = location.strip().lower()
        points = next(
            (pts for market, pts in config.market_risk_points.items() if market in place),
            config.other_market_points,
        )
        score += points
        if points > config.other_market_points:
            reasons.append(f"competitive market ({location.strip()})")

    # A 0-100 score of exactly 1 is indistinguishable from a "yes" flag and counts as flagged
    if is_flagged_talent(retention_flag):
        score += config.flagged_talent_points
        reasons.append("flagged as retention risk in performance data")

    if score == 0:
        return 0, None
    if not reasons:
        return min(score, MARKET_RISK_CAP), None
    text = "; ".join(reasons)
    return min(score, MARKET_RISK_CAP), f"Market: {text[0].upper()}{text[1:]}"


def risk_level(total: int, config: AnalysisConfig) -> RiskLevel:
    if total >= config.critical_risk_threshold:
        return RiskLevel.CRITICAL
    elif total >= config.high_risk_threshold:
        return RiskLevel.HIGH
    elif total >= config.medium_risk_threshold:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def calculate_retention_risk(
    employee: EmployeeRecord,
    tenure: TenureInfo,
    salary: SalaryAnalysis,
    config: AnalysisConfig | None = None,
) -> RetentionRisk:
    config = config or AnalysisConfig()
    comparatio = salary.comparatio if salary.comparatio > 0 else None
    tier = performance_tier(extract_field(employee, "performanceRating"))

    components = [
        comparatio_component(comparatio),
        performance_component(tier, comparatio),
        tenure_component(tenure),
        market_component(
            extract_field(employee, "location"),
            extract_field(employee, "retentionRisk"),
            config,
        ),
    ]
    caps = (COMPARATIO_RISK_CAP, PERFORMANCE_RISK_CAP, TENURE_RISK_CAP, MARKET_RISK_CAP)
    scores = [min(points, cap) for (points, _), cap in zip(components, caps)]
    total = min(sum(scores), 100)

    return RetentionRisk(
        comparatio_risk=scores[0],
        performance_risk=scores[1],
        tenure_risk=scores[2],
        market_risk=scores[3],
        total_risk=total,
        risk_level=risk_level(total, config),
        risk_factors=tuple(text for (_, text) in components if text),
    )
