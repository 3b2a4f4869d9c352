"""Salary position within grade, comparatio, and currency projections."""

import logging

from raiseplanner.config import AnalysisConfig
from raiseplanner.domains.analysis.fields import extract_number
from raiseplanner.domains.analysis.models import RaiseProjection, SalaryAnalysis
from raiseplanner.utils.types import EmployeeRecord, PositionInRange

logger = logging.getLogger(__name__)

type GradeBounds = tuple[float, float, float]  # (min, mid, max)

# Exports sometimes carry comparatio as a ratio (0.95) rather than a percentage (95)
RATIO_COMPARATIO_CEILING = 2.0


def resolve_grade(employee: EmployeeRecord, reference_salary: float, config: AnalysisConfig) -> GradeBounds:
    """Grade bounds from the record, falling back to configured ratios of base pay."""
    return (
        extract_number(employee, "salaryGradeMin", reference_salary * config.grade_min_ratio),
        extract_number(employee, "salaryGradeMid", reference_salary * config.grade_mid_ratio),
        extract_number(employee, "salaryGradeMax", reference_salary * config.grade_max_ratio),
    )


def compute_comparatio(salary: float, grade_mid: float) -> int:
    if grade_mid <= 0:
        return 0
    return round(salary / grade_mid * 100)


def normalize_comparatio(value: float) -> float:
    """Scale ratios below 2 (0.95) to percentages; anything from 2 up is already a percentage."""
    return value * 100 if 0 < value < RATIO_COMPARATIO_CEILING else value


def classify_position(salary: float, grade_min: float, grade_max: float) -> PositionInRange:
    if salary < grade_min:
        return PositionInRange.BELOW_MIN
    if salary >= grade_max:
        return PositionInRange.AT_OR_ABOVE_MAX

    share = (salary - grade_min) / (grade_max - grade_min)
    if share < 1 / 3:
        return PositionInRange.LOWER_THIRD
    elif share < 2 / 3:
        return PositionInRange.MIDDLE_THIRD
    else:
        return PositionInRange.UPPER_THIRD


def analyze_salary(employee: EmployeeRecord, config: AnalysisConfig | None = None) -> SalaryAnalysis:
    config = config or AnalysisConfig()
    salary_usd = extract_number(employee, "baseSalaryUSD", 0.0)
    current = extract_number(employee, "baseSalary", salary_usd)
    current_usd = salary_usd or current
    # Fallback bounds are ratios of the USD salary, expressed in the local currency
    reference = (salary_usd * conversion_rate(employee)) if salary_usd else current

    grade_min, grade_mid, grade_max = resolve_grade(employee, reference, config)

    supplied = extract_number(employee, "comparatio")
    if supplied is not None and supplied > 0:
        comparatio = normalize_comparatio(supplied)
    else:
        comparatio = compute_comparatio(current, grade_mid)

    return SalaryAnalysis(
        current_salary=current,
        current_salary_usd=current_usd,
        salary_grade_min=grade_min,
        salary_grade_mid=grade_mid,
        salary_grade_max=grade_max,
        comparatio=float(comparatio),
        position_in_range=classify_position(current, grade_min, grade_max),
        room_for_growth=max(0.0, grade_max - current),
    )


def conversion_rate(employee: EmployeeRecord) -> float:
    """Local currency units per USD, derived only from the record's own figures."""
    local = extract_number(employee, "baseSalary", 0.0)
    usd = extract_number(employee, "baseSalaryUSD", 0.0)
    if local > 0 and usd > 0:
        return local / usd
    return 1.0


def local_amount(employee: EmployeeRecord, amount_usd: float) -> float:
    return amount_usd * conversion_rate(employee)


def project_raise(
    employee: EmployeeRecord,
    proposed_usd: float,
    config: AnalysisConfig | None = None,
) -> RaiseProjection:
    """New salary, raise percentage and comparatio after a proposed USD raise."""
    analysis = analyze_salary(employee, config)
    raise_local = local_amount(employee, proposed_usd)
    new_salary = analysis.current_salary + raise_local
    percent = raise_local / analysis.current_salary * 100 if analysis.current_salary > 0 else 0.0
    return RaiseProjection(
        raise_local=raise_local,
        new_salary=new_salary,
        raise_percent=round(percent, 2),
        new_comparatio=compute_comparatio(new_salary, analysis.salary_grade_mid),
    )
