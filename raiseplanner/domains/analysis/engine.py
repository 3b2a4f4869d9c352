"""Per-employee analysis and the budget-aware recommendation table."""

import logging
from datetime import date

import pandas as pd

from raiseplanner.config import AnalysisConfig
from raiseplanner.domains.analysis.fields import extract_field, extract_number
from raiseplanner.domains.analysis.models import BudgetContext, EmployeeAnalysis, recommendation_schema
from raiseplanner.domains.analysis.raises import recommend_raise
from raiseplanner.domains.analysis.retention import calculate_retention_risk
from raiseplanner.domains.analysis.salary import analyze_salary
from raiseplanner.domains.analysis.tenure import tenure_for
from raiseplanner.utils.types import EmployeeRecord
from raiseplanner.utils.validators import validate_dataframe

logger = logging.getLogger(__name__)

RECOMMENDATION_COLUMNS = [
    "employeeId",
    "name",
    "country",
    "currentSalaryUSD",
    "comparatio",
    "positionInRange",
    "tenureBand",
    "totalRisk",
    "riskLevel",
    "recommendedAmount",
    "recommendedPercent",
    "priority",
    "proposedRaise",
    "reasoning",
]


def analyze_employee(
    employee: EmployeeRecord,
    budget: BudgetContext,
    as_of: date | None = None,
    config: AnalysisConfig | None = None,
) -> EmployeeAnalysis:
    """Run all four analyses for one employee.

    Nothing is cached; callers re-run this after any edit to the record or
    to the budget so the numbers always reflect current state.
    """
    config = config or AnalysisConfig()
    tenure = tenure_for(employee, as_of)
    salary = analyze_salary(employee, config)
    risk = calculate_retention_risk(employee, tenure, salary, config)
    recommendation = recommend_raise(employee, tenure, salary, risk, budget, config)
    return EmployeeAnalysis(
        employee_id=str(extract_field(employee, "employeeId", "")),
        tenure=tenure,
        salary=salary,
        risk=risk,
        recommendation=recommendation,
    )


def build_recommendation_table(
    employees: list[EmployeeRecord],
    total_budget: float,
    as_of: date | None = None,
    config: AnalysisConfig | None = None,
) -> pd.DataFrame:
    """Recommend raises for everyone against one shared budget.

    Employees are processed in order and each recommendation is committed to
    the running usage before the next employee is analysed.
    """
    rows = []
    usage = 0.0
    for employee in employees:
        analysis = analyze_employee(employee, BudgetContext(total_budget, usage), as_of, config)
        rec = analysis.recommendation
        usage += rec.recommended_amount
        rows.append({
            "employeeId": analysis.employee_id,
            "name": extract_field(employee, "name"),
            "country": extract_field(employee, "location"),
            "currentSalaryUSD": analysis.salary.current_salary_usd,
            "comparatio": analysis.salary.comparatio,
            "positionInRange": str(analysis.salary.position_in_range),
            "tenureBand": str(analysis.tenure.tenure_band),
            "totalRisk": analysis.risk.total_risk,
            "riskLevel": str(analysis.risk.risk_level),
            "recommendedAmount": rec.recommended_amount,
            "recommendedPercent": rec.recommended_percent,
            "priority": str(rec.priority),
            "proposedRaise": extract_number(employee, "proposedRaise", 0.0),
            "reasoning": "; ".join(rec.reasoning),
        })

    df = pd.DataFrame(rows, columns=RECOMMENDATION_COLUMNS)
    outcome = validate_dataframe(df, recommendation_schema)
    for error in outcome["errors"]:
        logger.warning("Recommendation table check failed: %s", error)

    logger.info(
        "Recommended %d raises totalling $%.0f of $%.0f budget",
        int((df["recommendedAmount"] > 0).sum()), usage, total_budget,
    )
    return df
