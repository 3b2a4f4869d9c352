"""Analysis domain: tenure, salary position, retention risk and raises.

Every analysis is a pure function of the employee record, the budget
context and the evaluation date.
"""

from raiseplanner.domains.analysis.engine import analyze_employee, build_recommendation_table
from raiseplanner.domains.analysis.models import BudgetContext, EmployeeAnalysis, RaiseRecommendation
from raiseplanner.domains.analysis.raises import recommend_raise
from raiseplanner.domains.analysis.retention import calculate_retention_risk, classify_performance
from raiseplanner.domains.analysis.salary import analyze_salary, local_amount, project_raise
from raiseplanner.domains.analysis.tenure import calculate_tenure
