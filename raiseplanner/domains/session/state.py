"""Application state and the operations that move it forward.

State is an explicit value: every operation takes an ``AppState`` and
returns a new one. Stores are passed in by the caller.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date

from raiseplanner.config import AnalysisConfig
from raiseplanner.domains.analysis.engine import analyze_employee
from raiseplanner.domains.analysis.fields import extract_number
from raiseplanner.domains.analysis.models import BudgetContext, EmployeeAnalysis
from raiseplanner.domains.ingestion.models import FileUploadResult
from raiseplanner.domains.session.models import FileMetadata, SessionMetadata
from raiseplanner.domains.session.processor import build_employees, employee_key
from raiseplanner.domains.session.store import BackupStore, EmployeeStore
from raiseplanner.utils.types import EmployeeRecord, FileType

logger = logging.getLogger(__name__)

SESSION_FILE_NAME = "Restored session"
# Uploads are followed by more uploads, so their backup waits longer
UPLOAD_BACKUP_DELAY_MS = 5000


@dataclass(frozen=True)
class AppState:
    employees: list[EmployeeRecord] = field(default_factory=list)
    uploaded_files: list[FileUploadResult] = field(default_factory=list)
    total_budget: float = 0.0
    budget_currency: str = "USD"
    warnings: list[str] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.employees)


def _split_name(record: EmployeeRecord) -> EmployeeRecord:
    parts = str(record.get("name") or "").split()
    return {
        **record,
        "firstName": parts[0] if parts else "",
        "lastName": " ".join(parts[1:]),
    }


def _files_from_metadata(session: SessionMetadata) -> list[FileUploadResult]:
    """Upload summaries for a restored session; row data is already merged."""
    files = []
    for meta in (session.salary_file, session.performance_file):
        if meta is None:
            continue
        files.append(FileUploadResult(
            file_name=meta.name,
            file_type=meta.file_type,
            row_count=meta.row_count,
            valid_rows=meta.row_count,
        ))
    return files


async def recover_session(store: EmployeeStore, backup: BackupStore | None = None) -> AppState:
    """Initial state from the persistent store, else from the latest backup."""
    try:
        employees = await store.get_employees()
        if employees:
            session = await store.get_current_session()
            logger.info("Recovered %d employees from stored session", len(employees))
            return AppState(
                employees=[_split_name(e) for e in employees],
                uploaded_files=_files_from_metadata(session) if session else [],
            )

        snapshot = backup.restore_from_storage() if backup else None
        if snapshot and snapshot.employees:
            logger.info("Restored %d employees from backup saved %s", len(snapshot.employees), snapshot.saved_at)
            return AppState(
                employees=list(snapshot.employees),
                total_budget=snapshot.total_budget,
                budget_currency=snapshot.budget_currency,
            )
    except Exception:
        logger.error("Session recovery failed, starting fresh", exc_info=True)

    return AppState()


def session_metadata(state: AppState) -> SessionMetadata:
    latest: dict[FileType, FileMetadata] = {}
    for result in state.uploaded_files:
        latest[result.file_type] = FileMetadata(result.file_name, result.file_type, result.row_count)
    return SessionMetadata(
        salary_file=latest.get(FileType.SALARY),
        performance_file=latest.get(FileType.PERFORMANCE),
    )


async def persist_session(state: AppState, store: EmployeeStore) -> None:
    await store.save(state.employees, session_metadata(state))


def _backup(state: AppState, backup: BackupStore | None, debounce_ms: int | None = None) -> None:
    if backup is not None and state.employees:
        backup.schedule_backup(state.employees, state.total_budget, state.budget_currency, debounce_ms)


def apply_upload(state: AppState, result: FileUploadResult, backup: BackupStore | None = None) -> AppState:
    """Record an upload and rebuild employees from every upload with row data.

    Employees restored from a previous session stand in as the salary data
    when no salary upload with rows is available.
    """
    uploaded = [*state.uploaded_files, result]
    sources = [r for r in uploaded if r.data]
    if state.employees and not any(r.file_type == FileType.SALARY for r in sources):
        restored = FileUploadResult(
            file_name=SESSION_FILE_NAME,
            file_type=FileType.SALARY,
            row_count=len(state.employees),
            valid_rows=len(state.employees),
            data=state.employees,
        )
        sources.insert(0, restored)

    processed = build_employees(sources)
    employees = processed.employees or state.employees
    new_state = replace(state, employees=employees, uploaded_files=uploaded, warnings=processed.warnings)
    _backup(new_state, backup, UPLOAD_BACKUP_DELAY_MS)
    return new_state


def budget_usage(state: AppState, exclude: str | None = None) -> float:
    """Sum of proposed raises, optionally leaving one employee out."""
    return sum(
        extract_number(e, "proposedRaise", 0.0)
        for e in state.employees
        if exclude is None or employee_key(e) != exclude
    )


def budget_context(state: AppState, exclude: str | None = None) -> BudgetContext:
    return BudgetContext(state.total_budget, budget_usage(state, exclude))


def _index_of(state: AppState, employee_id: str) -> int:
    for idx, employee in enumerate(state.employees):
        if employee_key(employee) == employee_id:
            return idx
    raise KeyError(f"Unknown employee: {employee_id}")


def update_proposed_raise(
    state: AppState,
    employee_id: str,
    amount: float,
    backup: BackupStore | None = None,
) -> AppState:
    if amount < 0:
        raise ValueError("Proposed raise cannot be negative")
    idx = _index_of(state, employee_id)
    employees = list(state.employees)
    employees[idx] = {**employees[idx], "proposedRaise": amount}
    new_state = replace(state, employees=employees)
    _backup(new_state, backup)
    return new_state


def analyze(
    state: AppState,
    employee_id: str,
    as_of: date | None = None,
    config: AnalysisConfig | None = None,
) -> EmployeeAnalysis:
    """Analyse one employee against the budget left by everyone else."""
    employee = state.employees[_index_of(state, employee_id)]
    return analyze_employee(employee, budget_context(state, exclude=employee_id), as_of, config)


def apply_recommendation(
    state: AppState,
    employee_id: str,
    as_of: date | None = None,
    config: AnalysisConfig | None = None,
    backup: BackupStore | None = None,
) -> AppState:
    """Accept the engine's recommendation as the employee's proposed raise."""
    recommendation = analyze(state, employee_id, as_of, config).recommendation
    return update_proposed_raise(state, employee_id, recommendation.recommended_amount, backup)


def set_budget(
    state: AppState,
    total_budget: float,
    currency: str | None = None,
    backup: BackupStore | None = None,
) -> AppState:
    if total_budget < 0:
        raise ValueError("Budget cannot be negative")
    new_state = replace(
        state,
        total_budget=float(total_budget),
        budget_currency=(currency or state.budget_currency).upper(),
    )
    _backup(new_state, backup)
    return new_state


async def reset_session(store: EmployeeStore, backup: BackupStore | None = None) -> AppState:
    await store.reset_all_data()
    if backup is not None:
        backup.reset_all_backups()
    logger.info("Session reset")
    return AppState()
