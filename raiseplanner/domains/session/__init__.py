"""Session domain: merged employees, budget state, persistence and backups."""

from raiseplanner.domains.session.models import BackupSnapshot, ProcessResult, SessionMetadata
from raiseplanner.domains.session.processor import build_employees
from raiseplanner.domains.session.state import (
    AppState,
    apply_recommendation,
    apply_upload,
    budget_usage,
    recover_session,
    reset_session,
    set_budget,
    update_proposed_raise,
)
from raiseplanner.domains.session.store import (
    JsonBackupStore,
    MemoryBackupStore,
    MemoryEmployeeStore,
)
