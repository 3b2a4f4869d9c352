"""Persistent session store and debounced backup store."""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from raiseplanner.domains.session.models import BackupSnapshot, SessionMetadata
from raiseplanner.utils.types import EmployeeRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class EmployeeStore(Protocol):
    """Durable copy of the last processed session."""

    async def get_employees(self) -> list[EmployeeRecord]: ...

    async def get_current_session(self) -> SessionMetadata | None: ...

    async def save(self, employees: list[EmployeeRecord], session: SessionMetadata | None) -> None: ...

    async def reset_all_data(self) -> None: ...


@runtime_checkable
class BackupStore(Protocol):
    """Best-effort snapshots of employees and budget."""

    def restore_from_storage(self) -> BackupSnapshot | None: ...

    def schedule_backup(
        self,
        employees: list[EmployeeRecord],
        total_budget: float,
        currency: str,
        debounce_ms: int | None = None,
    ) -> None: ...

    def reset_all_backups(self) -> None: ...


@dataclass
class MemoryEmployeeStore:
    employees: list[EmployeeRecord] = field(default_factory=list)
    session: SessionMetadata | None = None

    async def get_employees(self) -> list[EmployeeRecord]:
        return [dict(e) for e in self.employees]

    async def get_current_session(self) -> SessionMetadata | None:
        return self.session

    async def save(self, employees: list[EmployeeRecord], session: SessionMetadata | None) -> None:
        self.employees = [dict(e) for e in employees]
        self.session = session

    async def reset_all_data(self) -> None:
        self.employees = []
        self.session = None


@dataclass
class MemoryBackupStore:
    """Backup store that keeps the latest snapshot in memory, without debouncing."""

    snapshot: BackupSnapshot | None = None

    def restore_from_storage(self) -> BackupSnapshot | None:
        return self.snapshot

    def schedule_backup(self, employees, total_budget, currency, debounce_ms=None) -> None:
        self.snapshot = BackupSnapshot([dict(e) for e in employees], float(total_budget), currency)

    def reset_all_backups(self) -> None:
        self.snapshot = None


class JsonBackupStore:
    """Backup snapshots written to a JSON file.

    ``schedule_backup`` coalesces bursts of edits: inside a running event
    loop only the last call within ``debounce_ms`` is written. Outside a loop
    the snapshot is written immediately.
    """

    def __init__(self, path: Path, debounce_ms: int = 2000) -> None:
        self.path = Path(path)
        self.debounce_ms = debounce_ms
        self._pending: asyncio.TimerHandle | None = None

    def restore_from_storage(self) -> BackupSnapshot | None:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable backup %s: %s", self.path, exc)
            return None
        return BackupSnapshot.from_dict(payload)

    def write(self, snapshot: BackupSnapshot) -> None:
        self._pending = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(snapshot.to_dict(), default=str, indent=2), encoding="utf-8")
        except OSError:
            logger.error("Backup to %s failed", self.path, exc_info=True)
            return
        logger.debug("Backed up %d employees to %s", len(snapshot.employees), self.path)

    def schedule_backup(self, employees, total_budget, currency, debounce_ms=None) -> None:
        snapshot = BackupSnapshot([dict(e) for e in employees], float(total_budget), currency)
        delay = self.debounce_ms if debounce_ms is None else debounce_ms
        self.cancel_pending()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None or delay <= 0:
            self.write(snapshot)
        else:
            self._pending = loop.call_later(delay / 1000, self.write, snapshot)

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def reset_all_backups(self) -> None:
        self.cancel_pending()
        self.path.unlink(missing_ok=True)
