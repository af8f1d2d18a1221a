"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document per concern on local disk,
the desktop counterpart of the browser key-value store the app
started with:
1. Human-readable, easy to back up
2. No database setup required
3. Whole-collection load/save matches the storage interface

TRADEOFFS:
- Every save rewrites the whole file (fine for a personal ledger)
- Writes go to a temp file first and are swapped in with os.replace,
  so a crash never leaves a half-written collection behind

Unreadable data raises CorruptDataError instead of loading as empty;
an empty load followed by a save would erase the ledger.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union
from uuid import UUID

import structlog
from pydantic import ValidationError

from spendwise.config import get_settings
from spendwise.models.audit import AuditEvent
from spendwise.models.expense import Expense, LedgerPreferences
from spendwise.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    ExpenseStorageInterface,
    PreferencesStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


def _atomic_write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except OSError as e:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError(f"Failed to write {path}: {e}") from e


def _read_json(path: Path):
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Failed to read {path}: {e}") from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"{path} is not valid JSON: {e}") from e


class JsonFileExpenseStorage(ExpenseStorageInterface):
    """Stores the expense collection as a JSON array."""

    def __init__(self, path: Optional[PathLike] = None):
        self._path = Path(path or get_settings().storage.data_path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Expense]:
        if not self._path.exists():
            return []

        data = _read_json(self._path)
        if not isinstance(data, list):
            raise CorruptDataError(f"{self._path} does not contain a list of expenses")

        try:
            expenses = [Expense.model_validate(item) for item in data]
        except ValidationError as e:
            raise CorruptDataError(f"{self._path} contains an invalid expense: {e}") from e

        logger.debug("expenses_loaded", path=str(self._path), count=len(expenses))
        return expenses

    def save(self, expenses: list[Expense]) -> None:
        payload = [expense.model_dump(mode="json") for expense in expenses]
        _atomic_write(self._path, json.dumps(payload, ensure_ascii=False, indent=2))
        logger.debug("expenses_saved", path=str(self._path), count=len(expenses))


class JsonFilePreferencesStorage(PreferencesStorageInterface):
    """Stores LedgerPreferences as a JSON object."""

    def __init__(self, path: Optional[PathLike] = None):
        self._path = Path(path or get_settings().storage.preferences_path)

    def load_preferences(self) -> LedgerPreferences:
        if not self._path.exists():
            return LedgerPreferences()

        data = _read_json(self._path)
        try:
            return LedgerPreferences.model_validate(data)
        except ValidationError as e:
            raise CorruptDataError(f"{self._path} contains invalid preferences: {e}") from e

    def save_preferences(self, preferences: LedgerPreferences) -> None:
        _atomic_write(self._path, preferences.model_dump_json(indent=2))


class JsonLinesAuditStorage(AuditStorageInterface):
    """Append-only audit log, one JSON event per line."""

    def __init__(self, path: Optional[PathLike] = None):
        self._path = Path(path or get_settings().storage.audit_path)

    def append_event(self, event: AuditEvent) -> bool:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(event.model_dump_json() + "\n")
        return True

    def _read_events(self) -> list[AuditEvent]:
        if not self._path.exists():
            return []
        events = []
        with self._path.open(encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    events.append(AuditEvent.model_validate_json(line))
        return events

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._read_events() if e.correlation_id == correlation_id]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._read_events()))[:limit]
