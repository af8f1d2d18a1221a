"""
In-Memory Storage Implementation

Used by tests and by hosts that keep the ledger in process memory.
Collections are copied on the way in and out so callers never share a
mutable list with the store.
"""

from typing import Optional
from uuid import UUID

from spendwise.models.audit import AuditEvent
from spendwise.models.expense import Expense, LedgerPreferences
from spendwise.services.storage.interface import (
    AuditStorageInterface,
    ExpenseStorageInterface,
    PreferencesStorageInterface,
)


class InMemoryExpenseStorage(ExpenseStorageInterface):

    def __init__(self, expenses: Optional[list[Expense]] = None):
        self._expenses = list(expenses or [])
        self.save_count = 0

    def load(self) -> list[Expense]:
        return list(self._expenses)

    def save(self, expenses: list[Expense]) -> None:
        self._expenses = list(expenses)
        self.save_count += 1


class InMemoryPreferencesStorage(PreferencesStorageInterface):

    def __init__(self, preferences: Optional[LedgerPreferences] = None):
        self._preferences = preferences

    def load_preferences(self) -> LedgerPreferences:
        return self._preferences or LedgerPreferences()

    def save_preferences(self, preferences: LedgerPreferences) -> None:
        self._preferences = preferences


class InMemoryAuditStorage(AuditStorageInterface):

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
