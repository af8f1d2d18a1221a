"""
Storage Services Package

Provides abstract interfaces and concrete implementations for persisting
the expense collection, preferences and the audit log.
"""

from spendwise.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    ExpenseStorageInterface,
    PreferencesStorageInterface,
    StorageError,
)
from spendwise.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryExpenseStorage,
    InMemoryPreferencesStorage,
)
from spendwise.services.storage.json_file import (
    JsonFileExpenseStorage,
    JsonFilePreferencesStorage,
    JsonLinesAuditStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "ExpenseStorageInterface",
    "PreferencesStorageInterface",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryExpenseStorage",
    "InMemoryPreferencesStorage",
    # JSON file implementation
    "JsonFileExpenseStorage",
    "JsonFilePreferencesStorage",
    "JsonLinesAuditStorage",
]
