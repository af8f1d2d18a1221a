"""Services package."""

from spendwise.services.storage import (
    AuditStorageInterface,
    CorruptDataError,
    ExpenseStorageInterface,
    InMemoryAuditStorage,
    InMemoryExpenseStorage,
    InMemoryPreferencesStorage,
    JsonFileExpenseStorage,
    JsonFilePreferencesStorage,
    JsonLinesAuditStorage,
    PreferencesStorageInterface,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "CorruptDataError",
    "ExpenseStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryExpenseStorage",
    "InMemoryPreferencesStorage",
    "JsonFileExpenseStorage",
    "JsonFilePreferencesStorage",
    "JsonLinesAuditStorage",
    "PreferencesStorageInterface",
    "StorageError",
]
