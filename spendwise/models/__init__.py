"""
Data Models Package

This package contains all Pydantic models used in Spendwise.
All data flowing through the ledger must conform to these schemas.
"""

from spendwise.models.expense import (
    DEFAULT_CATEGORIES,
    UNCATEGORIZED,
    CategoryIcon,
    Expense,
    ExpenseCategory,
    LedgerPreferences,
    is_usable_amount,
    is_valid_date,
    parse_amount,
)
from spendwise.models.reports import (
    CsvProblem,
    CsvProblemKind,
    DailyPoint,
    DailyStats,
    DashboardSummary,
    DecodeResult,
    ImportFilterResult,
    ImportOutcome,
    ImportStatus,
    MergeResult,
    MergeStats,
    WeekBucket,
)
from spendwise.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "DEFAULT_CATEGORIES",
    "UNCATEGORIZED",
    "CategoryIcon",
    "Expense",
    "ExpenseCategory",
    "LedgerPreferences",
    "is_usable_amount",
    "is_valid_date",
    "parse_amount",
    # Result models
    "CsvProblem",
    "CsvProblemKind",
    "DailyPoint",
    "DailyStats",
    "DashboardSummary",
    "DecodeResult",
    "ImportFilterResult",
    "ImportOutcome",
    "ImportStatus",
    "MergeResult",
    "MergeStats",
    "WeekBucket",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
