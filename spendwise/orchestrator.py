"""
Main Orchestrator for Spendwise

This module ties the ledger core to storage and auditing and defines
the end-to-end flows for:
1. CSV import (text → decode → caller decision → merge → save)
2. CSV export (collection → text)
3. Record edits (add / edit / delete)
4. Dashboard metrics

DESIGN DECISION: The orchestrator enforces the boundaries:
- The core functions stay pure; only this layer loads and saves
- A partially valid import is never applied without the caller's consent
- Every applied change is audited

The orchestrator never prompts. It reports NEEDS_CONFIRMATION and the
caller repeats the import with `accept_partial=True` if the user agrees.
"""

from datetime import date
from typing import Optional, Union
from uuid import UUID

from spendwise.audit import AuditLogger, configure_logging, create_correlation_id, get_logger
from spendwise.codec import decode_expenses, encode_expenses
from spendwise.config import get_settings
from spendwise.ledger import (
    ExpenseFilter,
    add_expense,
    delete_expense,
    edit_expense,
    filter_expenses,
    find_expense,
    merge_expenses,
)
from spendwise.models.expense import Expense, LedgerPreferences
from spendwise.models.reports import (
    DashboardSummary,
    ImportOutcome,
    ImportStatus,
)
from spendwise.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    JsonFileExpenseStorage,
    JsonFilePreferencesStorage,
    JsonLinesAuditStorage,
    PreferencesStorageInterface,
    StorageError,
)
from spendwise.stats import dashboard_summary


logger = get_logger(__name__)


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class DuplicateExpenseError(LedgerError):
    """An expense with the same id is already in the ledger."""
    pass


class ExpenseNotFoundError(LedgerError):
    """No expense with the given id is in the ledger."""
    pass


class LedgerService:
    """
    Orchestrates every flow that reads or writes the expense collection.

    Import flow:
    1. Decode → CSV text into expenses + problems
    2. Reject → file-level problem, nothing is applied
    3. Pause → row problems and the caller has not accepted them
    4. Merge → incoming records override existing ids
    5. Save → persist the merged collection
    """

    def __init__(
        self,
        expense_storage: ExpenseStorageInterface,
        preferences_storage: Optional[PreferencesStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._expense_storage = expense_storage
        self._preferences_storage = preferences_storage
        self._audit_logger = audit_logger

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_expenses(self, criteria: Optional[ExpenseFilter] = None) -> list[Expense]:
        """Stored expenses, or those matching `criteria` newest first."""
        expenses = self._expense_storage.load()
        if criteria is None:
            return expenses
        return filter_expenses(expenses, criteria)

    def preferences(self) -> LedgerPreferences:
        if self._preferences_storage:
            return self._preferences_storage.load_preferences()
        settings = get_settings().ledger
        return LedgerPreferences(
            daily_limit=settings.daily_limit,
            currency=settings.currency,
            language=settings.language,
        )

    def update_preferences(self, preferences: LedgerPreferences) -> None:
        if self._preferences_storage is None:
            raise LedgerError("No preferences storage configured")
        self._preferences_storage.save_preferences(preferences)

    def dashboard(
        self,
        reference_date: Optional[Union[str, date]] = None,
    ) -> DashboardSummary:
        """Dashboard metrics against the stored daily limit."""
        reference_date = reference_date or date.today()
        return dashboard_summary(
            self._expense_storage.load(),
            reference_date,
            self.preferences().daily_limit,
        )

    # -------------------------------------------------------------------------
    # Record edits
    # -------------------------------------------------------------------------

    def add_expense(self, expense: Expense) -> list[Expense]:
        """
        Add a new expense at the top of the collection.

        Raises:
            DuplicateExpenseError: If the id is already used
        """
        expenses = self._expense_storage.load()
        if find_expense(expenses, expense.id) is not None:
            raise DuplicateExpenseError(f"Expense {expense.id!r} already exists")

        updated = add_expense(expenses, expense)
        self._save(updated)
        if self._audit_logger:
            self._audit_logger.log_expense_added(expense.id, expense.amount)
        return updated

    def edit_expense(self, expense: Expense) -> list[Expense]:
        """
        Replace the stored expense holding the same id.

        Raises:
            ExpenseNotFoundError: If no expense has that id
        """
        expenses = self._expense_storage.load()
        if find_expense(expenses, expense.id) is None:
            raise ExpenseNotFoundError(f"Expense {expense.id!r} not found")

        updated = edit_expense(expenses, expense)
        self._save(updated)
        if self._audit_logger:
            self._audit_logger.log_expense_updated(expense.id)
        return updated

    def delete_expense(self, expense_id: str) -> bool:
        """Delete an expense. Returns False if the id was not stored."""
        expenses = self._expense_storage.load()
        updated = delete_expense(expenses, expense_id)
        if len(updated) == len(expenses):
            return False

        self._save(updated)
        if self._audit_logger:
            self._audit_logger.log_expense_deleted(expense_id)
        return True

    # -------------------------------------------------------------------------
    # CSV import / export
    # -------------------------------------------------------------------------

    def import_csv(
        self,
        text: str,
        accept_partial: bool = False,
        correlation_id: Optional[UUID] = None,
    ) -> ImportOutcome:
        """
        Import CSV text into the ledger.

        Args:
            text: Raw CSV file contents
            accept_partial: Apply the valid rows even if some rows had problems.
                           The caller sets this only after the user agreed.

        Returns:
            ImportOutcome with the decode result and, when applied, merge stats
        """
        correlation_id = correlation_id or create_correlation_id()
        decoded = decode_expenses(text)

        if self._audit_logger:
            self._audit_logger.log_import_decoded(
                row_count=len(decoded.expenses),
                problem_count=len(decoded.problems),
                correlation_id=correlation_id,
            )

        file_problem = decoded.file_problem
        if file_problem is not None:
            if self._audit_logger:
                self._audit_logger.log_import_rejected(str(file_problem), correlation_id)
            return ImportOutcome(status=ImportStatus.REJECTED_FILE, decoded=decoded)

        if decoded.has_problems and not accept_partial:
            if self._audit_logger:
                self._audit_logger.log_import_needs_confirmation(
                    decoded.messages(),
                    correlation_id,
                )
            return ImportOutcome(status=ImportStatus.NEEDS_CONFIRMATION, decoded=decoded)

        result = merge_expenses(self._expense_storage.load(), decoded.expenses)
        self._save(result.merged, correlation_id)

        if self._audit_logger:
            self._audit_logger.log_import_applied(
                result.stats,
                problem_count=len(decoded.problems),
                correlation_id=correlation_id,
            )
        logger.info(
            "import_applied",
            added=result.stats.added,
            updated=result.stats.updated,
            problems=len(decoded.problems),
        )

        return ImportOutcome(
            status=ImportStatus.APPLIED,
            decoded=decoded,
            stats=result.stats,
        )

    def export_csv(self) -> str:
        expenses = self._expense_storage.load()
        text = encode_expenses(expenses)
        if self._audit_logger:
            self._audit_logger.log_export_generated(len(expenses))
        return text

    def _save(
        self,
        expenses: list[Expense],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        try:
            self._expense_storage.save(expenses)
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(str(e), correlation_id)
            raise


def create_ledger_service(use_storage: bool = True) -> LedgerService:
    """
    Factory function to create a configured LedgerService.

    Args:
        use_storage: Whether to persist to the JSON files from StorageSettings.
                    Set to False for an in-memory ledger (e.g. testing).
    """
    settings = get_settings()
    configure_logging(settings.logging.level, settings.logging.json_output)

    if not use_storage:
        return LedgerService(
            expense_storage=InMemoryExpenseStorage(),
            audit_logger=AuditLogger(),  # Local-only logging
        )

    storage_settings = settings.storage
    return LedgerService(
        expense_storage=JsonFileExpenseStorage(storage_settings.data_path),
        preferences_storage=JsonFilePreferencesStorage(storage_settings.preferences_path),
        audit_logger=AuditLogger(JsonLinesAuditStorage(storage_settings.audit_path)),
    )
