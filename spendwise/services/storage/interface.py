"""
Abstract Storage Interface

DESIGN DECISION: The ledger core never touches persistence. Whoever
orchestrates it is handed an implementation of these interfaces.
This allows us to:
1. Keep the codec, merge and aggregation free of global state
2. Use in-memory storage for testing
3. Swap the JSON file store for something else later

The interface is small: the whole collection is loaded and saved at
once, the same way the browser key-value store of the web app did.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from spendwise.models.audit import AuditEvent
from spendwise.models.expense import Expense, LedgerPreferences


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for the expense collection.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self) -> list[Expense]:
        """
        Load the full expense collection.

        Returns:
            The stored expenses in display order (empty if nothing stored)

        Raises:
            StorageError: If the stored data cannot be read
        """
        pass

    @abstractmethod
    def save(self, expenses: list[Expense]) -> None:
        """
        Replace the stored collection.

        Args:
            expenses: The complete collection to persist

        Raises:
            StorageError: If save fails
        """
        pass


class PreferencesStorageInterface(ABC):
    """Abstract interface for the persisted application preferences."""

    @abstractmethod
    def load_preferences(self) -> LedgerPreferences:
        """Load preferences, falling back to defaults when none are stored."""
        pass

    @abstractmethod
    def save_preferences(self, preferences: LedgerPreferences) -> None:
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one CSV import).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored data exists but does not describe a valid collection."""
    pass
