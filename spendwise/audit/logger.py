"""
Audit Logger

DESIGN DECISION: Every change applied to the ledger is logged.
This provides:
1. Complete traceability of imports and edits
2. Debugging capability
3. A history the user can inspect

The audit logger:
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from spendwise.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from spendwise.models.reports import MergeStats
from spendwise.services.storage import AuditStorageInterface


def _configure_structlog(json_logs: bool = True) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog for local logging; stdlib handlers are left to the host
_configure_structlog()


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure stdlib logging and structlog from LoggingSettings.

    Called by create_ledger_service, never at import, so embedding
    hosts keep control of the root logger.
    """
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger().setLevel(level.upper())
    _configure_structlog(json_logs)


def get_logger(name: Optional[str] = None):
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is attached
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = get_logger("spendwise.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_expense_added(self, expense_id: str, amount) -> None:
        self.log(AuditEventBuilder.expense_added(expense_id, amount))

    def log_expense_updated(self, expense_id: str) -> None:
        self.log(AuditEventBuilder.expense_updated(expense_id))

    def log_expense_deleted(self, expense_id: str) -> None:
        self.log(AuditEventBuilder.expense_deleted(expense_id))

    def log_import_decoded(
        self,
        row_count: int,
        problem_count: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.import_decoded(row_count, problem_count, correlation_id))

    def log_import_applied(
        self,
        stats: MergeStats,
        problem_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a merge that was written to storage."""
        self.log(AuditEventBuilder.import_applied(
            added=stats.added,
            updated=stats.updated,
            problem_count=problem_count,
            correlation_id=correlation_id,
        ))

    def log_import_rejected(self, reason: str, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.import_rejected(reason, correlation_id))

    def log_import_needs_confirmation(
        self,
        problems: list[str],
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.import_needs_confirmation(problems, correlation_id))

    def log_export_generated(self, row_count: int) -> None:
        self.log(AuditEventBuilder.export_generated(row_count))

    def log_save_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.save_failed(error_message, correlation_id))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a CSV import).
    Pass it through all subsequent operations.
    """
    return uuid4()
