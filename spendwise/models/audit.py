"""
Audit Models for Spendwise

Every change applied to the ledger is logged for audit purposes.
This provides:
1. Traceability of imports and edits
2. Debugging information when an import goes wrong
3. Ability to reconstruct how the collection got to its current state

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record lifecycle
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # CSV import / export
    IMPORT_DECODED = "import_decoded"
    IMPORT_APPLIED = "import_applied"
    IMPORT_REJECTED = "import_rejected"
    IMPORT_NEEDS_CONFIRMATION = "import_needs_confirmation"
    EXPORT_GENERATED = "export_generated"

    # Persistence
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every applied change creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which expense is this about?
    entity_id: Optional[str] = Field(
        default=None,
        description="Expense id this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one import)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added("abc-1", Decimal("12.50"))
        event = AuditEventBuilder.import_applied(stats, problem_count, correlation_id)
    """

    @staticmethod
    def expense_added(expense_id: str, amount: Any) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_id=expense_id,
            description=f"Expense added: {expense_id}",
            details={"amount": str(amount)},
        )

    @staticmethod
    def expense_updated(expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_id=expense_id,
            description=f"Expense updated: {expense_id}",
        )

    @staticmethod
    def expense_deleted(expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_id=expense_id,
            description=f"Expense deleted: {expense_id}",
        )

    @staticmethod
    def import_decoded(
        row_count: int,
        problem_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_DECODED,
            severity=AuditSeverity.WARNING if problem_count else AuditSeverity.INFO,
            correlation_id=correlation_id,
            description=f"Decoded {row_count} rows with {problem_count} problems",
            details={
                "row_count": row_count,
                "problem_count": problem_count,
            },
        )

    @staticmethod
    def import_applied(
        added: int,
        updated: int,
        problem_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_APPLIED,
            correlation_id=correlation_id,
            description=f"Import applied: {added} added, {updated} updated",
            details={
                "added": added,
                "updated": updated,
                "problems_accepted": problem_count,
            },
        )

    @staticmethod
    def import_rejected(
        reason: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Import rejected: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def import_needs_confirmation(
        problems: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_NEEDS_CONFIRMATION,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Import paused: {len(problems)} problems need confirmation",
            # First few only; a bad file can have thousands
            details={"problems": problems[:10]},
        )

    @staticmethod
    def export_generated(row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            description=f"Exported {row_count} expenses to CSV",
            details={"row_count": row_count},
        )

    @staticmethod
    def save_failed(error_message: str, correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Saving the expense collection failed",
            error_message=error_message,
        )
