"""
Result Models for the Ledger Core

Everything the codec, the reconciliation engine and the aggregation
engine hand back to callers is one of these values.

DESIGN DECISION: Import problems are data. Decoding never raises for
bad input; it returns a CsvProblem per issue so the caller can show
them and decide whether to keep the valid rows.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from spendwise.models.expense import Expense


# =============================================================================
# CSV IMPORT PROBLEMS
# =============================================================================

class CsvProblemKind(str, Enum):
    """
    Why part of a CSV document could not be imported.

    The first two are file-level and abort the whole decode.
    The rest are row-level and only drop the offending line.
    """
    EMPTY_OR_HEADERLESS_FILE = "empty_or_headerless_file"
    MISSING_REQUIRED_COLUMNS = "missing_required_columns"
    INSUFFICIENT_COLUMNS = "insufficient_columns"
    MISSING_ID = "missing_id"
    INVALID_DATE = "invalid_date"
    INVALID_AMOUNT = "invalid_amount"

    @property
    def is_file_level(self) -> bool:
        return self in (
            CsvProblemKind.EMPTY_OR_HEADERLESS_FILE,
            CsvProblemKind.MISSING_REQUIRED_COLUMNS,
        )


class CsvProblem(BaseModel):
    """A single problem found while decoding CSV text."""

    kind: CsvProblemKind
    line: Optional[int] = Field(
        default=None,
        ge=1,
        description="1-based line number (header is line 1); None for file-level problems",
    )
    message: str = Field(
        ...,
        description="Human-readable description of the problem",
    )

    @property
    def is_file_level(self) -> bool:
        return self.kind.is_file_level

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"Line {self.line}: {self.message}"


class DecodeResult(BaseModel):
    """
    Outcome of decoding a CSV document.

    Partial success is normal: `expenses` holds every row that validated
    even when `problems` is not empty.
    """

    expenses: list[Expense] = Field(default_factory=list)
    problems: list[CsvProblem] = Field(default_factory=list)

    @property
    def has_problems(self) -> bool:
        return bool(self.problems)

    @property
    def file_problem(self) -> Optional[CsvProblem]:
        """The file-level problem that aborted decoding, if any."""
        for problem in self.problems:
            if problem.is_file_level:
                return problem
        return None

    @property
    def row_problems(self) -> list[CsvProblem]:
        return [p for p in self.problems if not p.is_file_level]

    def messages(self) -> list[str]:
        return [str(p) for p in self.problems]


class ImportFilterResult(BaseModel):
    """Decoded rows whose ids are not already in the ledger."""

    new_expenses: list[Expense] = Field(default_factory=list)
    count: int = Field(default=0, ge=0)
    error_count: int = Field(default=0, ge=0)
    problems: list[CsvProblem] = Field(default_factory=list)


# =============================================================================
# RECONCILIATION
# =============================================================================

class MergeStats(BaseModel):
    """
    Counters reported by a merge.

    `skipped` mirrors the other import flows; merging itself never skips.
    """

    added: int = Field(default=0, ge=0)
    updated: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)


class MergeResult(BaseModel):
    merged: list[Expense] = Field(default_factory=list)
    stats: MergeStats = Field(default_factory=MergeStats)


# =============================================================================
# AGGREGATION
# =============================================================================

class DailyStats(BaseModel):
    """
    Spending for one day measured against the daily limit.

    `limit_percentage` is capped at 100 for display. The over/near flags
    are computed from the uncapped ratio.
    """

    today_spend: Decimal = Decimal("0")
    is_over_limit: bool = False
    is_near_limit: bool = False
    limit_percentage: float = Field(default=0.0, ge=0.0, le=100.0)


class WeekBucket(BaseModel):
    """Spending for one Monday-anchored week."""

    week_start: str = Field(..., description="Monday of the week (YYYY-MM-DD)")
    total: Decimal = Decimal("0")
    by_category: dict[str, Decimal] = Field(default_factory=dict)


class DailyPoint(BaseModel):
    date: str
    amount: Decimal = Decimal("0")


class DashboardSummary(BaseModel):
    """All dashboard metrics derived from one collection."""

    reference_date: str
    daily: DailyStats
    monthly_spend: Decimal
    total_spend: Decimal
    category_breakdown: dict[str, Decimal] = Field(default_factory=dict)
    weekly: list[WeekBucket] = Field(default_factory=list)
    daily_series: list[DailyPoint] = Field(default_factory=list)
    expense_count: int = Field(default=0, ge=0)


# =============================================================================
# IMPORT FLOW
# =============================================================================

class ImportStatus(str, Enum):
    """What happened to a CSV import."""
    APPLIED = "applied"                        # Merged and saved
    REJECTED_FILE = "rejected_file"            # File-level problem, nothing usable
    NEEDS_CONFIRMATION = "needs_confirmation"  # Row problems; caller must accept the valid subset


class ImportOutcome(BaseModel):
    status: ImportStatus
    decoded: DecodeResult
    stats: MergeStats = Field(default_factory=MergeStats)

    @property
    def applied(self) -> bool:
        return self.status == ImportStatus.APPLIED
