"""
Expense Collection Operations

Pure functions over expense collections. Every function takes a
collection and returns a new list; inputs are never mutated.

RECONCILIATION: `merge_expenses` combines the ledger with an imported
set by identity. An incoming record with a known id replaces the
existing one wholesale (no field-level merge, no timestamps). Within
the incoming set, the last occurrence of an id wins.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, Field

from spendwise.models.expense import Expense
from spendwise.models.reports import MergeResult, MergeStats


def merge_expenses(
    current: Iterable[Expense],
    incoming: Iterable[Expense],
) -> MergeResult:
    """
    Merge incoming expenses into the current collection.

    Current records keep their relative order; a replaced record stays
    in its original position. Incoming-only ids are appended in input
    order.
    """
    by_id: dict[str, Expense] = {}
    for expense in current:
        by_id[expense.id] = expense

    added = 0
    updated = 0
    for expense in incoming:
        if expense.id in by_id:
            updated += 1
        else:
            added += 1
        by_id[expense.id] = expense

    return MergeResult(
        merged=list(by_id.values()),
        stats=MergeStats(added=added, updated=updated, skipped=0),
    )


def add_expense(expenses: Iterable[Expense], expense: Expense) -> list[Expense]:
    """Return a new collection with `expense` first."""
    return [expense, *expenses]


def edit_expense(expenses: Iterable[Expense], expense: Expense) -> list[Expense]:
    """Replace the record holding the same id. Unknown ids change nothing."""
    return [expense if e.id == expense.id else e for e in expenses]


def delete_expense(expenses: Iterable[Expense], expense_id: str) -> list[Expense]:
    return [e for e in expenses if e.id != expense_id]


def find_expense(expenses: Iterable[Expense], expense_id: str) -> Optional[Expense]:
    for expense in expenses:
        if expense.id == expense_id:
            return expense
    return None


class ExpenseFilter(BaseModel):
    """
    Criteria for listing expenses.

    Empty values match everything. Dates are inclusive bounds compared
    as ISO strings.
    """

    search: str = ""
    category: str = ""
    start_date: str = ""
    end_date: str = ""

    def matches(self, expense: Expense) -> bool:
        needle = self.search.lower()
        if needle and not (
            needle in expense.description.lower()
            or any(needle in tag.lower() for tag in expense.tags)
        ):
            return False
        if self.category and expense.category != self.category:
            return False
        if self.start_date and expense.date < self.start_date:
            return False
        if self.end_date and expense.date > self.end_date:
            return False
        return True


def filter_expenses(
    expenses: Iterable[Expense],
    criteria: Optional[ExpenseFilter] = None,
) -> list[Expense]:
    """Matching expenses, newest date first (ties keep collection order)."""
    criteria = criteria or ExpenseFilter()
    matching = [e for e in expenses if criteria.matches(e)]
    return sorted(matching, key=lambda e: e.date, reverse=True)
