"""Expense collection and reconciliation package."""

from spendwise.ledger.collection import (
    ExpenseFilter,
    add_expense,
    delete_expense,
    edit_expense,
    filter_expenses,
    find_expense,
    merge_expenses,
)

__all__ = [
    "ExpenseFilter",
    "add_expense",
    "delete_expense",
    "edit_expense",
    "filter_expenses",
    "find_expense",
    "merge_expenses",
]
