"""Shared fixtures for the Spendwise test suite."""

from decimal import Decimal

import pytest

from spendwise.models.expense import Expense


@pytest.fixture
def sample_expenses() -> list[Expense]:
    """Three expenses across two days (80 spent on 2023-10-25)."""
    return [
        Expense(id="1", date="2023-10-25", amount=Decimal("50"), category="Food",
                description="Groceries", tags=["home"]),
        Expense(id="2", date="2023-10-25", amount=Decimal("30"), category="Transport",
                description="Gas", tags=[]),
        Expense(id="3", date="2023-10-24", amount=Decimal("100"), category="Housing",
                description="Rent", tags=["bill"]),
    ]


@pytest.fixture
def tricky_expenses() -> list[Expense]:
    """Expenses whose descriptions exercise the quoting rules."""
    return [
        Expense(id="a1", date="2024-01-05", amount=Decimal("12.50"), category="Food",
                description="Apples, Oranges", tags=["fruit", "market"]),
        Expense(id="a2", date="2024-01-06", amount=Decimal("3"), category="Food",
                description='The "good" coffee', tags=["coffee", "coffee"]),
        Expense(id="a3", date="2024-01-07", amount=Decimal("0"), category="Other",
                description='"', tags=[]),
        Expense(id="a4", date="2024-01-08", amount=Decimal("1999.99"), category="Shopping",
                description='Says "hi, there"', tags=["gift"]),
        Expense(id="a5", date="2024-01-09", amount=Decimal("7.25"), category="Transport",
                description="", tags=[]),
        Expense(id="a6", date="2024-01-10", amount=Decimal("4"), category="Food",
                description="  padded ", tags=["snack"]),
    ]
