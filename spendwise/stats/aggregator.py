"""
Aggregation Engine

DESIGN DECISION: Aggregation is DETERMINISTIC and side-effect free.
Every metric is a single pass (or a small fixed number of passes) over
the collection with a grouping key derived from the expense date and a
running Decimal sum.

Dates are compared as ISO strings. Window keys (days, weeks) are built
from the reference date, and expenses are matched against them by
string lookup, so an expense date is never parsed or mutated while it
is being bucketed.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Union

from spendwise.models.expense import Expense
from spendwise.models.reports import (
    DailyPoint,
    DailyStats,
    DashboardSummary,
    WeekBucket,
)


NEAR_LIMIT_PERCENT = Decimal("80")
MAX_PERCENT = Decimal("100")
WEEKLY_WINDOW = 8
DAILY_WINDOW = 30

DateLike = Union[str, date]
Number = Union[Decimal, int, float, str]

_ZERO = Decimal("0")


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _as_iso(value: DateLike) -> str:
    if isinstance(value, date):
        return _as_date(value).isoformat()
    return value


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# =============================================================================
# DAILY LIMIT
# =============================================================================

def daily_stats(
    expenses: Iterable[Expense],
    reference_date: DateLike,
    limit: Number,
) -> DailyStats:
    """
    Measure the reference day's spending against the daily limit.

    The flags use the uncapped percentage; `limit_percentage` is capped
    at 100 for display. A limit of 0 (or less) with any spending is over
    the limit and reports 100%.
    """
    day = _as_iso(reference_date)
    limit = _as_decimal(limit)
    spend = sum((e.amount for e in expenses if e.date == day), _ZERO)

    if limit > 0:
        percentage = spend / limit * 100
    elif spend > 0:
        percentage = MAX_PERCENT
    else:
        percentage = _ZERO

    return DailyStats(
        today_spend=spend,
        is_over_limit=spend > limit,
        is_near_limit=spend <= limit and percentage >= NEAR_LIMIT_PERCENT,
        limit_percentage=float(min(percentage, MAX_PERCENT)),
    )


# =============================================================================
# TOTALS
# =============================================================================

def total_spend(expenses: Iterable[Expense]) -> Decimal:
    return sum((e.amount for e in expenses), _ZERO)


def monthly_total(expenses: Iterable[Expense], reference_date: DateLike) -> Decimal:
    """Sum of expenses in the reference date's calendar month."""
    month = _as_iso(reference_date)[:7]
    return sum((e.amount for e in expenses if e.date[:7] == month), _ZERO)


def category_breakdown(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    """Sum per category, in order of first appearance."""
    totals: dict[str, Decimal] = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, _ZERO) + e.amount
    return totals


# =============================================================================
# TIME SERIES
# =============================================================================

def week_start(value: DateLike) -> str:
    """
    Monday of the week containing `value`, as YYYY-MM-DD.

    Sunday belongs to the week that started six days earlier.
    """
    day = _as_date(value)
    return (day - timedelta(days=day.weekday())).isoformat()


def weekly_totals(
    expenses: Iterable[Expense],
    reference_date: DateLike,
    weeks: int = WEEKLY_WINDOW,
) -> list[WeekBucket]:
    """
    Spending per Monday-anchored week, oldest first.

    Covers `weeks` weeks ending with the week of the reference date.
    Weeks without expenses are present with a zero total.
    """
    if weeks <= 0:
        return []

    current_monday = _as_date(week_start(reference_date))
    first_monday = current_monday - timedelta(weeks=weeks - 1)

    week_of_day: dict[str, str] = {}
    buckets: dict[str, WeekBucket] = {}
    for offset in range(weeks * 7):
        day = first_monday + timedelta(days=offset)
        key = (day - timedelta(days=day.weekday())).isoformat()
        week_of_day[day.isoformat()] = key
        if key not in buckets:
            buckets[key] = WeekBucket(week_start=key)

    for e in expenses:
        key = week_of_day.get(e.date)
        if key is None:
            continue
        bucket = buckets[key]
        bucket.total += e.amount
        bucket.by_category[e.category] = bucket.by_category.get(e.category, _ZERO) + e.amount

    return list(buckets.values())


def daily_series(
    expenses: Iterable[Expense],
    reference_date: DateLike,
    days: int = DAILY_WINDOW,
) -> list[DailyPoint]:
    """One zero-filled point per day for the `days` days ending on the reference date."""
    end = _as_date(reference_date)
    totals: dict[str, Decimal] = {}
    for offset in range(days - 1, -1, -1):
        totals[(end - timedelta(days=offset)).isoformat()] = _ZERO

    for e in expenses:
        if e.date in totals:
            totals[e.date] += e.amount

    return [DailyPoint(date=day, amount=amount) for day, amount in totals.items()]


def dashboard_summary(
    expenses: Iterable[Expense],
    reference_date: DateLike,
    limit: Number,
) -> DashboardSummary:
    """Every dashboard metric for one collection and reference date."""
    expenses = list(expenses)
    day = _as_iso(reference_date)

    return DashboardSummary(
        reference_date=day,
        daily=daily_stats(expenses, day, limit),
        monthly_spend=monthly_total(expenses, day),
        total_spend=total_spend(expenses),
        category_breakdown=category_breakdown(expenses),
        weekly=weekly_totals(expenses, day),
        daily_series=daily_series(expenses, day),
        expense_count=len(expenses),
    )
