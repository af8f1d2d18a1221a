"""Aggregation package."""

from spendwise.stats.aggregator import (
    category_breakdown,
    daily_series,
    daily_stats,
    dashboard_summary,
    monthly_total,
    total_spend,
    week_start,
    weekly_totals,
)

__all__ = [
    "category_breakdown",
    "daily_series",
    "daily_stats",
    "dashboard_summary",
    "monthly_total",
    "total_spend",
    "week_start",
    "weekly_totals",
]
