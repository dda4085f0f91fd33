"""Orchestration entry point for the spending chart engine.

The engine is a pure, non-Django module that accepts in-memory purchase
records and returns DTOs. It must not import Django or perform network I/O.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import tzinfo

from .aggregations import aggregate_purchases, total_amount
from .dto import DateRange, Period, PurchaseRecord, SpendingChart
from .periods import parse_period
from .ticks import plan_ticks


def build_spending_chart(
    records: Iterable[PurchaseRecord],
    *,
    period: Period | str,
    date_range: DateRange,
    tz: tzinfo | None = None,
) -> SpendingChart:
    """Aggregate purchases and plan axis ticks for one chart.

    Args:
        records: Confirmed purchases inside `date_range`.
        period: Aggregation period (daily, weekly, monthly).
        date_range: Inclusive range the chart spans.
        tz: Optional timezone applied to timezone-aware purchase datetimes.

    Returns:
        SpendingChart whose tick indices refer to positions in `points`.
    """

    period = parse_period(period)
    points = aggregate_purchases(records, date_range=date_range, period=period, tz=tz)
    return SpendingChart(
        period=period,
        date_range=date_range,
        points=points,
        ticks=plan_ticks(date_range, points),
        total=total_amount(points),
    )
