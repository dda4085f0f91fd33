"""Golden tests for the spending chart engine entry point."""

from __future__ import annotations

from datetime import date

import pytest

from analysis import build_spending_chart
from analysis.dto import DateRange, Period, PurchaseRecord

pytestmark = pytest.mark.unit


def test_build_spending_chart_for_full_month() -> None:
    """A March chart aggregates daily and carries the full-month tick layout."""

    records = [
        PurchaseRecord(purchase_date="2025-03-01", total_amount=1299),
        PurchaseRecord(purchase_date="2025-03-15T12:30:00", total_amount=801),
        PurchaseRecord(purchase_date="2025-03-31", total_amount=100),
        PurchaseRecord(purchase_date=None, total_amount=5000),
    ]
    chart = build_spending_chart(
        records,
        period="daily",
        date_range=DateRange(start=date(2025, 3, 1), end=date(2025, 3, 31)),
    )

    assert chart.period is Period.DAILY
    assert len(chart.points) == 31
    assert chart.total == 2200
    assert chart.points[14].amount == 801
    assert len(chart.ticks.indices) == 31
    assert sorted(chart.ticks.major_indices) == [0, 4, 9, 14, 19, 24, 29, 30]


def test_build_spending_chart_without_purchases_is_zero_filled() -> None:
    """An empty range still yields a complete series with zero total."""

    chart = build_spending_chart(
        [],
        period=Period.WEEKLY,
        date_range=DateRange(start=date(2025, 1, 1), end=date(2025, 3, 31)),
    )

    assert len(chart.points) == 14
    assert chart.total == 0
    assert all(point.amount == 0 for point in chart.points)
    assert chart.ticks.major_indices


def test_build_spending_chart_rejects_unknown_period() -> None:
    """Unknown periods raise ValueError."""

    with pytest.raises(ValueError):
        build_spending_chart([], period="hourly", date_range=DateRange(start=date(2025, 1, 1), end=date(2025, 1, 2)))
