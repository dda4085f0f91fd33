"""Aggregation helpers for spending series.

This module provides deterministic, reusable aggregation functions used by the
chart engine without introducing Django dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from .dto import ChartDataPoint, DateRange, Period, PurchaseRecord
from .periods import period_bucket_starts, period_start


def parse_purchase_date(raw: object, *, tz: tzinfo | None = None) -> date | None:
    """Parse a purchase date value into a calendar date.

    Args:
        raw: ISO `YYYY-MM-DD` string, ISO datetime string, `date`, `datetime`,
            or None.
        tz: Optional timezone used to localize timezone-aware datetimes before
            taking their calendar date.

    Returns:
        The calendar date, or None when the value is missing or unparseable.
    """

    if raw is None:
        return None
    if isinstance(raw, datetime):
        parsed: datetime = raw
    elif isinstance(raw, date):
        return raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        if len(text) == 10:
            try:
                return date.fromisoformat(text)
            except ValueError:
                return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if tz is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.date()


def aggregate_purchases(
    records: Iterable[PurchaseRecord],
    *,
    date_range: DateRange,
    period: Period,
    tz: tzinfo | None = None,
) -> tuple[ChartDataPoint, ...]:
    """Sum purchase totals into zero-filled, period-aligned buckets.

    Args:
        records: Purchases to aggregate.
        date_range: Inclusive range the buckets must cover.
        period: Bucket width.
        tz: Optional timezone applied to timezone-aware purchase datetimes.

    Returns:
        One ChartDataPoint per period unit overlapping the range, in
        chronological order. Every bucket is present even when no purchase
        falls into it.

    Notes:
        Records without a usable date are skipped. Records dated outside the
        range are ignored, even when a weekly/monthly bucket reaches past the
        range boundary.
    """

    buckets: dict[date, int] = {start: 0 for start in period_bucket_starts(date_range, period)}
    for record in records:
        purchase_date = parse_purchase_date(record.purchase_date, tz=tz)
        if purchase_date is None:
            continue
        if purchase_date < date_range.start or purchase_date > date_range.end:
            continue
        key = period_start(purchase_date, period)
        if key in buckets:
            buckets[key] += record.total_amount

    return tuple(ChartDataPoint(date=start, amount=amount) for start, amount in buckets.items())


def total_amount(points: Iterable[ChartDataPoint]) -> int:
    """Return the sum of bucket amounts in cents."""

    return sum(point.amount for point in points)
