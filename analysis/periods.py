"""Calendar helpers for period-aligned spending buckets.

This module provides pure helpers (no Django imports) to normalize dates to
the start of their day/ISO week/month and to enumerate the bucket starts that
overlap an inclusive date range.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, timedelta

from .dto import DateRange, Period

DAILY_ONLY_MAX_DAYS = 8
DAILY_WEEKLY_MAX_DAYS = 31


def parse_period(raw: str | Period) -> Period:
    """Parse a period string into a Period.

    Raises:
        ValueError: When `raw` is not a supported period.
    """

    try:
        return Period(str(raw).strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unsupported period: {raw!r}.") from exc


def period_start(value: date, period: Period) -> date:
    """Normalize a date to the first day of its containing period.

    Args:
        value: Date to normalize.
        period: Bucket width.

    Returns:
        The same day for daily, the Monday of the ISO week for weekly, or the
        first of the month for monthly.
    """

    if period is Period.DAILY:
        return value
    if period is Period.WEEKLY:
        return value - timedelta(days=value.weekday())
    return value.replace(day=1)


def next_period_start(value: date, period: Period) -> date:
    """Return the start of the period that follows the one starting at `value`."""

    if period is Period.DAILY:
        return value + timedelta(days=1)
    if period is Period.WEEKLY:
        return value + timedelta(days=7)
    if value.month == 12:
        return date(value.year + 1, 1, 1)
    return date(value.year, value.month + 1, 1)


def iter_period_starts(date_range: DateRange, period: Period) -> Iterator[date]:
    """Yield every bucket start overlapping the range, in chronological order."""

    current = period_start(date_range.start, period)
    while current <= date_range.end:
        yield current
        current = next_period_start(current, period)


def period_bucket_starts(date_range: DateRange, period: Period) -> tuple[date, ...]:
    """Return the bucket starts for a range as a tuple.

    Args:
        date_range: Inclusive date range.
        period: Bucket width.

    Returns:
        Bucket start dates for every period unit fully or partially inside the
        range. Weekly and monthly buckets may start before `date_range.start`.
    """

    return tuple(iter_period_starts(date_range, period))


def available_periods(date_range: DateRange) -> tuple[Period, ...]:
    """Return the aggregation periods that make sense for a range length.

    Short ranges only offer daily buckets; long ranges drop daily buckets so a
    multi-year chart does not default to hundreds of bars.
    """

    days = date_range.days
    if days <= DAILY_ONLY_MAX_DAYS:
        return (Period.DAILY,)
    if days <= DAILY_WEEKLY_MAX_DAYS:
        return (Period.DAILY, Period.WEEKLY)
    return (Period.WEEKLY, Period.MONTHLY)


def coerce_period(
    period: Period | None,
    date_range: DateRange,
    *,
    max_buckets: int | None = None,
) -> Period:
    """Keep `period` when it is available for the range, else pick one.

    Args:
        period: Requested period, or None for automatic selection.
        date_range: Range being charted.
        max_buckets: Optional bucket limit applied to automatic selection.

    Returns:
        `period` when available. Otherwise the first available period whose
        bucket count fits `max_buckets`, falling back to the coarsest one.
    """

    allowed = available_periods(date_range)
    if period in allowed:
        return period
    if max_buckets is None:
        return allowed[0]
    for candidate in allowed:
        if len(period_bucket_starts(date_range, candidate)) <= max_buckets:
            return candidate
    return allowed[-1]


def month_end(value: date) -> date:
    """Return the last day of the month containing `value`."""

    return next_period_start(value.replace(day=1), Period.MONTHLY) - timedelta(days=1)
