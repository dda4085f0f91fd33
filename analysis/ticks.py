"""Axis tick planning for spending charts.

Tick placement is driven by the length of the selected date range, not by the
aggregation period: the period controls how money is summed, while the tick
resolution controls how the axis stays legible. A one-year daily series still
gets month ticks instead of 365 labels.

The breakpoints below are empirically tuned for chart legibility and are
load-bearing; change them only together with the dashboard layout.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta
from typing import Final

from .dto import ChartDataPoint, DateRange, Period, TickPlan, TickResolution
from .labels import format_tick_label
from .periods import iter_period_starts, month_end

DAY_RESOLUTION_MAX_DAYS: Final[int] = 8
WEEK_RESOLUTION_MAX_DAYS: Final[int] = 40
MONTH_RESOLUTION_MAX_DAYS: Final[int] = 400

FULL_MONTH_LABEL_EVERY_DAYS: Final[int] = 5

SPARSE_MAX_MAJOR_TICKS: Final[int] = 2
SPARSE_MIN_TICKS: Final[int] = 3
SPARSE_MAX_TICKS: Final[int] = 7
SPARSE_POINTS_PER_TICK: Final[int] = 10


def select_tick_resolution(days_in_range: int) -> TickResolution:
    """Choose a tick resolution from the number of days in a range.

    Args:
        days_in_range: Inclusive day count (`end - start + 1`).

    Returns:
        DAY up to 8 days, WEEK up to 40, MONTH up to 400, otherwise YEAR.
    """

    if days_in_range <= DAY_RESOLUTION_MAX_DAYS:
        return TickResolution.DAY
    if days_in_range <= WEEK_RESOLUTION_MAX_DAYS:
        return TickResolution.WEEK
    if days_in_range <= MONTH_RESOLUTION_MAX_DAYS:
        return TickResolution.MONTH
    return TickResolution.YEAR


def candidate_tick_dates(date_range: DateRange, resolution: TickResolution) -> tuple[date, ...]:
    """Generate candidate tick dates spanning a range at a resolution.

    Args:
        date_range: Inclusive date range.
        resolution: Tick resolution.

    Returns:
        Chronological candidate dates. Week candidates step 7 days from the
        range start and always end on `date_range.end`. Month and year
        candidates are period starts and may precede the range start.
    """

    if resolution is TickResolution.DAY:
        return tuple(iter_period_starts(date_range, Period.DAILY))

    if resolution is TickResolution.WEEK:
        candidates: list[date] = []
        current = date_range.start
        while current <= date_range.end:
            candidates.append(current)
            current += timedelta(days=7)
        if candidates[-1] != date_range.end:
            candidates.append(date_range.end)
        return tuple(candidates)

    if resolution is TickResolution.MONTH:
        return tuple(iter_period_starts(date_range, Period.MONTHLY))

    return tuple(date(year, 1, 1) for year in range(date_range.start.year, date_range.end.year + 1))


def is_full_calendar_month(date_range: DateRange) -> bool:
    """Return True when the range is exactly the first through last day of one month."""

    return date_range.start.day == 1 and date_range.end == month_end(date_range.start)


def plan_ticks(date_range: DateRange, points: Sequence[ChartDataPoint]) -> TickPlan:
    """Compute gridline and label positions for a spending series.

    Args:
        date_range: Inclusive range the series spans.
        points: Aggregated buckets; tick indices refer to positions in this sequence.

    Returns:
        TickPlan whose indices are all within `[0, len(points) - 1]`.

    Notes:
        - Candidate dates without a matching bucket are dropped.
        - An exact calendar month keeps one gridline per point and labels the
          first point, days divisible by 5, and the last point.
        - When at most two labels survive for more than two points, evenly
          spaced synthetic labels replace them.
    """

    if not points:
        return TickPlan()

    resolution = select_tick_resolution(date_range.days)
    last_index = len(points) - 1
    gridlines: set[int] = set()
    labels: dict[int, str] = {}

    if is_full_calendar_month(date_range):
        gridlines = set(range(len(points)))
        for idx, point in enumerate(points):
            if idx in (0, last_index) or point.date.day % FULL_MONTH_LABEL_EVERY_DAYS == 0:
                labels[idx] = format_tick_label(point.date, resolution)
    else:
        index_by_date = {point.date: idx for idx, point in enumerate(points)}
        for candidate in candidate_tick_dates(date_range, resolution):
            idx = index_by_date.get(candidate)
            if idx is None or idx in labels:
                continue
            labels[idx] = format_tick_label(candidate, resolution)

    if len(labels) <= SPARSE_MAX_MAJOR_TICKS and len(points) > SPARSE_MAX_MAJOR_TICKS:
        labels = _evenly_spaced_labels(points, resolution)

    major_indices = frozenset(labels)
    return TickPlan(
        indices=tuple(sorted(major_indices | gridlines)),
        labels=dict(sorted(labels.items())),
        major_indices=major_indices,
    )


def sparse_tick_count(point_count: int) -> int:
    """Return the synthetic tick count: `clamp(round(n / 10) + 2, 3, 7)`."""

    count = _round_half_up(point_count, SPARSE_POINTS_PER_TICK) + 2
    return max(SPARSE_MIN_TICKS, min(SPARSE_MAX_TICKS, count))


def _evenly_spaced_labels(points: Sequence[ChartDataPoint], resolution: TickResolution) -> dict[int, str]:
    """Label evenly spaced indices across the full series.

    Week-resolution labels are rendered at day granularity, since a synthetic
    point is a single bucket rather than a week boundary.
    """

    label_resolution = TickResolution.DAY if resolution is TickResolution.WEEK else resolution
    last_index = len(points) - 1
    count = sparse_tick_count(len(points))

    labels: dict[int, str] = {}
    for step in range(count):
        idx = _round_half_up(step * last_index, count - 1)
        if idx not in labels:
            labels[idx] = format_tick_label(points[idx].date, label_resolution)
    return labels


def _round_half_up(numerator: int, denominator: int) -> int:
    """Round a non-negative integer ratio to the nearest int, ties rounding up."""

    return (2 * numerator + denominator) // (2 * denominator)
