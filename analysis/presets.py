"""Named date-range presets for the spending dashboard.

Presets translate a short name ("week", "month", "all", ...) into a concrete
inclusive DateRange using calendar arithmetic (ISO weeks start on Monday).
Only the "all" preset needs purchase data; callers pass a lookup callable so
this module stays free of I/O.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, timedelta
from enum import StrEnum

from .dto import DateRange, PurchaseDateRange
from .periods import month_end


class RangePreset(StrEnum):
    """Supported dashboard range presets."""

    WEEK = "week"
    LAST_WEEK = "last_week"
    MONTH = "month"
    LAST_MONTH = "last_month"
    YEAR = "year"
    ALL = "all"

    @property
    def label(self) -> str:
        """Human-friendly label for selectors."""

        return _PRESET_LABELS[self]


_PRESET_LABELS: dict[RangePreset, str] = {
    RangePreset.WEEK: "Week",
    RangePreset.LAST_WEEK: "Last week",
    RangePreset.MONTH: "Month",
    RangePreset.LAST_MONTH: "Last month",
    RangePreset.YEAR: "Year",
    RangePreset.ALL: "All time",
}

DateRangeLookup = Callable[[], PurchaseDateRange | None]


def parse_preset(raw: str | RangePreset) -> RangePreset:
    """Parse a preset name into a RangePreset.

    Raises:
        ValueError: When `raw` is not a known preset.
    """

    try:
        return RangePreset(str(raw).strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unknown range preset: {raw!r}.") from exc


def iso_week_range(target: date) -> DateRange:
    """Return the Monday-Sunday week containing `target`."""

    start = target - timedelta(days=target.weekday())
    return DateRange(start=start, end=start + timedelta(days=6))


def calendar_month_range(target: date) -> DateRange:
    """Return the calendar month containing `target`."""

    return DateRange(start=target.replace(day=1), end=month_end(target))


def calendar_year_range(target: date) -> DateRange:
    """Return the calendar year containing `target`."""

    return DateRange(start=date(target.year, 1, 1), end=date(target.year, 12, 31))


def resolve_preset(
    preset: RangePreset | str,
    *,
    today: date,
    date_range_lookup: DateRangeLookup | None = None,
) -> DateRange:
    """Resolve a named preset into a concrete inclusive range.

    Args:
        preset: Preset (or preset name) to resolve.
        today: Reference date; presets are computed relative to it.
        date_range_lookup: Callable returning the purchases' earliest/latest
            dates. Only used by the "all" preset.

    Returns:
        DateRange for the preset. The "all" preset falls back to the current
        calendar year when no lookup is available, the lookup returns None, or
        no earliest purchase date is known.
    """

    preset = parse_preset(preset)
    if preset is RangePreset.WEEK:
        return iso_week_range(today)
    if preset is RangePreset.LAST_WEEK:
        return iso_week_range(today - timedelta(days=7))
    if preset is RangePreset.MONTH:
        return calendar_month_range(today)
    if preset is RangePreset.LAST_MONTH:
        return calendar_month_range(today.replace(day=1) - timedelta(days=1))
    if preset is RangePreset.YEAR:
        return calendar_year_range(today)
    return _all_time_range(today=today, date_range_lookup=date_range_lookup)


def _all_time_range(*, today: date, date_range_lookup: DateRangeLookup | None) -> DateRange:
    """Span every known purchase, defaulting to the current calendar year."""

    found = date_range_lookup() if date_range_lookup is not None else None
    if found is None or found.earliest_date is None:
        return calendar_year_range(today)

    latest = found.latest_date or today
    return DateRange(start=min(found.earliest_date, latest), end=max(found.earliest_date, latest))
