"""Axis label formatting for spending chart ticks."""

from __future__ import annotations

from datetime import date
from typing import Final

from .dto import TickResolution

MONTH_ABBREVIATIONS: Final[tuple[str, ...]] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def format_tick_label(value: date, resolution: TickResolution) -> str:
    """Render a tick date for the given resolution.

    Args:
        value: Tick date.
        resolution: Resolution the tick was placed at.

    Returns:
        "5 Mar" for day/week ticks, "Mar" for month ticks and "Mar 2025" for
        year ticks. Month names do not depend on the process locale.
    """

    month = MONTH_ABBREVIATIONS[value.month - 1]
    if resolution in (TickResolution.DAY, TickResolution.WEEK):
        return f"{value.day} {month}"
    if resolution is TickResolution.MONTH:
        return month
    return f"{month} {value.year:04d}"
