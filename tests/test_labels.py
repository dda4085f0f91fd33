"""Unit tests for tick label formatting."""

from __future__ import annotations

from datetime import date

import pytest

from analysis.dto import TickResolution
from analysis.labels import format_tick_label

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("resolution", "expected"),
    [
        (TickResolution.DAY, "5 Mar"),
        (TickResolution.WEEK, "5 Mar"),
        (TickResolution.MONTH, "Mar"),
        (TickResolution.YEAR, "Mar 2025"),
    ],
)
def test_format_tick_label_per_resolution(resolution: TickResolution, expected: str) -> None:
    """Each resolution renders its documented format."""

    assert format_tick_label(date(2025, 3, 5), resolution) == expected


def test_format_tick_label_pads_year_to_four_digits() -> None:
    """Years always render with four digits."""

    assert format_tick_label(date(999, 12, 1), TickResolution.YEAR) == "Dec 0999"
