"""Tests for the spending chart filter form."""

from __future__ import annotations

from datetime import date

import pytest

from analysis.dto import DateRange, Period, PurchaseDateRange
from core.forms import MAX_CHART_POINTS, SpendingChartForm

pytestmark = pytest.mark.integration

TODAY = date(2025, 3, 5)


def test_form_defaults_to_current_week_daily() -> None:
    """Without filters the chart shows the current ISO week by day."""

    form = SpendingChartForm({}, today=TODAY)

    assert form.is_valid(), form.errors
    assert form.cleaned_data["date_range"] == DateRange(start=date(2025, 3, 3), end=date(2025, 3, 9))
    assert form.cleaned_data["period"] is Period.DAILY


def test_form_resolves_preset_and_keeps_explicit_period() -> None:
    """A preset chooses the range and an explicit period is kept."""

    form = SpendingChartForm({"preset": "year", "period": "monthly"}, today=TODAY)

    assert form.is_valid(), form.errors
    assert form.cleaned_data["date_range"] == DateRange(start=date(2025, 1, 1), end=date(2025, 12, 31))
    assert form.cleaned_data["period"] is Period.MONTHLY


def test_form_explicit_dates_win_over_preset() -> None:
    """Explicit dates override any preset."""

    form = SpendingChartForm(
        {"preset": "year", "start_date": "2025-02-01", "end_date": "2025-02-28"},
        today=TODAY,
    )

    assert form.is_valid(), form.errors
    assert form.cleaned_data["date_range"] == DateRange(start=date(2025, 2, 1), end=date(2025, 2, 28))
    assert form.cleaned_data["period"] is Period.DAILY


def test_form_all_preset_uses_lookup() -> None:
    """The all-time preset consults the date-range lookup."""

    def lookup() -> PurchaseDateRange:
        return PurchaseDateRange(earliest_date=date(2023, 6, 1), latest_date=date(2025, 2, 1), total_count=9)

    form = SpendingChartForm({"preset": "all"}, today=TODAY, date_range_lookup=lookup)

    assert form.is_valid(), form.errors
    assert form.cleaned_data["date_range"] == DateRange(start=date(2023, 6, 1), end=date(2025, 2, 1))
    assert form.cleaned_data["period"] is Period.WEEKLY


def test_form_all_preset_over_long_history_picks_monthly() -> None:
    """A multi-year history with a blank period falls back to monthly buckets."""

    def lookup() -> PurchaseDateRange:
        return PurchaseDateRange(earliest_date=date(2017, 1, 1), latest_date=date(2025, 6, 1), total_count=900)

    form = SpendingChartForm({"preset": "all"}, today=TODAY, date_range_lookup=lookup)

    assert form.is_valid(), form.errors
    assert form.cleaned_data["date_range"] == DateRange(start=date(2017, 1, 1), end=date(2025, 6, 1))
    assert form.cleaned_data["period"] is Period.MONTHLY


def test_form_requires_both_dates() -> None:
    """A single explicit date is rejected."""

    form = SpendingChartForm({"start_date": "2025-03-01"}, today=TODAY)

    assert not form.is_valid()
    assert "Provide both a start date and an end date." in form.non_field_errors()


def test_form_rejects_reversed_dates() -> None:
    """The end date must not precede the start date."""

    form = SpendingChartForm({"start_date": "2025-03-10", "end_date": "2025-03-01"}, today=TODAY)

    assert not form.is_valid()
    assert "end_date" in form.errors


def test_form_rejects_too_many_points() -> None:
    """Daily buckets over several years exceed the render guard."""

    form = SpendingChartForm(
        {"start_date": "2020-01-01", "end_date": "2025-12-31", "period": "daily"},
        today=TODAY,
    )

    assert not form.is_valid()
    assert str(MAX_CHART_POINTS) in form.errors["period"][0]


def test_form_rejects_unknown_period() -> None:
    """Unsupported period values fail choice validation."""

    form = SpendingChartForm({"period": "hourly"}, today=TODAY)

    assert not form.is_valid()
    assert "period" in form.errors
