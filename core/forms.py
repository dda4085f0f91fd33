"""Forms for the spending dashboard.

The chart filter form turns query parameters (period, preset, explicit dates)
into a validated `DateRange` and `Period` for the chart engine.
"""

from __future__ import annotations

from datetime import date

from django import forms

from analysis.dto import DateRange, Period
from analysis.periods import coerce_period, period_bucket_starts
from analysis.presets import DateRangeLookup, RangePreset, resolve_preset

MAX_CHART_POINTS = 400


class SpendingChartForm(forms.Form):
    """Validate spending chart filters."""

    period = forms.ChoiceField(
        required=False,
        choices=[("", "Automatic")] + [(period.value, period.value.title()) for period in Period],
        label="Period",
        help_text="Bucket width for summing purchases.",
    )
    preset = forms.ChoiceField(
        required=False,
        choices=[("", "Custom")] + [(preset.value, preset.label) for preset in RangePreset],
        label="Range",
    )
    start_date = forms.DateField(
        required=False,
        widget=forms.DateInput(attrs={"type": "date"}),
        label="Start date",
    )
    end_date = forms.DateField(
        required=False,
        widget=forms.DateInput(attrs={"type": "date"}),
        label="End date",
    )
    shop_id = forms.IntegerField(required=False, min_value=1, label="Shop")
    request_id = forms.IntegerField(
        required=False,
        min_value=0,
        label="Request id",
        help_text="Echoed back so clients can drop responses for superseded requests.",
    )

    def __init__(
        self,
        *args,
        today: date | None = None,
        date_range_lookup: DateRangeLookup | None = None,
        **kwargs,
    ) -> None:
        """Initialize the form.

        Args:
            today: Reference date for presets (defaults to `date.today()`).
            date_range_lookup: Callable used by the "all" preset to find the
                purchases' earliest/latest dates.
        """

        super().__init__(*args, **kwargs)
        self._today = today or date.today()
        self._date_range_lookup = date_range_lookup

    def clean(self) -> dict[str, object]:
        """Resolve the chart range and period.

        Explicit dates win over a preset. Without either, the current ISO week
        is used. A blank period picks the first period available for the range
        length that stays within `MAX_CHART_POINTS` buckets.
        """

        cleaned = super().clean()
        start_date: date | None = cleaned.get("start_date")
        end_date: date | None = cleaned.get("end_date")

        if start_date or end_date:
            if start_date is None or end_date is None:
                raise forms.ValidationError("Provide both a start date and an end date.")
            if start_date > end_date:
                self.add_error("end_date", "End date must be on or after the start date.")
                return cleaned
            date_range = DateRange(start=start_date, end=end_date)
        else:
            preset = cleaned.get("preset") or RangePreset.WEEK
            date_range = resolve_preset(preset, today=self._today, date_range_lookup=self._date_range_lookup)

        raw_period = cleaned.get("period")
        if raw_period:
            period = Period(raw_period)
        else:
            period = coerce_period(None, date_range, max_buckets=MAX_CHART_POINTS)
        if len(period_bucket_starts(date_range, period)) > MAX_CHART_POINTS:
            self.add_error(
                "period",
                f"Too many data points to render safely (>{MAX_CHART_POINTS}). Choose a wider period or a shorter range.",
            )
            return cleaned

        cleaned["date_range"] = date_range
        cleaned["period"] = period
        return cleaned
