"""Print the spending series and tick layout for a date range."""

from __future__ import annotations

import json
from datetime import date

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from analysis.dto import DateRange, Period
from analysis.periods import coerce_period, parse_period
from analysis.presets import RangePreset
from core import purchases_api
from core.charting.render import render_spending_chart
from core.services import ChartSession, load_spending_chart, resolve_range_preset


class Command(BaseCommand):
    """Fetch confirmed purchases and print the aggregated chart."""

    help = "Fetch purchases from the backend and print the spending chart series."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--period",
            choices=[period.value for period in Period],
            default=None,
            help="Aggregation period (defaults to the first period available for the range).",
        )
        parser.add_argument(
            "--preset",
            choices=[preset.value for preset in RangePreset],
            default=RangePreset.MONTH.value,
            help="Named range preset (ignored when --start/--end are given).",
        )
        parser.add_argument("--start", type=date.fromisoformat, default=None, help="Inclusive start date (YYYY-MM-DD).")
        parser.add_argument("--end", type=date.fromisoformat, default=None, help="Inclusive end date (YYYY-MM-DD).")
        parser.add_argument("--shop-id", type=int, default=None, help="Only include purchases from this shop.")
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the Chart.js payload as JSON instead of a table.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        start: date | None = options["start"]
        end: date | None = options["end"]
        if (start is None) != (end is None):
            raise CommandError("Use --start and --end together.")

        client = purchases_api.client_from_settings()
        if start is not None and end is not None:
            try:
                date_range = DateRange(start=start, end=end)
            except ValueError as exc:
                raise CommandError(str(exc)) from exc
        else:
            date_range = resolve_range_preset(options["preset"], today=timezone.localdate(), client=client)

        raw_period = options["period"]
        period = parse_period(raw_period) if raw_period else coerce_period(None, date_range)

        state = load_spending_chart(
            ChartSession(),
            client=client,
            period=period,
            date_range=date_range,
            shop_id=options["shop_id"],
            page_size=settings.PURCHASES_API_PAGE_SIZE,
            tz=timezone.get_current_timezone(),
        )
        if state.chart is None:
            raise CommandError(state.error or "Unable to load purchase data for chart.")

        chart = state.chart
        if options["json"]:
            self.stdout.write(json.dumps(render_spending_chart(chart), indent=2))
            return None

        self.stdout.write(f"{period} {date_range.start.isoformat()}..{date_range.end.isoformat()}")
        for idx, point in enumerate(chart.points):
            label = chart.ticks.labels.get(idx, "")
            self.stdout.write(f"{point.date.isoformat()}  {point.amount:>10}  {label}")
        self.stdout.write(f"total={chart.total}")
        return None
