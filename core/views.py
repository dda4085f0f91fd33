"""JSON views backing the spending dashboard chart."""

from __future__ import annotations

from typing import Any

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

from analysis.dto import DateRange, SpendingChart
from analysis.periods import available_periods
from analysis.presets import RangePreset
from core import purchases_api
from core.charting.render import render_spending_chart
from core.forms import SpendingChartForm
from core.services import ChartSession, load_spending_chart, resolve_range_preset


@login_required
@require_GET
def spending_chart(request: HttpRequest) -> JsonResponse:
    """Return the aggregated spending series and tick layout for the filters.

    Query parameters are validated by SpendingChartForm. Each HTTP request
    loads into its own ChartSession, so stale responses cannot be discarded
    server-side. Ordering is enforced by the browser instead: the optional
    `request_id` is echoed back as `requestId` on success and failure, and
    the client ignores any response that does not carry its latest id.
    """

    client = purchases_api.client_from_settings()
    form = SpendingChartForm(
        request.GET,
        today=timezone.localdate(),
        date_range_lookup=lambda: purchases_api.fetch_purchase_date_range(client),
    )
    if not form.is_valid():
        return JsonResponse({"errors": form.errors.get_json_data()}, status=400)

    date_range: DateRange = form.cleaned_data["date_range"]
    period = form.cleaned_data["period"]
    state = load_spending_chart(
        ChartSession(),
        client=client,
        period=period,
        date_range=date_range,
        shop_id=form.cleaned_data.get("shop_id"),
        page_size=settings.PURCHASES_API_PAGE_SIZE,
        tz=timezone.get_current_timezone(),
    )

    payload: dict[str, Any] = {
        "requestId": form.cleaned_data.get("request_id"),
        "period": str(period),
        "availablePeriods": [str(p) for p in available_periods(date_range)],
        "range": _range_json(date_range),
        "points": [],
        "total": state.total,
        "ticks": None,
        "chart": None,
        "error": state.error,
    }
    if state.chart is None:
        return JsonResponse(payload, status=502)

    payload.update(_chart_json(state.chart))
    return JsonResponse(payload)


@login_required
@require_GET
def range_presets(request: HttpRequest) -> JsonResponse:
    """Return every range preset with its resolved dates for today."""

    client = purchases_api.client_from_settings()
    today = timezone.localdate()
    presets = []
    for preset in RangePreset:
        date_range = resolve_range_preset(preset, today=today, client=client)
        presets.append({"value": preset.value, "label": preset.label, "range": _range_json(date_range)})
    return JsonResponse({"presets": presets})


def _range_json(date_range: DateRange) -> dict[str, str]:
    return {"start": date_range.start.isoformat(), "end": date_range.end.isoformat()}


def _chart_json(chart: SpendingChart) -> dict[str, Any]:
    """Serialize the positional parts of a chart."""

    rendered = render_spending_chart(chart)
    return {
        "points": [{"date": point.date.isoformat(), "amount": point.amount} for point in chart.points],
        "total": chart.total,
        "ticks": rendered["ticks"],
        "chart": rendered,
    }
