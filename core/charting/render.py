"""Chart.js payloads for the spending dashboard."""

from __future__ import annotations

from typing import TypedDict

from analysis.dto import SpendingChart, TickPlan

SPENDING_COLOR = "#3366CC"


class ChartDataset(TypedDict, total=False):
    """A Chart.js dataset payload for the dashboard."""

    label: str
    unit: str
    period: str
    data: list[int]
    borderColor: str
    backgroundColor: str
    borderWidth: int


class ChartTicks(TypedDict):
    """Axis tick layout aligned to dataset positions."""

    indices: list[int]
    majorIndices: list[int]
    labels: dict[str, str]


class ChartData(TypedDict):
    """The full Chart.js payload (labels + datasets + ticks) for the spending panel."""

    labels: list[str]
    dates: list[str]
    datasets: list[ChartDataset]
    ticks: ChartTicks


def render_spending_chart(chart: SpendingChart) -> ChartData:
    """Render a SpendingChart into a Chart.js-friendly payload.

    Args:
        chart: Computed spending chart.

    Returns:
        ChartData where `labels[i]`, `dates[i]` and `datasets[0]["data"][i]`
        all refer to bucket `i`. Buckets without a major tick get an empty label.
    """

    labels = [chart.ticks.labels.get(idx, "") for idx in range(len(chart.points))]
    dataset: ChartDataset = {
        "label": "Spending",
        "unit": "cents",
        "period": str(chart.period),
        "data": [point.amount for point in chart.points],
        "borderColor": SPENDING_COLOR,
        "backgroundColor": SPENDING_COLOR,
        "borderWidth": 2,
    }
    return {
        "labels": labels,
        "dates": [point.date.isoformat() for point in chart.points],
        "datasets": [dataset],
        "ticks": render_ticks(chart.ticks),
    }


def render_ticks(ticks: TickPlan) -> ChartTicks:
    """Serialize a TickPlan with JSON-safe keys."""

    return {
        "indices": list(ticks.indices),
        "majorIndices": sorted(ticks.major_indices),
        "labels": {str(idx): label for idx, label in sorted(ticks.labels.items())},
    }
