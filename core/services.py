"""Service-layer functions for the core app.

Services in `core` coordinate remote I/O (the purchases backend) with the pure
chart engine in `analysis`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Final

from analysis.dto import DateRange, Period, SpendingChart
from analysis.engine import build_spending_chart
from analysis.presets import RangePreset, resolve_preset
from core.purchases_api import (
    MAX_PAGE_SIZE,
    PurchasesApiError,
    PurchasesTransport,
    fetch_all_purchases,
    fetch_purchase_date_range,
)

logger = logging.getLogger(__name__)

CHART_LOAD_ERROR: Final[str] = "Unable to load purchase data for chart."


@dataclass(frozen=True, slots=True)
class ChartState:
    """The displayed chart result for one session.

    Attributes:
        request_id: Request that produced this state (0 before any request).
        chart: Computed chart, or None before the first load or after an error.
        error: User-facing error message, when the last load failed.
    """

    request_id: int = 0
    chart: SpendingChart | None = None
    error: str | None = None

    @property
    def total(self) -> int:
        """Sum of all buckets in cents (0 when no chart is loaded)."""

        return self.chart.total if self.chart is not None else 0


@dataclass
class ChartSession:
    """Owned chart context that discards superseded responses.

    Every load takes a ticket from `begin()`. Only the most recently issued
    ticket may replace `state`, so a slow response for an old range cannot
    overwrite the result for a newer one.
    """

    latest_request_id: int = 0
    state: ChartState = field(default_factory=ChartState)

    def begin(self) -> int:
        """Issue a new request id and return it."""

        self.latest_request_id += 1
        return self.latest_request_id

    def is_current(self, request_id: int) -> bool:
        """Return True when `request_id` is the latest issued request."""

        return request_id == self.latest_request_id

    def complete(self, request_id: int, chart: SpendingChart) -> bool:
        """Replace the state with a computed chart unless the request is stale.

        Returns:
            True when the state was replaced.
        """

        return self._replace(ChartState(request_id=request_id, chart=chart))

    def fail(self, request_id: int, message: str = CHART_LOAD_ERROR) -> bool:
        """Replace the state with an error unless the request is stale.

        Returns:
            True when the state was replaced.
        """

        return self._replace(ChartState(request_id=request_id, error=message))

    def _replace(self, state: ChartState) -> bool:
        if not self.is_current(state.request_id):
            logger.info(
                "Discarding stale chart response %d (latest is %d)",
                state.request_id,
                self.latest_request_id,
            )
            return False
        self.state = state
        return True


def load_spending_chart(
    session: ChartSession,
    *,
    client: PurchasesTransport,
    period: Period | str,
    date_range: DateRange,
    shop_id: int | None = None,
    page_size: int = MAX_PAGE_SIZE,
    tz: tzinfo | None = None,
) -> ChartState:
    """Fetch purchases for a range and publish the aggregated chart.

    Args:
        session: Chart session receiving the result.
        client: Purchases backend transport.
        period: Aggregation period.
        date_range: Inclusive range to chart.
        shop_id: Optional shop filter.
        page_size: Page size requested from the backend.
        tz: Optional timezone applied to timezone-aware purchase datetimes.

    Returns:
        The ChartState produced by this request. It is published to
        `session.state` only when no newer request was issued meanwhile.

    Notes:
        A backend failure discards everything fetched so far and yields an
        error state with no points. Nothing is retried.
    """

    request_id = session.begin()
    try:
        records = fetch_all_purchases(client, date_range=date_range, shop_id=shop_id, page_size=page_size)
    except PurchasesApiError:
        logger.exception("Failed to fetch chart purchases for %s..%s", date_range.start, date_range.end)
        session.fail(request_id, CHART_LOAD_ERROR)
        return ChartState(request_id=request_id, error=CHART_LOAD_ERROR)

    chart = build_spending_chart(records, period=period, date_range=date_range, tz=tz)
    session.complete(request_id, chart)
    return ChartState(request_id=request_id, chart=chart)


def resolve_range_preset(preset: RangePreset | str, *, today: date, client: PurchasesTransport) -> DateRange:
    """Resolve a preset, looking up the purchases' date span for "all time"."""

    return resolve_preset(preset, today=today, date_range_lookup=lambda: fetch_purchase_date_range(client))
