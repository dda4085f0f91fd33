"""DTO types returned by the spending chart engine.

DTOs are plain data containers used to transport chart results to the UI.
They intentionally avoid any Django/ORM dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum


class Period(StrEnum):
    """Aggregation bucket width for spending series."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class TickResolution(StrEnum):
    """Granularity used to place and label x-axis ticks."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True, slots=True)
class DateRange:
    """An inclusive calendar date range.

    Attributes:
        start: Inclusive start date.
        end: Inclusive end date.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}.")

    @property
    def days(self) -> int:
        """Return the number of calendar days covered by the range."""

        return (self.end - self.start).days + 1


@dataclass(frozen=True, slots=True)
class PurchaseRecord:
    """A confirmed purchase as returned by the purchases backend.

    Attributes:
        purchase_date: Raw ISO date/datetime string, or None when unknown.
        total_amount: Purchase total in integer cents.
        id: Optional backend identifier.
        status: Optional backend status string.
        shop_id: Optional owning shop identifier.
    """

    purchase_date: str | None
    total_amount: int
    id: int | None = None
    status: str | None = None
    shop_id: int | None = None


@dataclass(frozen=True, slots=True)
class ChartDataPoint:
    """A single spending bucket.

    Attributes:
        date: Bucket start date (normalized to the period start).
        amount: Sum of purchase totals in the bucket, in cents.
    """

    date: date
    amount: int


@dataclass(frozen=True)
class TickPlan:
    """Axis tick layout aligned to ChartDataPoint indices.

    Attributes:
        indices: Sorted point indices that receive a gridline.
        labels: Mapping of point index -> display label.
        major_indices: Indices that carry a text label (subset of `indices`).
    """

    indices: tuple[int, ...] = ()
    labels: Mapping[int, str] = field(default_factory=dict)
    major_indices: frozenset[int] = frozenset()


@dataclass(frozen=True)
class SpendingChart:
    """A computed spending series plus its tick layout.

    Attributes:
        period: Aggregation period used for the buckets.
        date_range: Inclusive range the series spans.
        points: Zero-filled, chronologically ordered buckets.
        ticks: Tick layout positionally aligned with `points`.
        total: Sum of all bucket amounts, in cents.
    """

    period: Period
    date_range: DateRange
    points: tuple[ChartDataPoint, ...]
    ticks: TickPlan
    total: int


@dataclass(frozen=True, slots=True)
class PurchaseDateRange:
    """Earliest/latest purchase dates reported by the backend.

    Attributes:
        earliest_date: Date of the oldest purchase, if any.
        latest_date: Date of the newest purchase, if any.
        total_count: Number of purchases known to the backend.
    """

    earliest_date: date | None
    latest_date: date | None
    total_count: int = 0
