"""Read-only client for the remote purchases backend.

The spending chart only needs two endpoints:
- `GET /purchases` (paginated, filtered by date range and status),
- `GET /purchases/date-range` (earliest/latest purchase dates).

Responses are normalized to camelCase keys before use, so backends that emit
snake_case payloads are read the same way.
"""

from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable, Mapping
from typing import Any, Final, Protocol

from django.conf import settings

from analysis.aggregations import parse_purchase_date
from analysis.dto import DateRange, PurchaseDateRange, PurchaseRecord

logger = logging.getLogger(__name__)

PURCHASES_PATH: Final[str] = "/purchases"
PURCHASE_DATE_RANGE_PATH: Final[str] = "/purchases/date-range"
CONFIRMED_STATUS: Final[str] = "confirmed"
MAX_PAGE_SIZE: Final[int] = 100

_UPPER_RE = re.compile(r"[A-Z]")
_SNAKE_RE = re.compile(r"_([a-z])")


class PurchasesApiError(RuntimeError):
    """Raised when the purchases backend cannot be reached or returns bad data."""

    def __init__(self, message: str, *, path: str | None = None, status: int | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable failure description.
            path: Backend path that was requested, when known.
            status: HTTP status code, when the backend answered.
        """

        super().__init__(message)
        self.path = path
        self.status = status


class PurchasesTransport(Protocol):
    """Anything that can GET a backend path and return a decoded JSON object."""

    def get_json(self, path: str, params: Mapping[str, object] | None = None) -> Mapping[str, Any]:
        """Return the decoded JSON object for `path`."""


def camel_to_snake(key: str) -> str:
    """Convert `perPage` into `per_page`."""

    return _UPPER_RE.sub(lambda match: f"_{match.group(0).lower()}", key)


def snake_to_camel(key: str) -> str:
    """Convert `last_page` into `lastPage`."""

    return _SNAKE_RE.sub(lambda match: match.group(1).upper(), key)


def transform_keys_deep(value: Any, transformer: Callable[[str], str]) -> Any:
    """Rename every mapping key in a nested JSON-like structure.

    Lists are traversed element-wise; scalars pass through unchanged.
    """

    if isinstance(value, list):
        return [transform_keys_deep(item, transformer) for item in value]
    if isinstance(value, Mapping):
        return {transformer(str(key)): transform_keys_deep(item, transformer) for key, item in value.items()}
    return value


class PurchasesApiClient:
    """Small JSON-over-HTTP client for the purchases backend."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: int = 30,
        snake_case_params: bool = False,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend root URL (e.g. `http://localhost/api`).
            token: Optional bearer token sent with every request.
            timeout: Per-request timeout in seconds.
            snake_case_params: Send query keys as snake_case (`date_from`)
                instead of camelCase (`dateFrom`).
        """

        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.snake_case_params = snake_case_params

    def build_url(self, path: str, params: Mapping[str, object] | None = None) -> str:
        """Return the absolute URL for a backend path and query parameters."""

        url = f"{self.base_url}/{path.lstrip('/')}"
        if not params:
            return url
        query = {
            (camel_to_snake(key) if self.snake_case_params else key): value
            for key, value in params.items()
            if value is not None
        }
        return f"{url}?{urllib.parse.urlencode(query)}"

    def get_json(self, path: str, params: Mapping[str, object] | None = None) -> Mapping[str, Any]:
        """GET a backend path and decode its JSON object body.

        Args:
            path: Backend path such as `/purchases`.
            params: Optional query parameters (camelCase keys).

        Returns:
            The decoded JSON object with camelCase keys.

        Raises:
            PurchasesApiError: On connection errors, non-2xx statuses,
                truncated or undecodable bodies, or a body that is not a JSON
                object.
        """

        headers = {
            "Accept": "application/json",
            "X-Requested-With": "XMLHttpRequest",
            "User-Agent": "spendingDashboard (chart engine)",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        request = urllib.request.Request(self.build_url(path, params), headers=headers)

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                content_type = response.headers.get("Content-Type", "")
                charset = "utf-8"
                if "charset=" in content_type:
                    charset = content_type.split("charset=", 1)[1].split(";", 1)[0].strip() or "utf-8"
                body = response.read().decode(charset, errors="replace")
        except urllib.error.HTTPError as exc:
            raise PurchasesApiError(
                f"Purchases backend returned HTTP {exc.code} for {path}.", path=path, status=exc.code
            ) from exc
        except Exception as exc:  # noqa: BLE001 - user-visible error wrapper
            raise PurchasesApiError(f"Failed to reach purchases backend: {path}", path=path) from exc

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as exc:
            raise PurchasesApiError(f"Purchases backend returned invalid JSON for {path}.", path=path) from exc
        if not isinstance(payload, dict):
            raise PurchasesApiError(f"Purchases backend returned a non-object body for {path}.", path=path)
        return transform_keys_deep(payload, snake_to_camel)


def client_from_settings() -> PurchasesApiClient:
    """Build a PurchasesApiClient from Django settings."""

    return PurchasesApiClient(
        settings.PURCHASES_API_BASE_URL,
        token=settings.PURCHASES_API_TOKEN or None,
        timeout=settings.PURCHASES_API_TIMEOUT_SECONDS,
        snake_case_params=settings.PURCHASES_API_SNAKE_CASE_PARAMS,
    )


def fetch_all_purchases(
    client: PurchasesTransport,
    *,
    date_range: DateRange,
    shop_id: int | None = None,
    page_size: int = MAX_PAGE_SIZE,
) -> tuple[PurchaseRecord, ...]:
    """Fetch every confirmed purchase in a date range, following pagination.

    Args:
        client: Transport used for the requests.
        date_range: Inclusive purchase-date filter.
        shop_id: Optional shop filter.
        page_size: Requested page size, clamped to `1..100`.

    Returns:
        All purchases across all pages, in page order.

    Raises:
        PurchasesApiError: When any page request fails. No partial result is
            returned.

    Notes:
        The page count is read from the first response's `meta.lastPage` and
        defaults to a single page when the metadata is missing.
    """

    params: dict[str, object] = {
        "dateFrom": date_range.start.isoformat(),
        "dateTo": date_range.end.isoformat(),
        "perPage": max(1, min(MAX_PAGE_SIZE, page_size)),
        "status": CONFIRMED_STATUS,
    }
    if shop_id is not None:
        params["shopId"] = shop_id

    records: list[PurchaseRecord] = []
    current_page = 1
    last_page = 1
    while True:
        payload = client.get_json(PURCHASES_PATH, {**params, "page": current_page})
        rows = payload.get("data") or []
        if not isinstance(rows, list):
            raise PurchasesApiError("Purchases payload `data` is not a list.", path=PURCHASES_PATH)
        records.extend(_purchase_from_payload(row) for row in rows)

        if current_page == 1:
            last_page = _last_page(payload.get("meta"))
        current_page += 1
        if current_page > last_page:
            break

    logger.info(
        "Fetched %d purchases across %d page(s) for %s..%s",
        len(records),
        last_page,
        date_range.start,
        date_range.end,
    )
    return tuple(records)


def fetch_purchase_date_range(client: PurchasesTransport) -> PurchaseDateRange | None:
    """Fetch the earliest/latest purchase dates.

    Returns:
        PurchaseDateRange, or None when the request fails or the payload has no
        `data` object. Failures are logged, not raised.
    """

    try:
        payload = client.get_json(PURCHASE_DATE_RANGE_PATH)
    except PurchasesApiError:
        logger.warning("Failed to fetch purchase date range", exc_info=True)
        return None

    data = payload.get("data")
    if not isinstance(data, Mapping):
        return None
    return PurchaseDateRange(
        earliest_date=parse_purchase_date(data.get("earliestDate")),
        latest_date=parse_purchase_date(data.get("latestDate")),
        total_count=_coerce_int(data.get("totalCount")) or 0,
    )


def _purchase_from_payload(row: object) -> PurchaseRecord:
    """Build a PurchaseRecord from one camelCase purchase payload."""

    if not isinstance(row, Mapping):
        raise PurchasesApiError("Purchases payload contains a non-object row.", path=PURCHASES_PATH)

    raw_date = row.get("purchaseDate")
    raw_amount = row.get("totalAmount")
    amount = _coerce_int(raw_amount)
    if amount is None:
        if raw_amount is not None:
            logger.warning("Ignoring non-integer totalAmount %r on purchase %r", raw_amount, row.get("id"))
        amount = 0

    status = row.get("status")
    return PurchaseRecord(
        purchase_date=raw_date if isinstance(raw_date, str) else None,
        total_amount=amount,
        id=_coerce_int(row.get("id")),
        status=str(status) if status is not None else None,
        shop_id=_coerce_int(row.get("shopId")),
    )


def _last_page(meta: object) -> int:
    """Return `meta.lastPage` as a positive int, defaulting to 1."""

    if not isinstance(meta, Mapping):
        return 1
    last_page = _coerce_int(meta.get("lastPage"))
    if last_page is None or last_page < 1:
        return 1
    return last_page


def _coerce_int(value: object) -> int | None:
    """Best-effort conversion of integral JSON values to int."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
