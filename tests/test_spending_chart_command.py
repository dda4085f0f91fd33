"""Integration tests for the spending_chart management command."""

from __future__ import annotations

import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from core import purchases_api
from tests.fakes import FakePurchasesTransport, purchases_page

pytestmark = pytest.mark.integration


def _use_backend(monkeypatch, transport: FakePurchasesTransport) -> FakePurchasesTransport:
    monkeypatch.setattr(purchases_api, "client_from_settings", lambda: transport)
    return transport


def test_command_prints_series_and_total(monkeypatch) -> None:
    """The table output lists one line per bucket followed by the total."""

    _use_backend(monkeypatch, FakePurchasesTransport([purchases_page([("2025-03-04", 250), ("2025-03-08", 50)])]))
    out = StringIO()

    call_command("spending_chart", "--start", "2025-03-03", "--end", "2025-03-09", stdout=out)

    lines = out.getvalue().splitlines()
    assert lines[0] == "daily 2025-03-03..2025-03-09"
    assert len(lines) == 9
    assert lines[2].startswith("2025-03-04")
    assert "250" in lines[2]
    assert lines[-1] == "total=300"


def test_command_json_output(monkeypatch) -> None:
    """`--json` prints the Chart.js payload."""

    _use_backend(monkeypatch, FakePurchasesTransport([purchases_page([("2025-03-15", 801)])]))
    out = StringIO()

    call_command(
        "spending_chart",
        "--start",
        "2025-03-01",
        "--end",
        "2025-03-31",
        "--period",
        "weekly",
        "--json",
        stdout=out,
    )

    payload = json.loads(out.getvalue())
    assert payload["datasets"][0]["period"] == "weekly"
    assert sum(payload["datasets"][0]["data"]) == 801
    assert payload["dates"][0] == "2025-02-24"


def test_command_forwards_shop_filter(monkeypatch) -> None:
    """`--shop-id` narrows the backend query."""

    transport = _use_backend(monkeypatch, FakePurchasesTransport([purchases_page([])]))

    call_command("spending_chart", "--start", "2025-03-03", "--end", "2025-03-09", "--shop-id", "3", stdout=StringIO())

    assert transport.purchase_calls[0]["shopId"] == 3


def test_command_requires_both_dates(monkeypatch) -> None:
    """Passing only one explicit date is an error."""

    _use_backend(monkeypatch, FakePurchasesTransport())

    with pytest.raises(CommandError, match="together"):
        call_command("spending_chart", "--start", "2025-03-03", stdout=StringIO())


def test_command_rejects_reversed_range(monkeypatch) -> None:
    """A start after the end is rejected."""

    _use_backend(monkeypatch, FakePurchasesTransport())

    with pytest.raises(CommandError, match="after end"):
        call_command("spending_chart", "--start", "2025-03-09", "--end", "2025-03-03", stdout=StringIO())


def test_command_fails_when_backend_fails(monkeypatch) -> None:
    """A failed fetch surfaces as a CommandError with the generic message."""

    _use_backend(monkeypatch, FakePurchasesTransport(fail_on_page=1))

    with pytest.raises(CommandError, match="Unable to load purchase data"):
        call_command("spending_chart", "--start", "2025-03-03", "--end", "2025-03-09", stdout=StringIO())
