from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from godown.application import configure_services, get_sales_service, reset_dashboard_state
from godown.core.settings import Settings
from godown.infrastructure.sheets import (
    SheetClient,
    SheetFetched,
    SourceError,
    configure_sheet_client,
    get_sheet_client,
)


def test_fetch_returns_csv_text():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["accept"] = request.headers["accept"]
        return httpx.Response(200, text="Order Date,Selling Price\n1/5/24,100\n")

    client = SheetClient(transport=httpx.MockTransport(handler))
    result = asyncio.run(client.fetch("https://sheets.example.com/export?format=csv"))

    assert isinstance(result, SheetFetched)
    assert result.text.startswith("Order Date")
    assert captured["url"] == "https://sheets.example.com/export?format=csv"
    assert "text/csv" in captured["accept"]


def test_non_success_status_becomes_source_error():
    client = SheetClient(transport=httpx.MockTransport(lambda request: httpx.Response(403, text="denied")))

    result = asyncio.run(client.fetch("https://sheets.example.com/private"))

    assert result == SourceError(url="https://sheets.example.com/private", reason="HTTP 403")


def test_network_failure_becomes_source_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = SheetClient(transport=httpx.MockTransport(handler))
    result = asyncio.run(client.fetch("https://sheets.example.com/down"))

    assert isinstance(result, SourceError)
    assert "ConnectError" in result.reason


def test_slow_host_times_out():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, text="late")

    client = SheetClient(timeout=0.05, transport=httpx.MockTransport(handler))
    result = asyncio.run(client.fetch("https://sheets.example.com/slow"))

    assert isinstance(result, SourceError)
    assert result.reason.startswith("timed out")


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        SheetClient(timeout=0)


def test_default_client_follows_the_configured_timeout():
    reset_dashboard_state()
    try:
        configure_services(Settings(fetch_timeout=5.0))
        first = get_sales_service()._resolve_fetcher()
        configure_services(Settings(fetch_timeout=2.0))
        second = get_sales_service()._resolve_fetcher()

        assert first.timeout == 5.0
        assert second.timeout == 2.0
    finally:
        configure_services(Settings())
        reset_dashboard_state()


def test_installed_client_is_kept_regardless_of_timeout():
    installed = SheetClient(timeout=9.0)
    configure_sheet_client(installed)
    try:
        assert get_sheet_client(1.0) is installed
    finally:
        configure_sheet_client(None)
