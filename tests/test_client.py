import asyncio
from datetime import date

import httpx
import pytest

from holdings_viz.config import DashboardConfig
from holdings_viz.data.client import DashboardClient, period_date_range

TODAY = date(2026, 3, 31)


class TestPeriodDateRange:
    def test_month_periods(self) -> None:
        assert period_date_range("3M", TODAY) == (date(2025, 12, 31), TODAY)
        assert period_date_range("6M", TODAY) == (date(2025, 9, 30), TODAY)
        assert period_date_range("1Y", TODAY) == (date(2025, 3, 31), TODAY)

    def test_month_end_is_clamped(self) -> None:
        assert period_date_range("1M", TODAY) == (date(2026, 2, 28), TODAY)
        leap = date(2024, 3, 31)
        assert period_date_range("1M", leap) == (date(2024, 2, 29), leap)

    def test_all_time(self) -> None:
        assert period_date_range("ALL", TODAY) == (date(2020, 1, 1), TODAY)

    def test_tokens_without_months_start_at_all_time(self) -> None:
        for token in ("1D", "1W", "MTD", "bogus"):
            assert period_date_range(token, TODAY) == (date(2020, 1, 1), TODAY)


def _client(handler, token: str | None = None) -> DashboardClient:
    config = DashboardConfig(api_url="http://testserver/api/", api_token=token)
    return DashboardClient(config, transport=httpx.MockTransport(handler))


class TestDashboardClient:
    def test_fetch_treemap(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "cells": [
                        {"symbol": "005930", "investmentAmount": 1000},
                        {"symbol": "000660", "investmentAmount": 500},
                    ],
                    "period": "1W",
                    "totalInvestment": 1500,
                },
            )

        async def run():
            async with _client(handler, token="secret") as client:
                return await client.fetch_treemap("1W")

        treemap = asyncio.run(run())
        assert [c.symbol for c in treemap.cells] == ["005930", "000660"]
        assert treemap.total_investment == 1500

        request = seen[0]
        assert request.url.path == "/api/analysis/portfolio/treemap"
        assert request.url.params["period"] == "1W"
        assert request.headers["Authorization"] == "Bearer secret"

    def test_fetch_treemap_bare_list(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"symbol": "AAPL"}])

        async def run():
            async with _client(handler) as client:
                return await client.fetch_treemap("1D")

        treemap = asyncio.run(run())
        assert len(treemap.cells) == 1

    def test_fetch_correlation_sends_date_range(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "symbols": ["A", "B"],
                    "matrix": [[1, 0.4], [0.4, 1]],
                    "averageCorrelation": 0.4,
                },
            )

        async def run():
            async with _client(handler) as client:
                return await client.fetch_correlation("ALL")

        data = asyncio.run(run())
        assert data.value_at(0, 1) == 0.4
        params = seen[0].url.params
        assert seen[0].url.path == "/api/analysis/correlation"
        assert params["startDate"] == "2020-01-01"
        assert params["endDate"] == date.today().isoformat()
        assert "Authorization" not in seen[0].headers

    def test_http_error_propagates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"error": "unavailable"})

        async def run():
            async with _client(handler) as client:
                await client.fetch_treemap("1D")

        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(run())
