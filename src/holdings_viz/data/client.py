import logging
from datetime import date
from typing import Any

import httpx
from dateutil.relativedelta import relativedelta

from holdings_viz.config import DashboardConfig
from holdings_viz.models.correlation import CorrelationData
from holdings_viz.models.holdings import PortfolioTreemap

logger = logging.getLogger(__name__)

TREEMAP_PATH = "/analysis/portfolio/treemap"
CORRELATION_PATH = "/analysis/correlation"

PERIOD_MONTHS: dict[str, int | None] = {
    "1M": 1,
    "3M": 3,
    "6M": 6,
    "1Y": 12,
    "ALL": None,
}
ALL_TIME_START = date(2020, 1, 1)


def period_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Translate a period token into the service's start/end dates.

    Tokens without a month count (``ALL``, ``1D``, ``MTD``, ...) start at
    ``ALL_TIME_START``.
    """
    end = today or date.today()
    months = PERIOD_MONTHS.get(period)
    if months is None:
        return ALL_TIME_START, end
    return end - relativedelta(months=months), end


class DashboardClient:
    """Thin async client for the analysis service. No retries or caching."""

    def __init__(
        self,
        config: DashboardConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if config.api_token:
            headers["Authorization"] = f"Bearer {config.api_token}"
        self._client = httpx.AsyncClient(
            base_url=config.api_url.rstrip("/"),
            headers=headers,
            timeout=config.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _get(self, path: str, params: dict[str, str]) -> Any:
        logger.debug("GET %s %s", path, params)
        resp = await self._client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()

    async def fetch_treemap(self, period: str) -> PortfolioTreemap:
        payload = await self._get(TREEMAP_PATH, {"period": period})
        return PortfolioTreemap.from_payload(payload)

    async def fetch_correlation(self, period: str) -> CorrelationData:
        start, end = period_date_range(period)
        payload = await self._get(
            CORRELATION_PATH,
            {"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
        return CorrelationData.model_validate(payload or {})
