from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

MIN_WEIGHT = 1.0
UNKNOWN_SECTOR = "UNKNOWN"


def coerce_number(value: Any) -> float | None:
    """Parse a payload number, mapping blanks and garbage to ``None``."""
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable number in payload: %r", value)
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass
class WeightedItem:
    key: str
    display_name: str
    weight: float
    metric: float | None = None
    auxiliary: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.metric is not None and not math.isfinite(self.metric):
            self.metric = None

    @property
    def has_data(self) -> bool:
        return self.metric is not None


class TreemapCell(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str = ""
    name: str | None = None
    investment_amount: float | None = Field(None, alias="investmentAmount")
    performance_percent: float | None = Field(None, alias="performancePercent")
    current_price: float | None = Field(None, alias="currentPrice")
    price_change: float | None = Field(None, alias="priceChange")
    sector: str | None = None
    has_data: bool = Field(True, alias="hasData")

    @field_validator(
        "investment_amount",
        "performance_percent",
        "current_price",
        "price_change",
        mode="before",
    )
    @classmethod
    def _lenient_number(cls, v: Any) -> float | None:
        return coerce_number(v)

    @field_validator("symbol", mode="before")
    @classmethod
    def _symbol_as_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("name", "sector", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("has_data", mode="before")
    @classmethod
    def _default_has_data(cls, v: Any) -> Any:
        # Only an explicit false marks a cell as missing data
        return True if v is None else v

    def to_weighted_item(self, min_weight: float = MIN_WEIGHT) -> WeightedItem:
        amount = self.investment_amount
        if amount is None or amount <= 0:
            logger.debug(
                "Holding %s has no usable investment amount, flooring to %s",
                self.symbol,
                min_weight,
            )
        weight = max(amount or min_weight, min_weight)
        metric = self.performance_percent if self.has_data else None
        return WeightedItem(
            key=self.symbol,
            display_name=self.name or self.symbol,
            weight=weight,
            metric=metric,
            auxiliary={
                "investment_amount": weight,
                "current_price": self.current_price,
                "price_change": self.price_change,
                "sector": self.sector or UNKNOWN_SECTOR,
            },
        )


class PortfolioTreemap(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cells: list[TreemapCell] = []
    period: str | None = None
    last_updated: datetime | None = Field(None, alias="lastUpdated")
    total_investment: float | None = Field(None, alias="totalInvestment")
    total_performance: float | None = Field(None, alias="totalPerformance")

    @field_validator("cells", mode="before")
    @classmethod
    def _only_mappings(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        return [c for c in v if isinstance(c, (dict, TreemapCell))]

    @field_validator("cells")
    @classmethod
    def _drop_unkeyed(cls, cells: list[TreemapCell]) -> list[TreemapCell]:
        kept = [c for c in cells if c.symbol]
        dropped = len(cells) - len(kept)
        if dropped:
            logger.debug("Dropped %d treemap cells without a symbol", dropped)
        return kept

    @field_validator("total_investment", "total_performance", mode="before")
    @classmethod
    def _lenient_number(cls, v: Any) -> float | None:
        return coerce_number(v)

    @classmethod
    def from_payload(cls, payload: Any) -> PortfolioTreemap:
        """Accept either the full treemap object or a bare list of cells."""
        if payload is None:
            return cls()
        if isinstance(payload, list):
            return cls(cells=payload)
        return cls.model_validate(payload)

    def items(self, min_weight: float = MIN_WEIGHT) -> list[WeightedItem]:
        return [cell.to_weighted_item(min_weight) for cell in self.cells]
