from __future__ import annotations

from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

from holdings_viz.models.holdings import coerce_number


class CorrelationData(BaseModel):
    """Pairwise correlation payload as returned by the analysis service."""

    model_config = ConfigDict(populate_by_name=True)

    symbols: list[str] = []
    names: list[str | None] = []
    matrix: list[list[float | None]] = []
    period_days: int | None = Field(None, alias="periodDays")
    data_points: int | None = Field(None, alias="dataPoints")
    average_correlation: float | None = Field(None, alias="averageCorrelation")
    diversification_score: float | None = Field(None, alias="diversificationScore")

    @field_validator("matrix", mode="before")
    @classmethod
    def _lenient_matrix(cls, v: Any) -> list[list[float | None]]:
        if not v:
            return []
        return [[coerce_number(x) for x in row] for row in v]

    @field_validator("average_correlation", "diversification_score", mode="before")
    @classmethod
    def _lenient_number(cls, v: Any) -> float | None:
        return coerce_number(v)

    @field_validator("names", mode="before")
    @classmethod
    def _none_names(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def labels(self) -> list[str]:
        out = []
        for i, symbol in enumerate(self.symbols):
            name = self.names[i] if i < len(self.names) else None
            out.append(name or symbol)
        return out

    def value_at(self, i: int, j: int) -> float | None:
        if i >= len(self.matrix) or j >= len(self.matrix[i]):
            return None
        return self.matrix[i][j]

    @classmethod
    def from_dataframe(
        cls, frame: pd.DataFrame, names: list[str] | None = None
    ) -> CorrelationData:
        """Build from a square correlation frame (e.g. ``returns.corr()``)."""
        symbols = [str(c) for c in frame.columns]
        values = frame.reindex(index=frame.columns).astype(float)
        matrix = [
            [None if pd.isna(x) else float(x) for x in row]
            for row in values.itertuples(index=False)
        ]
        return cls(symbols=symbols, names=names or [], matrix=matrix)
