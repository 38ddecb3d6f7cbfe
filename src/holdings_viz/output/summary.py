"""Summary panel text for the correlation and treemap cards.

Only selects tiers and formats strings; the numbers come from the service.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

from holdings_viz.config import PERIOD_LABELS
from holdings_viz.models.correlation import CorrelationData
from holdings_viz.models.holdings import PortfolioTreemap
from holdings_viz.output.formatters import fmt_currency, fmt_pct

PLACEHOLDER = "-"


class Tier(StrEnum):
    EXCELLENT = "excellent"
    MODERATE = "moderate"
    POOR = "poor"

    @property
    def css_class(self) -> str:
        return {
            Tier.EXCELLENT: "text-positive",
            Tier.MODERATE: "text-warning",
            Tier.POOR: "text-negative",
        }[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


def correlation_tier(average: float) -> Tier:
    if average < 0.3:
        return Tier.EXCELLENT
    if average < 0.6:
        return Tier.MODERATE
    return Tier.POOR


def diversification_tier(score: float) -> Tier:
    if score < 40:
        return Tier.EXCELLENT
    if score > 70:
        return Tier.POOR
    return Tier.MODERATE


def value_class(value: float) -> str:
    if value > 0:
        return "text-positive"
    if value < 0:
        return "text-negative"
    return "text-muted"


class SummaryField(BaseModel):
    text: str
    css_class: str = ""


class CorrelationSummary(BaseModel):
    average_correlation: SummaryField
    diversification: SummaryField
    stock_count: int


class TreemapSummary(BaseModel):
    total_investment: SummaryField
    average_performance: SummaryField
    period_label: str
    holdings: int


def summarize_correlation(data: CorrelationData | None) -> CorrelationSummary:
    count = len(data.symbols) if data else 0
    if data is None or count < 2:
        return CorrelationSummary(
            average_correlation=SummaryField(text=PLACEHOLDER),
            diversification=SummaryField(text=PLACEHOLDER),
            stock_count=count,
        )

    avg = data.average_correlation
    if avg is None:
        avg = 0.0
    score = data.diversification_score
    if score is None:
        score = 50.0
    avg_tier = correlation_tier(avg)
    div_tier = diversification_tier(score)
    return CorrelationSummary(
        average_correlation=SummaryField(
            text=f"{avg:.2f}", css_class=avg_tier.css_class
        ),
        diversification=SummaryField(text=div_tier.label, css_class=div_tier.css_class),
        stock_count=count,
    )


def summarize_treemap(
    treemap: PortfolioTreemap, period: str | None = None, currency: str = "₩"
) -> TreemapSummary:
    perf = treemap.total_performance or 0.0
    token = period or treemap.period or ""
    invested = fmt_currency(treemap.total_investment or 0, currency)
    return TreemapSummary(
        total_investment=SummaryField(text=invested),
        average_performance=SummaryField(
            text=fmt_pct(perf), css_class=value_class(perf)
        ),
        period_label=PERIOD_LABELS.get(token, token),
        holdings=len(treemap.cells),
    )
