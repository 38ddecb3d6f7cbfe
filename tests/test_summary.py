from holdings_viz.models.correlation import CorrelationData
from holdings_viz.models.holdings import PortfolioTreemap
from holdings_viz.output.summary import (
    Tier,
    correlation_tier,
    diversification_tier,
    summarize_correlation,
    summarize_treemap,
    value_class,
)


class TestTiers:
    def test_correlation_thresholds(self):
        assert correlation_tier(0.29) is Tier.EXCELLENT
        assert correlation_tier(0.3) is Tier.MODERATE
        assert correlation_tier(0.59) is Tier.MODERATE
        assert correlation_tier(0.6) is Tier.POOR

    def test_diversification_thresholds(self):
        assert diversification_tier(39.9) is Tier.EXCELLENT
        assert diversification_tier(40) is Tier.MODERATE
        assert diversification_tier(70) is Tier.MODERATE
        assert diversification_tier(70.1) is Tier.POOR

    def test_css_classes(self):
        assert Tier.EXCELLENT.css_class == "text-positive"
        assert Tier.MODERATE.css_class == "text-warning"
        assert Tier.POOR.css_class == "text-negative"

    def test_value_class(self):
        assert value_class(1.2) == "text-positive"
        assert value_class(-0.1) == "text-negative"
        assert value_class(0) == "text-muted"


class TestSummarizeCorrelation:
    def test_full(self):
        data = CorrelationData(
            symbols=["A", "B", "C"],
            average_correlation=0.45,
            diversification_score=82,
        )
        s = summarize_correlation(data)
        assert s.average_correlation.text == "0.45"
        assert s.average_correlation.css_class == "text-warning"
        assert s.diversification.text == "Poor"
        assert s.diversification.css_class == "text-negative"
        assert s.stock_count == 3

    def test_missing_numbers_use_defaults(self):
        s = summarize_correlation(CorrelationData(symbols=["A", "B"]))
        assert s.average_correlation.text == "0.00"
        assert s.average_correlation.css_class == "text-positive"
        assert s.diversification.text == "Moderate"

    def test_empty(self):
        s = summarize_correlation(CorrelationData(symbols=["A"]))
        assert s.average_correlation.text == "-"
        assert s.diversification.text == "-"
        assert s.stock_count == 1

    def test_none(self):
        assert summarize_correlation(None).stock_count == 0


class TestSummarizeTreemap:
    def test_basic(self):
        treemap = PortfolioTreemap.model_validate(
            {
                "cells": [{"symbol": "AAPL", "investmentAmount": 100}],
                "period": "1M",
                "totalInvestment": 12_345_678,
                "totalPerformance": -2.5,
            }
        )
        s = summarize_treemap(treemap)
        assert s.total_investment.text == "₩12,345,678"
        assert s.average_performance.text == "-2.50%"
        assert s.average_performance.css_class == "text-negative"
        assert s.period_label == "1 month"
        assert s.holdings == 1

    def test_explicit_period_wins(self):
        s = summarize_treemap(PortfolioTreemap(period="1M"), period="1Y", currency="$")
        assert s.period_label == "1 year"
        assert s.total_investment.text == "$0"
        assert s.average_performance.css_class == "text-muted"

    def test_unknown_period_passes_through(self):
        assert summarize_treemap(PortfolioTreemap(), period="QTD").period_label == "QTD"
