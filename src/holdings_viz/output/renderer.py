from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from holdings_viz.config import CorrelationConfig
from holdings_viz.models.correlation import CorrelationData
from holdings_viz.models.holdings import PortfolioTreemap
from holdings_viz.output.colors import color_for, text_color_for
from holdings_viz.output.formatters import (
    fmt_correlation,
    fmt_currency,
    fmt_pct,
    truncate_label,
)
from holdings_viz.output.summary import CorrelationSummary, SummaryField, TreemapSummary

CLASS_STYLES = {
    "text-positive": "green",
    "text-warning": "yellow",
    "text-negative": "red",
    "text-muted": "dim",
}


def _styled(field: SummaryField) -> Text:
    return Text(field.text, style=CLASS_STYLES.get(field.css_class, ""))


class ConsoleRenderer:
    """Terminal rendition of the dashboard cards."""

    def __init__(self, console: Console | None = None, currency: str = "₩") -> None:
        self.console = console or Console()
        self.currency = currency

    def render_treemap_summary(self, summary: TreemapSummary) -> None:
        body = Text.assemble(
            ("Total investment  ", "cyan"),
            summary.total_investment.text,
            ("\nAverage return    ", "cyan"),
            _styled(summary.average_performance),
            ("\nHoldings          ", "cyan"),
            str(summary.holdings),
        )
        title = "Portfolio Treemap"
        if summary.period_label:
            title += f" ({summary.period_label})"
        self.console.print(Panel(body, title=title, style="cyan"))

    def render_holdings(self, treemap: PortfolioTreemap) -> None:
        table = Table(title="Holdings", show_header=True)
        table.add_column("Symbol", style="cyan")
        table.add_column("Name")
        table.add_column("Invested", justify="right")
        table.add_column("Return", justify="right")
        table.add_column("Sector")

        items = sorted(treemap.items(), key=lambda it: it.weight, reverse=True)
        for item in items:
            ret = fmt_pct(item.metric)
            style = ""
            if item.metric is not None:
                style = "green" if item.metric >= 0 else "red"
            table.add_row(
                item.key,
                item.display_name,
                fmt_currency(item.weight, self.currency),
                Text(ret, style=style),
                str(item.auxiliary.get("sector", "")),
            )
        self.console.print(table)

    def render_correlation_summary(self, summary: CorrelationSummary) -> None:
        body = Text.assemble(
            ("Average correlation  ", "cyan"),
            _styled(summary.average_correlation),
            ("\nDiversification      ", "cyan"),
            _styled(summary.diversification),
            ("\nSymbols              ", "cyan"),
            str(summary.stock_count),
        )
        self.console.print(Panel(body, title="Correlation", style="cyan"))

    def render_correlation_matrix(
        self, data: CorrelationData, config: CorrelationConfig | None = None
    ) -> None:
        cfg = config or CorrelationConfig()
        labels = data.labels
        if len(labels) < 2:
            return

        short = [
            truncate_label(name, cfg.header_max_chars, cfg.ellipsis) for name in labels
        ]
        table = Table(title="Correlation Matrix", show_header=True)
        table.add_column("")
        for name in short:
            table.add_column(name, justify="center")

        for i, name in enumerate(short):
            row: list[Text | str] = [name]
            for j in range(len(labels)):
                value = data.value_at(i, j)
                if i == j:
                    value = None
                fill = color_for(value, cfg.stops, cfg.clamp_magnitude)
                fg = text_color_for(
                    value, value is not None, cfg.text_threshold, cfg.text_palette
                )
                text = cfg.diagonal_glyph if i == j else fmt_correlation(value)
                row.append(Text(f" {text} ", style=f"{fg} on {fill}"))
            table.add_row(*row)
        self.console.print(table)
