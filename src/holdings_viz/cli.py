import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

import pandas as pd
from dotenv import load_dotenv
from rich.console import Console

from holdings_viz.config import DashboardConfig
from holdings_viz.data.client import DashboardClient
from holdings_viz.models.common import RenderStatus, VizTarget
from holdings_viz.models.correlation import CorrelationData
from holdings_viz.models.holdings import PortfolioTreemap
from holdings_viz.output.correlation import CorrelationMatrixRenderer
from holdings_viz.output.renderer import ConsoleRenderer
from holdings_viz.output.surface import MatplotlibSurface
from holdings_viz.output.tooltip import TooltipController
from holdings_viz.output.treemap import TreemapRenderer
from holdings_viz.session import DashboardSession

logger = logging.getLogger(__name__)
console = Console()

DEFAULT_OUTPUT_DIR = Path("reports") / "charts"
PERIODS = ("1D", "1W", "1M", "MTD", "3M", "6M", "1Y", "ALL")


def _add_common(p: argparse.ArgumentParser, default_period: str) -> None:
    p.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Read the payload from a JSON file instead of the API",
    )
    p.add_argument(
        "--period",
        default=default_period,
        help=f"Period token passed to the service ({', '.join(PERIODS)})",
    )
    p.add_argument("--api-url", default=None, help="Analysis service base URL")
    p.add_argument("--width", type=float, default=800, help="Canvas width in pixels")
    p.add_argument("--output", type=Path, default=None, help="PNG output path")
    p.add_argument("--svg", type=Path, default=None, help="Also write an SVG scene")
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="holdings-viz",
        description="Portfolio treemap and correlation matrix renderer",
    )
    sub = p.add_subparsers(dest="command")

    treemap = sub.add_parser("treemap", help="Render the holdings treemap")
    _add_common(treemap, "1D")

    corr = sub.add_parser("correlation", help="Render the correlation matrix")
    _add_common(corr, "1Y")

    return p


def load_config(args: argparse.Namespace) -> DashboardConfig:
    load_dotenv()
    config = DashboardConfig()
    api_url = args.api_url or os.environ.get("HOLDINGS_VIZ_API_URL")
    if api_url:
        config.api_url = api_url
    config.api_token = os.environ.get("HOLDINGS_VIZ_TOKEN") or None
    return config


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def read_correlation_file(path: Path) -> CorrelationData:
    if path.suffix.lower() == ".csv":
        # Read as text so zero-padded tickers survive in the index
        frame = pd.read_csv(path, dtype=str)
        frame = frame.set_index(frame.columns[0]).astype(float)
        return CorrelationData.from_dataframe(frame)
    return CorrelationData.model_validate(_read_json(path))


def _on_empty(target: VizTarget) -> None:
    console.print(f"[yellow]No {target} data to display.[/yellow]")


def _write_svg(surface: MatplotlibSurface, path: Path) -> None:
    if path.suffix.lower() != ".svg":
        path = path.with_suffix(".svg")
    if surface.save(path):
        console.print(f"[green]SVG saved to {path}[/green]")


async def run_treemap(args: argparse.Namespace, config: DashboardConfig) -> int:
    surface = MatplotlibSurface(args.width, config.treemap.height)
    tooltip = TooltipController(surface, config.tooltip, config.currency_symbol)
    session = DashboardSession(
        TreemapRenderer(surface, config.treemap, tooltip),
        config=config,
        canvas_width=args.width,
        on_empty=_on_empty,
    )
    renderer = ConsoleRenderer(console, config.currency_symbol)

    if args.input:
        data = PortfolioTreemap.from_payload(_read_json(args.input))
        status = session.show_treemap(data, args.period)
    else:
        async with DashboardClient(config) as client:
            session.fetch_treemap = client.fetch_treemap
            with console.status(f"[cyan]Fetching treemap for {args.period}..."):
                status = await session.load_treemap(args.period)

    if session.treemap_summary is not None:
        renderer.render_treemap_summary(session.treemap_summary)
    if status is RenderStatus.EMPTY:
        return 0

    renderer.render_holdings(session.last_treemap)
    output = args.output or DEFAULT_OUTPUT_DIR / f"treemap_{args.period}.png"
    if surface.save(output):
        console.print(f"[green]Treemap saved to {output}[/green]")
    if args.svg:
        _write_svg(surface, args.svg)
    return 0


async def run_correlation(args: argparse.Namespace, config: DashboardConfig) -> int:
    surface = MatplotlibSurface(args.width, config.correlation.cell_height)
    session = DashboardSession(
        correlation_renderer=CorrelationMatrixRenderer(surface, config.correlation),
        config=config,
        canvas_width=args.width,
        on_empty=_on_empty,
    )
    renderer = ConsoleRenderer(console, config.currency_symbol)

    if args.input:
        status = session.show_correlation(read_correlation_file(args.input))
    else:
        async with DashboardClient(config) as client:
            session.fetch_correlation = client.fetch_correlation
            with console.status(f"[cyan]Fetching correlation for {args.period}..."):
                status = await session.load_correlation(args.period)

    if session.correlation_summary is not None:
        renderer.render_correlation_summary(session.correlation_summary)
    if status is RenderStatus.EMPTY:
        return 0

    renderer.render_correlation_matrix(session.last_correlation, config.correlation)
    output = args.output or DEFAULT_OUTPUT_DIR / f"correlation_{args.period}.png"
    if surface.save(output):
        console.print(f"[green]Correlation matrix saved to {output}[/green]")
    if args.svg:
        _write_svg(surface, args.svg)
    return 0


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    config = load_config(args)
    try:
        if args.command == "treemap":
            code = asyncio.run(run_treemap(args, config))
        else:
            code = asyncio.run(run_correlation(args, config))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
