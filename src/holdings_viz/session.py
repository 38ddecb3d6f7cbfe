"""Per-dashboard rendering session.

Owns the renderers, the last dataset received for each visualization and the
debounced resize handling. Everything runs on one event loop: the fetch
completion writes the dataset, the resize handler only reads it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from holdings_viz.config import DashboardConfig
from holdings_viz.models.common import (
    CanvasSize,
    Point,
    RenderStatus,
    Viewport,
    VizTarget,
)
from holdings_viz.models.correlation import CorrelationData
from holdings_viz.models.holdings import PortfolioTreemap
from holdings_viz.output.correlation import CorrelationMatrixRenderer
from holdings_viz.output.summary import (
    CorrelationSummary,
    TreemapSummary,
    summarize_correlation,
    summarize_treemap,
)
from holdings_viz.output.treemap import TreemapRenderer

logger = logging.getLogger(__name__)

FetchTreemap = Callable[[str], Awaitable[PortfolioTreemap]]
FetchCorrelation = Callable[[str], Awaitable[CorrelationData]]
EmptyCallback = Callable[[VizTarget], None]
SummaryCallback = Callable[[VizTarget, BaseModel], None]


class DashboardSession:
    def __init__(
        self,
        treemap_renderer: TreemapRenderer | None = None,
        correlation_renderer: CorrelationMatrixRenderer | None = None,
        *,
        fetch_treemap: FetchTreemap | None = None,
        fetch_correlation: FetchCorrelation | None = None,
        config: DashboardConfig | None = None,
        canvas_width: float = 800,
        on_empty: EmptyCallback | None = None,
        on_summary: SummaryCallback | None = None,
    ) -> None:
        self.config = config or DashboardConfig()
        self.treemap_renderer = treemap_renderer
        self.correlation_renderer = correlation_renderer
        self.fetch_treemap = fetch_treemap
        self.fetch_correlation = fetch_correlation
        self.canvas_width = canvas_width
        self.on_empty = on_empty
        self.on_summary = on_summary

        self.last_treemap: PortfolioTreemap | None = None
        self.last_correlation: CorrelationData | None = None
        self.treemap_summary: TreemapSummary | None = None
        self.correlation_summary: CorrelationSummary | None = None

        self._treemap_in_flight = 0
        self._resize_pending = False
        self._resize_handle: asyncio.TimerHandle | None = None

    @property
    def canvas(self) -> CanvasSize:
        return CanvasSize(self.canvas_width, self.config.treemap.height)

    @property
    def viewport(self) -> Viewport:
        return Viewport(self.canvas_width, self.config.viewport_height)

    def _signal_empty(self, target: VizTarget) -> None:
        logger.info("%s has nothing to draw", target)
        if self.on_empty is not None:
            self.on_empty(target)

    def _publish(self, target: VizTarget, summary: BaseModel) -> None:
        if self.on_summary is not None:
            self.on_summary(target, summary)

    # --- treemap ---

    async def load_treemap(self, period: str) -> RenderStatus:
        if self.fetch_treemap is None:
            raise RuntimeError("No treemap data source configured")
        self._treemap_in_flight += 1
        try:
            data = await self.fetch_treemap(period)
        except Exception:
            logger.warning("Treemap fetch failed for period %s", period)
            self._treemap_in_flight -= 1
            if self._resize_pending and not self._treemap_in_flight:
                # The deferred resize still applies to the cached dataset
                self._render_treemap()
            raise
        self._treemap_in_flight -= 1
        return self.show_treemap(data, period)

    def show_treemap(
        self, data: PortfolioTreemap, period: str | None = None
    ) -> RenderStatus:
        # Last writer wins; out-of-order completions are accepted
        self.last_treemap = data
        self.treemap_summary = summarize_treemap(
            data, period, self.config.currency_symbol
        )
        self._publish(VizTarget.TREEMAP, self.treemap_summary)
        return self._render_treemap()

    def _render_treemap(self) -> RenderStatus:
        self._resize_pending = False
        if self.treemap_renderer is None or self.last_treemap is None:
            return RenderStatus.EMPTY
        items = self.last_treemap.items(self.config.treemap.min_weight)
        status = self.treemap_renderer.render(items, self.canvas)
        if status is RenderStatus.EMPTY:
            self._signal_empty(VizTarget.TREEMAP)
        return status

    # --- correlation ---

    async def load_correlation(self, period: str) -> RenderStatus:
        if self.fetch_correlation is None:
            raise RuntimeError("No correlation data source configured")
        try:
            data = await self.fetch_correlation(period)
        except Exception:
            logger.warning("Correlation fetch failed for period %s", period)
            raise
        return self.show_correlation(data)

    def show_correlation(self, data: CorrelationData) -> RenderStatus:
        self.last_correlation = data
        self.correlation_summary = summarize_correlation(data)
        self._publish(VizTarget.CORRELATION, self.correlation_summary)
        if self.correlation_renderer is None:
            return RenderStatus.EMPTY
        status = self.correlation_renderer.render(data)
        if status is RenderStatus.EMPTY:
            self._signal_empty(VizTarget.CORRELATION)
        return status

    # --- viewport events ---

    def resize(self, width: float) -> None:
        """Record a new container width; re-render once resizing settles."""
        self.canvas_width = width
        if self._resize_handle is not None:
            self._resize_handle.cancel()
        loop = asyncio.get_running_loop()
        self._resize_handle = loop.call_later(
            self.config.resize_debounce_ms / 1000, self._on_resize_settled
        )

    def _on_resize_settled(self) -> None:
        self._resize_handle = None
        if self.last_treemap is None:
            return
        if self._treemap_in_flight:
            # The pending fetch renders at the new width when it lands
            logger.debug("Resize deferred to in-flight treemap fetch")
            self._resize_pending = True
            return
        self._render_treemap()

    def pointer_move(
        self, x: float, y: float, viewport: Viewport | None = None
    ) -> str | None:
        if self.treemap_renderer is None:
            return None
        return self.treemap_renderer.pointer_move(
            Point(x, y), viewport or self.viewport
        )

    def pointer_leave(self) -> None:
        if self.treemap_renderer is not None:
            self.treemap_renderer.pointer_leave()
