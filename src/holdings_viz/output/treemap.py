from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from holdings_viz.analysis.layout import layout_items
from holdings_viz.config import TreemapConfig
from holdings_viz.models.common import CanvasSize, Point, Rect, RenderStatus, Viewport
from holdings_viz.models.holdings import WeightedItem
from holdings_viz.output.colors import color_for, text_color_for
from holdings_viz.output.formatters import fmt_pct
from holdings_viz.output.surface import Surface
from holdings_viz.output.tooltip import TooltipController

logger = logging.getLogger(__name__)


@dataclass
class TreemapCellView:
    item: WeightedItem
    rect: Rect
    handle: int
    fill: str
    primary: str
    secondary: str


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    lo, hi = bounds
    return min(max(value, lo), hi)


def primary_label(key: str, width: float, config: TreemapConfig) -> str:
    if width < config.label_min_width:
        return ""
    if width < config.label_full_width:
        return key[: config.label_abbrev_chars]
    return key


def secondary_label(
    metric: float | None, width: float, height: float, config: TreemapConfig
) -> str:
    if width < config.secondary_min_width or height < config.secondary_min_height:
        return ""
    if metric is None:
        return "N/A"
    return fmt_pct(metric, config.metric_decimals)


class TreemapRenderer:
    def __init__(
        self,
        surface: Surface,
        config: TreemapConfig | None = None,
        tooltip: TooltipController | None = None,
    ) -> None:
        self.surface = surface
        self.config = config or TreemapConfig()
        self.tooltip = tooltip or TooltipController(surface)
        self.cells: list[TreemapCellView] = []

    def render(self, items: Sequence[WeightedItem], canvas: CanvasSize) -> RenderStatus:
        """Redraw the whole treemap, replacing any previous output."""
        self.tooltip.reset()
        self.surface.clear()
        self.surface.resize(canvas.width, canvas.height)
        self.cells = []

        if not items:
            logger.info("No holdings to draw")
            return RenderStatus.EMPTY

        cfg = self.config
        for item, rect in layout_items(items, canvas, cfg.padding):
            self.cells.append(self._draw_cell(item, rect))

        logger.debug(
            "Rendered %d treemap cells on %sx%s",
            len(self.cells),
            canvas.width,
            canvas.height,
        )
        return RenderStatus.RENDERED

    def _draw_cell(self, item: WeightedItem, rect: Rect) -> TreemapCellView:
        cfg = self.config
        fill = color_for(item.metric, cfg.stops, cfg.clamp_magnitude)
        handle = self.surface.draw_rect(
            rect,
            fill=fill,
            stroke=cfg.stroke,
            stroke_width=cfg.stroke_width,
            radius=cfg.corner_radius,
            title=item.display_name,
        )

        text_color = text_color_for(
            item.metric, item.has_data, cfg.text_threshold, cfg.text_palette
        )
        w, h = rect.width, rect.height
        cx, cy = rect.center.x, rect.center.y

        primary = primary_label(item.key, w, cfg)
        if primary:
            self.surface.draw_text(
                cx,
                cy - 6,
                primary,
                color=text_color,
                font_size=_clamp(
                    w / cfg.primary_font_divisor, cfg.primary_font_range
                ),
                font_weight="bold",
            )

        secondary = secondary_label(item.metric, w, h, cfg)
        if secondary:
            self.surface.draw_text(
                cx,
                cy + 10,
                secondary,
                color=text_color,
                font_size=_clamp(
                    w / cfg.secondary_font_divisor, cfg.secondary_font_range
                ),
            )

        return TreemapCellView(item, rect, handle, fill, primary, secondary)

    def cell_at(self, x: float, y: float) -> TreemapCellView | None:
        for cell in self.cells:
            if cell.rect.contains(x, y):
                return cell
        return None

    def pointer_enter(
        self, cell: TreemapCellView, pointer: Point, viewport: Viewport
    ) -> None:
        cfg = self.config
        self.tooltip.enter(
            cell.item,
            cell.handle,
            pointer,
            viewport,
            emphasis=(cfg.hover_stroke, cfg.hover_stroke_width),
            normal=(cfg.stroke, cfg.stroke_width),
        )

    def pointer_leave(self) -> None:
        self.tooltip.leave()

    def pointer_move(self, pointer: Point, viewport: Viewport) -> str | None:
        """Drive enter/leave transitions from a raw pointer position."""
        cell = self.cell_at(pointer.x, pointer.y)
        current = self.tooltip.target
        if cell is None:
            self.pointer_leave()
            return None
        if current is None or current.handle != cell.handle:
            self.pointer_enter(cell, pointer, viewport)
        return cell.item.key
