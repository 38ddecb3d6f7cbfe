from __future__ import annotations

import logging
from dataclasses import dataclass

from holdings_viz.config import CorrelationConfig
from holdings_viz.models.common import Rect, RenderStatus
from holdings_viz.models.correlation import CorrelationData
from holdings_viz.output.colors import color_for, text_color_for
from holdings_viz.output.formatters import fmt_correlation, truncate_label
from holdings_viz.output.surface import Surface

logger = logging.getLogger(__name__)

HEADER_TEXT = "#9ca3af"


@dataclass
class MatrixCellView:
    row: int
    col: int
    rect: Rect
    value: float | None
    fill: str
    text: str
    text_color: str
    title: str


class CorrelationMatrixRenderer:
    """Draws an N×N correlation table with a diverging fill per cell."""

    def __init__(
        self, surface: Surface, config: CorrelationConfig | None = None
    ) -> None:
        self.surface = surface
        self.config = config or CorrelationConfig()
        self.headers: list[str] = []
        self.cells: list[MatrixCellView] = []

    def short_label(self, name: str) -> str:
        return truncate_label(name, self.config.header_max_chars, self.config.ellipsis)

    def render(self, data: CorrelationData) -> RenderStatus:
        self.surface.clear()
        self.headers = []
        self.cells = []

        labels = data.labels
        n = len(labels)
        if n < 2:
            logger.info("Correlation needs at least two symbols, got %d", n)
            return RenderStatus.EMPTY

        cfg = self.config
        row_h = cfg.cell_height
        header_w = cfg.header_width
        width = self.surface.width
        col_w = max(width - header_w, 0.0) / n
        self.surface.resize(width, row_h * (n + 1))

        self.headers = [self.short_label(name) for name in labels]
        for j, name in enumerate(labels):
            self.surface.draw_text(
                header_w + col_w * (j + 0.5),
                row_h / 2,
                self.headers[j],
                color=HEADER_TEXT,
                font_size=cfg.font_size,
                font_weight="bold",
                title=name,
            )

        for i, row_name in enumerate(labels):
            top = row_h * (i + 1)
            self.surface.draw_text(
                header_w / 2,
                top + row_h / 2,
                self.headers[i],
                color=HEADER_TEXT,
                font_size=cfg.font_size,
                font_weight="bold",
                title=row_name,
            )
            for j, col_name in enumerate(labels):
                left = header_w + col_w * j
                rect = Rect(left, top, left + col_w, top + row_h)
                self.cells.append(self._draw_cell(data, i, j, rect, row_name, col_name))

        logger.debug("Rendered %dx%d correlation matrix", n, n)
        return RenderStatus.RENDERED

    def _draw_cell(
        self,
        data: CorrelationData,
        i: int,
        j: int,
        rect: Rect,
        row_name: str,
        col_name: str,
    ) -> MatrixCellView:
        cfg = self.config
        value = data.value_at(i, j)
        if i == j:
            fill = color_for(None, cfg.stops, cfg.clamp_magnitude)
            text = cfg.diagonal_glyph
            text_color = cfg.text_palette.no_data
        else:
            fill = color_for(value, cfg.stops, cfg.clamp_magnitude)
            text = fmt_correlation(value)
            text_color = text_color_for(
                value, value is not None, cfg.text_threshold, cfg.text_palette
            )
        title = f"{row_name} ↔ {col_name}: {fmt_correlation(value)}"

        self.surface.draw_rect(
            rect, fill=fill, stroke="#ffffff", stroke_width=1, title=title
        )
        self.surface.draw_text(
            rect.center.x,
            rect.center.y,
            text,
            color=text_color,
            font_size=cfg.font_size,
            title=title,
        )
        return MatrixCellView(i, j, rect, value, fill, text, text_color, title)
