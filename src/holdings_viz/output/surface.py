"""Drawing surfaces the renderers paint on.

A surface is retained-mode: every draw call returns a handle that can be
restyled later (hover emphasis), ``clear`` drops everything, and a single
overlay slot carries the tooltip.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import FancyBboxPatch

from holdings_viz.models.common import Rect

logger = logging.getLogger(__name__)

LINE_HEIGHT = 1.5
CHAR_WIDTH = 0.6
BACKGROUND = "#141428"
OVERLAY_FILL = "#141428f2"
OVERLAY_STROKE = "#ffffff1a"
OVERLAY_TEXT = "#fffffff2"

_HALIGN = {"start": "left", "middle": "center", "end": "right"}


class Surface(Protocol):
    width: float
    height: float

    def clear(self) -> None: ...

    def resize(self, width: float, height: float) -> None: ...

    def draw_rect(
        self,
        rect: Rect,
        *,
        fill: str,
        stroke: str = "none",
        stroke_width: float = 0.0,
        radius: float = 0.0,
        title: str | None = None,
    ) -> int: ...

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        color: str,
        font_size: float,
        font_weight: str = "normal",
        anchor: str = "middle",
        title: str | None = None,
    ) -> int: ...

    def set_stroke(self, handle: int, stroke: str, stroke_width: float) -> None: ...

    def measure_text(
        self, lines: Sequence[str], font_size: float
    ) -> tuple[float, float]:
        """Rendered (width, height) of a block of lines."""
        ...

    def show_overlay(
        self,
        left: float,
        top: float,
        lines: Sequence[str],
        *,
        font_size: float,
        padding: float,
    ) -> None: ...

    def hide_overlay(self) -> None: ...


@dataclass
class Shape:
    kind: str
    attrs: dict[str, Any] = field(default_factory=dict)


@dataclass
class Overlay:
    left: float
    top: float
    lines: list[str]
    font_size: float
    padding: float


class SceneSurface:
    """In-memory scene graph for inspecting what a renderer drew."""

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.shapes: list[Shape] = []
        self.overlay: Overlay | None = None

    @property
    def rects(self) -> list[Shape]:
        return [s for s in self.shapes if s.kind == "rect"]

    @property
    def texts(self) -> list[Shape]:
        return [s for s in self.shapes if s.kind == "text"]

    def clear(self) -> None:
        self.shapes = []
        self.overlay = None

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def _add(self, kind: str, **attrs: Any) -> int:
        self.shapes.append(Shape(kind, attrs))
        return len(self.shapes) - 1

    def draw_rect(
        self,
        rect: Rect,
        *,
        fill: str,
        stroke: str = "none",
        stroke_width: float = 0.0,
        radius: float = 0.0,
        title: str | None = None,
    ) -> int:
        return self._add(
            "rect",
            rect=rect,
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
            radius=radius,
            title=title,
        )

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        color: str,
        font_size: float,
        font_weight: str = "normal",
        anchor: str = "middle",
        title: str | None = None,
    ) -> int:
        return self._add(
            "text",
            x=x,
            y=y,
            text=text,
            color=color,
            font_size=font_size,
            font_weight=font_weight,
            anchor=anchor,
            title=title,
        )

    def set_stroke(self, handle: int, stroke: str, stroke_width: float) -> None:
        attrs = self.shapes[handle].attrs
        attrs["stroke"] = stroke
        attrs["stroke_width"] = stroke_width

    def measure_text(
        self, lines: Sequence[str], font_size: float
    ) -> tuple[float, float]:
        longest = max((len(line) for line in lines), default=0)
        return longest * font_size * CHAR_WIDTH, len(lines) * font_size * LINE_HEIGHT

    def show_overlay(
        self,
        left: float,
        top: float,
        lines: Sequence[str],
        *,
        font_size: float,
        padding: float,
    ) -> None:
        self.overlay = Overlay(left, top, list(lines), font_size, padding)

    def hide_overlay(self) -> None:
        self.overlay = None


class MatplotlibSurface:
    """Agg-backed surface; one data unit is one pixel, y grows downward."""

    def __init__(
        self, width: float, height: float, dpi: int = 100, background: str = BACKGROUND
    ) -> None:
        self.width = width
        self.height = height
        self.dpi = dpi
        self.background = background
        self.fig = Figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        FigureCanvasAgg(self.fig)
        self.ax = self.fig.add_axes((0, 0, 1, 1))
        self._artists: list[Any] = []
        self._overlay: Any = None
        self._setup_axes()

    def _pt(self, px: float) -> float:
        return px * 72 / self.dpi

    def _setup_axes(self) -> None:
        self.fig.set_facecolor(self.background)
        self.ax.set_facecolor(self.background)
        self.ax.set_xlim(0, self.width)
        self.ax.set_ylim(self.height, 0)
        self.ax.set_axis_off()

    def clear(self) -> None:
        self.ax.cla()
        self._artists = []
        self._overlay = None
        self._setup_axes()

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.fig.set_size_inches(width / self.dpi, height / self.dpi)
        self._setup_axes()

    def draw_rect(
        self,
        rect: Rect,
        *,
        fill: str,
        stroke: str = "none",
        stroke_width: float = 0.0,
        radius: float = 0.0,
        title: str | None = None,
    ) -> int:
        r = min(radius, rect.width / 2, rect.height / 2)
        patch = FancyBboxPatch(
            (rect.x0, rect.y0),
            rect.width,
            rect.height,
            boxstyle=f"round,pad=0,rounding_size={r}" if r > 0 else "square,pad=0",
            facecolor=fill,
            edgecolor=stroke,
            linewidth=self._pt(stroke_width),
        )
        if title:
            patch.set_label(title)
        self.ax.add_patch(patch)
        self._artists.append(patch)
        return len(self._artists) - 1

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        color: str,
        font_size: float,
        font_weight: str = "normal",
        anchor: str = "middle",
        title: str | None = None,
    ) -> int:
        artist = self.ax.text(
            x,
            y,
            text,
            color=color,
            fontsize=self._pt(font_size),
            fontweight=font_weight,
            ha=_HALIGN.get(anchor, "center"),
            va="center",
            clip_on=True,
        )
        if title:
            artist.set_gid(title)
        self._artists.append(artist)
        return len(self._artists) - 1

    def set_stroke(self, handle: int, stroke: str, stroke_width: float) -> None:
        patch = self._artists[handle]
        patch.set_edgecolor(stroke)
        patch.set_linewidth(self._pt(stroke_width))

    def measure_text(
        self, lines: Sequence[str], font_size: float
    ) -> tuple[float, float]:
        sample = self.ax.text(
            0,
            0,
            "\n".join(lines),
            fontsize=self._pt(font_size),
            linespacing=LINE_HEIGHT,
        )
        extent = sample.get_window_extent(renderer=self.fig.canvas.get_renderer())
        sample.remove()
        return extent.width, extent.height

    def show_overlay(
        self,
        left: float,
        top: float,
        lines: Sequence[str],
        *,
        font_size: float,
        padding: float,
    ) -> None:
        self.hide_overlay()
        self._overlay = self.ax.text(
            left + padding,
            top + padding,
            "\n".join(lines),
            color=OVERLAY_TEXT,
            fontsize=self._pt(font_size),
            linespacing=LINE_HEIGHT,
            ha="left",
            va="top",
            zorder=10,
            bbox={
                "boxstyle": f"round,pad={self._pt(padding) / self._pt(font_size):.2f}",
                "facecolor": OVERLAY_FILL,
                "edgecolor": OVERLAY_STROKE,
            },
        )

    @property
    def overlay(self) -> Any:
        return self._overlay

    def hide_overlay(self) -> None:
        if self._overlay is not None:
            self._overlay.remove()
            self._overlay = None

    def save(self, path: Path) -> Path | None:
        """Write the figure; the format follows the suffix (``.png``, ``.svg``)."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.fig.savefig(
                path, dpi=self.dpi, facecolor=self.background, edgecolor="none"
            )
            return path
        except Exception:
            logger.warning("Failed to save chart to %s", path, exc_info=True)
            return None
