from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class RenderStatus(StrEnum):
    RENDERED = "rendered"
    EMPTY = "empty"


class VizTarget(StrEnum):
    TREEMAP = "treemap"
    CORRELATION = "correlation"


@dataclass(frozen=True)
class CanvasSize:
    width: float
    height: float


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float
    scroll_y: float = 0.0


@dataclass(frozen=True)
class TooltipPlacement:
    left: float
    top: float


@dataclass(frozen=True)
class Rect:
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point((self.x0 + self.x1) / 2, (self.y0 + self.y1) / 2)

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1

    def intersection_area(self, other: Rect) -> float:
        w = min(self.x1, other.x1) - max(self.x0, other.x0)
        h = min(self.y1, other.y1) - max(self.y0, other.y0)
        if w <= 0 or h <= 0:
            return 0.0
        return w * h

    def inset(self, amount: float) -> Rect:
        """Shrink each edge by ``amount``, collapsing onto the centre line
        instead of inverting."""
        x0, x1 = self.x0 + amount, self.x1 - amount
        y0, y1 = self.y0 + amount, self.y1 - amount
        if x1 < x0:
            x0 = x1 = (self.x0 + self.x1) / 2
        if y1 < y0:
            y0 = y1 = (self.y0 + self.y1) / 2
        return Rect(x0, y0, x1, y1)


class ColorStop(BaseModel):
    """Three-point diverging gradient."""

    model_config = ConfigDict(frozen=True)

    negative: str
    neutral: str
    positive: str


class TextPalette(BaseModel):
    model_config = ConfigDict(frozen=True)

    light: str
    dark: str
    no_data: str
