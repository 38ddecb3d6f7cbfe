from holdings_viz.models.common import (
    CanvasSize,
    ColorStop,
    Point,
    Rect,
    RenderStatus,
    TextPalette,
    TooltipPlacement,
    Viewport,
    VizTarget,
)
from holdings_viz.models.correlation import CorrelationData
from holdings_viz.models.holdings import PortfolioTreemap, TreemapCell, WeightedItem

__all__ = [
    "CanvasSize",
    "ColorStop",
    "CorrelationData",
    "Point",
    "PortfolioTreemap",
    "Rect",
    "RenderStatus",
    "TextPalette",
    "TooltipPlacement",
    "TreemapCell",
    "Viewport",
    "VizTarget",
    "WeightedItem",
]
