from pydantic import BaseModel, Field

from holdings_viz.models.common import ColorStop, TextPalette

PERFORMANCE_STOPS = ColorStop(negative="#dc3545", neutral="#4a5568", positive="#00f5a0")
CORRELATION_STOPS = ColorStop(negative="#22c55e", neutral="#fbbf24", positive="#ef4444")

# Treemap cells sit on dark fills, so both tiers stay light
TREEMAP_TEXT = TextPalette(light="#ffffff", dark="#f2f2f2", no_data="#e6e6e6")
CORRELATION_TEXT = TextPalette(light="#ffffff", dark="#000000", no_data="#e5e7eb")

PERIOD_LABELS: dict[str, str] = {
    "1D": "1 day",
    "1W": "1 week",
    "1M": "1 month",
    "MTD": "Month to date",
    "3M": "3 months",
    "6M": "6 months",
    "1Y": "1 year",
    "ALL": "All time",
}


class TreemapConfig(BaseModel):
    height: float = 400
    padding: float = 3
    corner_radius: float = 6
    min_weight: float = 1.0

    clamp_magnitude: float = 10.0
    stops: ColorStop = PERFORMANCE_STOPS
    text_palette: TextPalette = TREEMAP_TEXT
    text_threshold: float = 4.0

    label_min_width: float = 40
    label_full_width: float = 60
    label_abbrev_chars: int = 3
    secondary_min_width: float = 50
    secondary_min_height: float = 35

    primary_font_divisor: float = 6
    primary_font_range: tuple[float, float] = (9, 14)
    secondary_font_divisor: float = 7
    secondary_font_range: tuple[float, float] = (8, 12)
    metric_decimals: int = 2

    stroke: str = "#ffffff1a"
    stroke_width: float = 1
    hover_stroke: str = "#ffffff"
    hover_stroke_width: float = 2


class CorrelationConfig(BaseModel):
    clamp_magnitude: float = 1.0
    stops: ColorStop = CORRELATION_STOPS
    text_palette: TextPalette = CORRELATION_TEXT
    text_threshold: float = 0.5

    header_max_chars: int = 6
    ellipsis: str = ".."
    diagonal_glyph: str = "-"
    cell_height: float = 32
    header_width: float = 72
    font_size: float = 11


class TooltipConfig(BaseModel):
    offset_x: float = 15
    offset_y: float = -10
    flip_gap_x: float = 15
    flip_gap_y: float = 10
    font_size: float = 13
    padding: float = 16
    line_spacing: float = 1.5
    max_width: float = 280


class DashboardConfig(BaseModel):
    api_url: str = "http://localhost:8080/api"
    api_token: str | None = None
    timeout: float = 10.0

    resize_debounce_ms: int = 250
    currency_symbol: str = "₩"
    viewport_height: float = 900

    treemap: TreemapConfig = Field(default_factory=TreemapConfig)
    correlation: CorrelationConfig = Field(default_factory=CorrelationConfig)
    tooltip: TooltipConfig = Field(default_factory=TooltipConfig)
