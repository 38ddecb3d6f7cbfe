import math
from functools import lru_cache

from matplotlib.colors import to_rgb

from holdings_viz.models.common import ColorStop, TextPalette

NO_DATA_COLOR = "#4a5568"


@lru_cache(maxsize=256)
def _rgb255(color: str) -> tuple[int, int, int]:
    r, g, b = to_rgb(color)
    return round(r * 255), round(g * 255), round(b * 255)


def to_hex(color: str) -> str:
    """Normalise any matplotlib colour to lowercase ``#rrggbb``."""
    return "#{:02x}{:02x}{:02x}".format(*_rgb255(color))


def interpolate_rgb(start: str, end: str, t: float) -> str:
    """Linear interpolation in 8-bit RGB space, ``t`` clamped to [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    s = _rgb255(start)
    e = _rgb255(end)
    return "#{:02x}{:02x}{:02x}".format(
        *(round(a + (b - a) * t) for a, b in zip(s, e))
    )


def color_for(value: float | None, stops: ColorStop, clamp_magnitude: float) -> str:
    """Diverging colour for ``value``; saturates beyond ``clamp_magnitude``."""
    if value is None or not math.isfinite(value):
        return NO_DATA_COLOR
    if value == 0:
        return to_hex(stops.neutral)
    if clamp_magnitude <= 0:
        return to_hex(stops.positive if value > 0 else stops.negative)

    clamped = min(max(value, -clamp_magnitude), clamp_magnitude)
    t = abs(clamped) / clamp_magnitude
    target = stops.negative if clamped < 0 else stops.positive
    return interpolate_rgb(stops.neutral, target, t)


def text_color_for(
    value: float | None,
    has_data: bool,
    threshold: float,
    palette: TextPalette,
) -> str:
    """Foreground for a cell, from magnitude and data presence only."""
    if not has_data or value is None or not math.isfinite(value):
        return palette.no_data
    return palette.light if abs(value) > threshold else palette.dark
