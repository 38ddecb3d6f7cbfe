import math

from holdings_viz.config import (
    CORRELATION_STOPS,
    CORRELATION_TEXT,
    PERFORMANCE_STOPS,
    TREEMAP_TEXT,
)
from holdings_viz.output.colors import (
    NO_DATA_COLOR,
    color_for,
    interpolate_rgb,
    text_color_for,
    to_hex,
)


def _rgb(hex_color: str) -> tuple[int, int, int]:
    return tuple(int(hex_color[i : i + 2], 16) for i in (1, 3, 5))


def _is_monotonic(values: list[int]) -> bool:
    rising = all(a <= b for a, b in zip(values, values[1:]))
    falling = all(a >= b for a, b in zip(values, values[1:]))
    return rising or falling


class TestInterpolate:
    def test_endpoints(self):
        assert interpolate_rgb("#000000", "#ffffff", 0) == "#000000"
        assert interpolate_rgb("#000000", "#ffffff", 1) == "#ffffff"

    def test_midpoint(self):
        assert interpolate_rgb("#000000", "#ffffff", 0.5) == "#808080"

    def test_t_is_clamped(self):
        assert interpolate_rgb("#000000", "#ffffff", 3) == "#ffffff"

    def test_named_colors(self):
        assert to_hex("red") == "#ff0000"


class TestColorFor:
    def test_zero_is_neutral(self):
        assert color_for(0, PERFORMANCE_STOPS, 10) == PERFORMANCE_STOPS.neutral
        assert color_for(0.0, CORRELATION_STOPS, 1) == CORRELATION_STOPS.neutral

    def test_none_is_no_data_regardless_of_stops(self):
        assert color_for(None, PERFORMANCE_STOPS, 10) == NO_DATA_COLOR
        assert color_for(None, CORRELATION_STOPS, 1) == NO_DATA_COLOR

    def test_extremes_hit_stops(self):
        assert color_for(10, PERFORMANCE_STOPS, 10) == PERFORMANCE_STOPS.positive
        assert color_for(-10, PERFORMANCE_STOPS, 10) == PERFORMANCE_STOPS.negative
        assert color_for(1, CORRELATION_STOPS, 1) == CORRELATION_STOPS.positive
        assert color_for(-1, CORRELATION_STOPS, 1) == CORRELATION_STOPS.negative

    def test_clamping_saturates(self):
        def perf(v):
            return color_for(v, PERFORMANCE_STOPS, 10)

        assert perf(-12) == perf(-10)
        assert perf(50) == perf(10)
        assert color_for(5.0, CORRELATION_STOPS, 1) == CORRELATION_STOPS.positive

    def test_monotonic_channels(self):
        neg = [color_for(-10 + i * 0.5, PERFORMANCE_STOPS, 10) for i in range(21)]
        pos = [color_for(i * 0.5, PERFORMANCE_STOPS, 10) for i in range(21)]
        for side in (neg, pos):
            channels = list(zip(*(_rgb(c) for c in side)))
            assert all(_is_monotonic(list(ch)) for ch in channels)

    def test_pure(self):
        first = color_for(3.3, PERFORMANCE_STOPS, 10)
        color_for(-7, CORRELATION_STOPS, 1)
        assert color_for(3.3, PERFORMANCE_STOPS, 10) == first

    def test_known_correlation_value(self):
        # Halfway from amber (251, 191, 36) to red (239, 68, 68)
        assert _rgb(color_for(0.5, CORRELATION_STOPS, 1)) == (245, 130, 52)

    def test_zero_clamp_saturates_everything(self):
        assert color_for(0.1, PERFORMANCE_STOPS, 0) == PERFORMANCE_STOPS.positive

    def test_non_finite_is_no_data(self):
        for value in (math.nan, math.inf, -math.inf):
            assert color_for(value, PERFORMANCE_STOPS, 10) == NO_DATA_COLOR
            fg = text_color_for(value, True, 4, TREEMAP_TEXT)
            assert fg == TREEMAP_TEXT.no_data


class TestTextColorFor:
    def test_no_data(self):
        for value in (None, 0.9):
            fg = text_color_for(value, False, 0.5, CORRELATION_TEXT)
            assert fg == CORRELATION_TEXT.no_data

    def test_strong_value_uses_light(self):
        fg = text_color_for(-0.8, True, 0.5, CORRELATION_TEXT)
        assert fg == CORRELATION_TEXT.light

    def test_weak_value_uses_dark(self):
        assert text_color_for(0.2, True, 0.5, CORRELATION_TEXT) == CORRELATION_TEXT.dark
        assert text_color_for(0.5, True, 0.5, CORRELATION_TEXT) == CORRELATION_TEXT.dark

    def test_treemap_palette(self):
        assert text_color_for(6, True, 4, TREEMAP_TEXT) == TREEMAP_TEXT.light
        assert text_color_for(1, True, 4, TREEMAP_TEXT) == TREEMAP_TEXT.dark
