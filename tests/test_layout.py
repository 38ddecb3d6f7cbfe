import math

import numpy as np

from holdings_viz.analysis.layout import layout, layout_items, squarify, worst_ratio
from holdings_viz.models.common import CanvasSize, Rect
from holdings_viz.models.holdings import WeightedItem


def _items(weights: list[float]) -> list[WeightedItem]:
    return [
        WeightedItem(key=f"S{i:02d}", display_name=f"S{i:02d}", weight=w)
        for i, w in enumerate(weights)
    ]


def _random_weights(n: int, seed: int) -> list[float]:
    rng = np.random.default_rng(seed)
    return [float(w) for w in rng.lognormal(mean=10, sigma=1.5, size=n)]


class TestWorstRatio:
    def test_square_cell(self):
        assert worst_ratio([16.0], 4.0) == 1.0

    def test_empty_row(self):
        assert worst_ratio([], 10.0) == math.inf

    def test_zero_side(self):
        assert worst_ratio([5.0], 0.0) == math.inf

    def test_thin_row_is_worse(self):
        assert worst_ratio([16.0, 1.0], 4.0) > worst_ratio([16.0], 4.0)


class TestSquarify:
    def test_empty(self):
        assert squarify([], Rect(0, 0, 10, 10)) == []

    def test_cells_follow_input_order(self):
        weights = [6, 6, 4, 3, 2, 2, 1]
        rects = squarify(weights, Rect(0, 0, 6, 4))
        for w, r in zip(weights, rects):
            assert math.isclose(r.area, w)
        assert math.isclose(sum(r.area for r in rects), 24.0)

    def test_degenerate_canvas(self):
        rects = squarify([3, 2, 1], Rect(0, 0, 100, 0))
        assert len(rects) == 3
        assert all(r.area == 0 for r in rects)


class TestLayout:
    def test_zero_items(self):
        assert layout([], CanvasSize(800, 400), 3) == {}

    def test_single_item_fills_canvas_minus_padding(self):
        rects = layout(_items([42]), CanvasSize(800, 400), 4)
        r = rects["S00"]
        assert r == Rect(2, 2, 798, 398)
        assert r.width == 796
        assert r.height == 396

    def test_three_items_example(self):
        canvas = CanvasSize(800, 400)
        pairs = layout_items(_items([50, 30, 20]), canvas, 3)
        total = canvas.width * canvas.height

        # Heaviest item is laid first, against the left edge
        first_item, first_rect = pairs[0]
        assert first_item.key == "S00"
        assert math.isclose(first_rect.x0, 1.5)

        for item, rect in pairs:
            assert abs(rect.area / total - item.weight / 100) < 0.05

    def test_area_conservation_without_padding(self):
        canvas = CanvasSize(1024, 400)
        weights = _random_weights(25, seed=7)
        rects = layout(_items(weights), canvas)
        total_w = sum(weights)
        total_a = canvas.width * canvas.height

        assert math.isclose(sum(r.area for r in rects.values()), total_a, rel_tol=1e-9)
        for item in _items(weights):
            share = rects[item.key].area / total_a
            assert abs(share - item.weight / total_w) < 1e-9

    def test_no_overlap_and_inside_canvas(self):
        canvas = CanvasSize(900, 400)
        rects = list(layout(_items(_random_weights(30, seed=3)), canvas, 3).values())
        for i, a in enumerate(rects):
            assert a.x0 >= 0 and a.y0 >= 0
            assert a.x1 <= canvas.width + 1e-9 and a.y1 <= canvas.height + 1e-9
            for b in rects[i + 1 :]:
                assert a.intersection_area(b) < 1e-6

    def test_padding_never_inverts(self):
        weights = [1000] + [1] * 40
        rects = layout(_items(weights), CanvasSize(300, 200), 6)
        for r in rects.values():
            assert r.x1 >= r.x0
            assert r.y1 >= r.y0

    def test_equal_weights_give_equal_areas(self):
        canvas = CanvasSize(600, 600)
        rects = layout(_items([10] * 9), canvas)
        areas = [r.area for r in rects.values()]
        assert max(areas) - min(areas) < 1e-6
        # Squarified cells stay close to square
        for r in rects.values():
            ratio = max(r.width, r.height) / min(r.width, r.height)
            assert ratio < 3

    def test_deterministic_tie_order(self):
        items = [
            WeightedItem(key="B", display_name="B", weight=5),
            WeightedItem(key="A", display_name="A", weight=5),
        ]
        first = layout(items, CanvasSize(200, 100))
        second = layout(list(reversed(items)), CanvasSize(200, 100))
        assert first == second
        assert list(first) == ["A", "B"]

    def test_duplicate_keys_keep_first(self):
        items = [
            WeightedItem(key="X", display_name="X", weight=10),
            WeightedItem(key="X", display_name="X", weight=1),
        ]
        assert len(layout(items, CanvasSize(100, 100))) == 1
        assert len(layout_items(items, CanvasSize(100, 100))) == 2

    def test_unusable_weights_stay_on_canvas(self):
        items = [
            WeightedItem(key="A", display_name="A", weight=5),
            WeightedItem(key="B", display_name="B", weight=-1),
            WeightedItem(key="C", display_name="C", weight=0),
            WeightedItem(key="D", display_name="D", weight=math.nan),
        ]
        rects = layout(items, CanvasSize(100, 100))
        assert set(rects) == {"A", "B", "C", "D"}
        for r in rects.values():
            assert 0 <= r.x0 <= r.x1 <= 100
            assert 0 <= r.y0 <= r.y1 <= 100
        # B, C and D each count as one unit next to A's five
        assert math.isclose(rects["A"].area, 10_000 * 5 / 8)
        assert math.isclose(rects["B"].area, 10_000 / 8)
