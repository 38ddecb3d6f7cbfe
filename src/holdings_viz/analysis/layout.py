"""Squarified treemap layout.

Partitions a canvas into one rectangle per item with area proportional to the
item's weight, preferring near-square cells over thin slivers (Bruls, Huizing
and van Wijk, "Squarified Treemaps").
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from holdings_viz.models.common import CanvasSize, Rect
from holdings_viz.models.holdings import MIN_WEIGHT, WeightedItem

logger = logging.getLogger(__name__)


def worst_ratio(row: Sequence[float], side: float) -> float:
    """Worst aspect ratio of a row of areas laid along ``side``."""
    if not row or side <= 0:
        return math.inf
    total = sum(row)
    if total <= 0 or min(row) <= 0:
        return math.inf
    side_sq = side * side
    total_sq = total * total
    return max(side_sq * max(row) / total_sq, total_sq / (side_sq * min(row)))


def _place_row(
    row: Sequence[float],
    row_weight: float,
    remaining_weight: float,
    bounds: Rect,
    last_row: bool,
) -> tuple[list[Rect], Rect]:
    """Lay a row along the shorter side of ``bounds``.

    Returns the row's cells and the rectangle left over for the next row.
    """
    x0, y0, x1, y1 = bounds.x0, bounds.y0, bounds.x1, bounds.y1
    width, height = bounds.width, bounds.height
    share = 1.0 if last_row else row_weight / remaining_weight
    cells: list[Rect] = []

    if width >= height:
        # Vertical strip on the left, cells stacked top to bottom
        strip_x1 = x1 if last_row else x0 + width * share
        y = y0
        for i, w in enumerate(row):
            y_next = y1 if i == len(row) - 1 else y + height * w / row_weight
            cells.append(Rect(x0, y, strip_x1, y_next))
            y = y_next
        rest = Rect(strip_x1, y0, x1, y1)
    else:
        # Horizontal strip on top, cells left to right
        strip_y1 = y1 if last_row else y0 + height * share
        x = x0
        for i, w in enumerate(row):
            x_next = x1 if i == len(row) - 1 else x + width * w / row_weight
            cells.append(Rect(x, y0, x_next, strip_y1))
            x = x_next
        rest = Rect(x0, strip_y1, x1, y1)

    return cells, rest


def squarify(weights: Sequence[float], bounds: Rect) -> list[Rect]:
    """Tile ``bounds`` for weights already sorted in descending order.

    Cells are returned in input order.
    """
    if not weights:
        return []
    remaining_weight = float(sum(weights))
    if remaining_weight <= 0:
        return [Rect(bounds.x0, bounds.y0, bounds.x0, bounds.y0) for _ in weights]

    scale = bounds.area / remaining_weight
    rects: list[Rect] = []
    rest = bounds
    i = 0
    n = len(weights)

    while i < n:
        side = min(rest.width, rest.height)
        row = [weights[i]]
        worst = worst_ratio([weights[i] * scale], side)
        i += 1
        while i < n:
            candidate = row + [weights[i]]
            ratio = worst_ratio([w * scale for w in candidate], side)
            if ratio > worst:
                break
            row = candidate
            worst = ratio
            i += 1

        row_weight = sum(row)
        cells, rest = _place_row(row, row_weight, remaining_weight, rest, i == n)
        rects.extend(cells)
        remaining_weight -= row_weight

    return rects


def _usable_weight(weight: float) -> float:
    if not math.isfinite(weight) or weight <= 0:
        return MIN_WEIGHT
    return weight


def layout_items(
    items: Sequence[WeightedItem], canvas: CanvasSize, padding: float = 0.0
) -> list[tuple[WeightedItem, Rect]]:
    """Squarified layout keeping one entry per item, heaviest first.

    Non-positive or non-finite weights count as ``MIN_WEIGHT``.
    """
    if not items:
        return []
    weighted = [(_usable_weight(item.weight), item) for item in items]
    floored = sum(1 for w, item in weighted if w != item.weight)
    if floored:
        logger.debug("Floored %d unusable treemap weights to %s", floored, MIN_WEIGHT)
    weighted.sort(key=lambda pair: (-pair[0], pair[1].key))
    bounds = Rect(0.0, 0.0, max(canvas.width, 0.0), max(canvas.height, 0.0))
    tiles = squarify([w for w, _ in weighted], bounds)
    inset = max(padding, 0.0) / 2
    return [(item, tile.inset(inset)) for (_, item), tile in zip(weighted, tiles)]


def layout(
    items: Sequence[WeightedItem], canvas: CanvasSize, padding: float = 0.0
) -> dict[str, Rect]:
    """Map each item key to its cell rectangle."""
    result: dict[str, Rect] = {}
    for item, rect in layout_items(items, canvas, padding):
        if item.key in result:
            logger.warning("Duplicate treemap key %s, keeping the first", item.key)
            continue
        result[item.key] = rect
    return result
