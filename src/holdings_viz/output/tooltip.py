from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from holdings_viz.config import TooltipConfig
from holdings_viz.models.common import CanvasSize, Point, TooltipPlacement, Viewport
from holdings_viz.models.holdings import WeightedItem
from holdings_viz.output.formatters import fmt_currency, fmt_pct, fmt_signed_currency
from holdings_viz.output.surface import Surface

logger = logging.getLogger(__name__)


def place(
    pointer: Point,
    content: CanvasSize,
    viewport: Viewport,
    config: TooltipConfig | None = None,
) -> TooltipPlacement:
    """Position a tooltip next to the pointer without leaving the viewport.

    The default spot is offset right of and above the pointer. Crossing the
    right edge flips it to the pointer's left, crossing the bottom edge
    (scroll aware) flips it above. The result is then clamped so the box
    stays on screen; oversized content sits flush with the left/top edge.
    """
    cfg = config or TooltipConfig()
    left = pointer.x + cfg.offset_x
    top = pointer.y + cfg.offset_y

    if left + content.width > viewport.width:
        left = pointer.x - content.width - cfg.flip_gap_x
    if top + content.height > viewport.height + viewport.scroll_y:
        top = pointer.y - content.height - cfg.flip_gap_y

    left = max(0.0, min(left, viewport.width - content.width))
    bottom = viewport.scroll_y + viewport.height
    top = max(viewport.scroll_y, min(top, bottom - content.height))
    return TooltipPlacement(left=left, top=top)


def tooltip_lines(item: WeightedItem, currency: str = "₩") -> list[str]:
    aux = item.auxiliary
    price = aux.get("current_price")
    change = aux.get("price_change")
    invested = aux.get("investment_amount", item.weight)
    lines = [
        f"{item.key} ({item.display_name})",
        f"Return: {fmt_pct(item.metric)}",
        f"Invested: {fmt_currency(invested, currency)}",
        f"Price: {fmt_currency(price, currency)}"
        f" ({fmt_signed_currency(change, currency)})",
        f"Sector: {aux.get('sector') or 'UNKNOWN'}",
    ]
    return lines


class HoverState(StrEnum):
    IDLE = "idle"
    HOVERING = "hovering"


@dataclass(frozen=True)
class HoverTarget:
    key: str
    handle: int


class TooltipController:
    """Hover state machine owning the single tooltip on a surface.

    ``Idle`` -> ``Hovering(key)`` on enter, back to ``Idle`` on leave. The
    tooltip exists exactly while hovering; entering a new cell while another
    is hovered tears the old one down first.
    """

    def __init__(
        self,
        surface: Surface,
        config: TooltipConfig | None = None,
        currency: str = "₩",
    ) -> None:
        self.surface = surface
        self.config = config or TooltipConfig()
        self.currency = currency
        self.target: HoverTarget | None = None
        self.placement: TooltipPlacement | None = None
        self._restore: tuple[str, float] | None = None

    @property
    def state(self) -> HoverState:
        return HoverState.IDLE if self.target is None else HoverState.HOVERING

    @property
    def hovered_key(self) -> str | None:
        return self.target.key if self.target else None

    def enter(
        self,
        item: WeightedItem,
        handle: int,
        pointer: Point,
        viewport: Viewport,
        *,
        emphasis: tuple[str, float],
        normal: tuple[str, float],
    ) -> TooltipPlacement:
        if self.target is not None:
            self.leave()

        self.surface.set_stroke(handle, *emphasis)
        self._restore = normal

        lines = tooltip_lines(item, self.currency)
        text_w, text_h = self.surface.measure_text(lines, self.config.font_size)
        pad = self.config.padding
        content = CanvasSize(
            min(text_w + 2 * pad, self.config.max_width), text_h + 2 * pad
        )
        self.placement = place(pointer, content, viewport, self.config)
        self.surface.show_overlay(
            self.placement.left,
            self.placement.top,
            lines,
            font_size=self.config.font_size,
            padding=pad,
        )
        self.target = HoverTarget(item.key, handle)
        logger.debug("Hovering %s at %s", item.key, self.placement)
        return self.placement

    def leave(self) -> None:
        if self.target is None:
            return
        if self._restore is not None:
            self.surface.set_stroke(self.target.handle, *self._restore)
        self.surface.hide_overlay()
        self.target = None
        self.placement = None
        self._restore = None

    def reset(self) -> None:
        """Forget hover state after the surface was cleared."""
        self.surface.hide_overlay()
        self.target = None
        self.placement = None
        self._restore = None
