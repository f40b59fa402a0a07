"""Target rectangle geometry and the scatter layout for puzzle pieces."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .pieces import PieceRegistry

logger = logging.getLogger(__name__)

ZONE_TOP = "top"
ZONE_BOTTOM = "bottom"
ZONE_LEFT = "left"
ZONE_RIGHT = "right"
ZONES = (ZONE_TOP, ZONE_BOTTOM, ZONE_LEFT, ZONE_RIGHT)

Range = Tuple[float, float]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def intersects(self, other: "Rect") -> bool:
        return not (
            self.right <= other.x
            or self.x >= other.right
            or self.bottom <= other.y
            or self.y >= other.bottom
        )

    def contains(self, other: "Rect") -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


def compute_target_rect(
    canvas_width: float,
    canvas_height: float,
    image_size: Tuple[float, float],
    scale: float,
) -> Rect:
    """Centre the scaled image on the canvas."""

    width = image_size[0] * scale
    height = image_size[1] * scale
    return Rect(
        x=(canvas_width - width) / 2,
        y=(canvas_height - height) / 2,
        width=width,
        height=height,
    )


def zone_ranges(
    zone: str,
    canvas_width: float,
    canvas_height: float,
    target: Rect,
    piece_width: float,
    piece_height: float,
) -> Tuple[Range, Range]:
    """Return the ``(x_range, y_range)`` of top-left corners keeping a piece inside ``zone``.

    A range whose upper bound is below its lower bound means the piece does
    not fit in that band.
    """

    full_x = (0.0, canvas_width - piece_width)
    full_y = (0.0, canvas_height - piece_height)
    if zone == ZONE_TOP:
        return full_x, (0.0, target.y - piece_height)
    if zone == ZONE_BOTTOM:
        return full_x, (target.bottom, canvas_height - piece_height)
    if zone == ZONE_LEFT:
        return (0.0, target.x - piece_width), full_y
    if zone == ZONE_RIGHT:
        return (target.right, canvas_width - piece_width), full_y
    raise ValueError(f"Unknown scatter zone: {zone!r}")


def choose_zone(rng: random.Random) -> str:
    index = min(int(rng.random() * len(ZONES)), len(ZONES) - 1)
    return ZONES[index]


def scatter_position(
    canvas_width: float,
    canvas_height: float,
    target: Rect,
    piece_width: float,
    piece_height: float,
    rng: random.Random,
) -> Tuple[str, float, float]:
    """Draw a random top-left corner for one piece outside ``target``.

    Returns the zone used, or ``"canvas"`` when the chosen band cannot hold the
    piece and the position was drawn anywhere on the canvas instead.
    """

    zone = choose_zone(rng)
    (x_lo, x_hi), (y_lo, y_hi) = zone_ranges(
        zone, canvas_width, canvas_height, target, piece_width, piece_height
    )
    if x_hi < x_lo or y_hi < y_lo:
        logger.debug(
            "Zone %s cannot hold a %sx%s piece, falling back to the full canvas",
            zone,
            piece_width,
            piece_height,
        )
        x = rng.uniform(0.0, max(0.0, canvas_width - piece_width))
        y = rng.uniform(0.0, max(0.0, canvas_height - piece_height))
        return "canvas", x, y
    return zone, rng.uniform(x_lo, x_hi), rng.uniform(y_lo, y_hi)


class LayoutEngine:
    """Scatter pieces around the target rectangle and relay drag updates."""

    def __init__(
        self,
        registry: PieceRegistry,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.registry = registry
        self._rng = rng if rng is not None else random.Random(seed)

    def shuffle(
        self,
        canvas_width: float,
        canvas_height: float,
        scale: float,
        *,
        image_size: Optional[Tuple[float, float]],
    ) -> None:
        if image_size is None:
            logger.debug("No image loaded, nothing to scatter against")
            return

        target = compute_target_rect(canvas_width, canvas_height, image_size, scale)
        fallbacks = 0
        for piece in self.registry.pieces:
            zone, x, y = scatter_position(
                canvas_width,
                canvas_height,
                target,
                piece.width,
                piece.height,
                self._rng,
            )
            if zone == "canvas":
                fallbacks += 1
            self.registry.update_position(piece.id, x, y)
        logger.info(
            "Scattered %d pieces around target %s (%d fallback placements)",
            len(self.registry),
            target.to_dict(),
            fallbacks,
        )

    def update_piece_position(self, piece_id: str, x: float, y: float) -> None:
        self.registry.update_position(piece_id, x, y)

    def update_piece_status(self, piece_id: str, fixed: bool) -> None:
        self.registry.update_status(piece_id, fixed)


__all__ = [
    "LayoutEngine",
    "Rect",
    "ZONES",
    "ZONE_BOTTOM",
    "ZONE_LEFT",
    "ZONE_RIGHT",
    "ZONE_TOP",
    "choose_zone",
    "compute_target_rect",
    "scatter_position",
    "zone_ranges",
]
