"""Grid slicer that cuts a loaded image into rectangular puzzle pieces."""

from __future__ import annotations

import logging
from typing import List

from PIL import Image

from .base import AbstractPieceSlicer
from .layout import compute_target_rect
from .pieces import Piece

logger = logging.getLogger(__name__)


class GridSlicer(AbstractPieceSlicer):
    """Cut the displayed image into ``rows x cols`` tiles."""

    def __init__(self, *, rows: int = 3, cols: int = 3) -> None:
        if rows < 1 or cols < 1:
            raise ValueError("rows and cols must be at least 1")
        self.rows = rows
        self.cols = cols

    def slice(
        self,
        image: Image.Image,
        *,
        canvas_width: float,
        canvas_height: float,
        scale: float,
    ) -> List[Piece]:
        if scale <= 0:
            raise ValueError("scale must be positive")
        target = compute_target_rect(canvas_width, canvas_height, image.size, scale)
        display_size = (
            max(self.cols, round(image.width * scale)),
            max(self.rows, round(image.height * scale)),
        )
        displayed = image.convert("RGBA").resize(display_size, Image.Resampling.LANCZOS)

        x_edges = self._compute_axis_edges(displayed.width, self.cols)
        y_edges = self._compute_axis_edges(displayed.height, self.rows)

        pieces: List[Piece] = []
        for row in range(self.rows):
            for col in range(self.cols):
                left, right = x_edges[col], x_edges[col + 1]
                top, bottom = y_edges[row], y_edges[row + 1]
                tile = displayed.crop((left, top, right, bottom))
                solved = (target.x + left, target.y + top)
                pieces.append(
                    Piece(
                        id=f"{row}-{col}",
                        visual=tile,
                        original_position=solved,
                        current_position=solved,
                    )
                )
        logger.debug(
            "Sliced %sx%s image into %d pieces", displayed.width, displayed.height, len(pieces)
        )
        return pieces

    @staticmethod
    def _compute_axis_edges(size: int, segments: int) -> List[int]:
        return [round(i * size / segments) for i in range(segments + 1)]


__all__ = ["GridSlicer"]
