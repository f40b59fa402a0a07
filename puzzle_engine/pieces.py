"""Puzzle piece model and the registry that owns a session's pieces."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .completion import (
    COMPLETION_TOLERANCE,
    CompletionResult,
    evaluate_completion,
    is_within_tolerance,
)

logger = logging.getLogger(__name__)

Position = Tuple[float, float]


@dataclass
class Piece:
    """One fragment of the source image.

    ``visual`` is owned by the renderer; only its ``width``/``height`` are read
    here. ``original_position`` is the solved location on the canvas and is not
    touched after the registry is populated.
    """

    id: str
    visual: Any
    original_position: Position
    current_position: Position
    is_fixed: bool = False

    @property
    def width(self) -> float:
        return self.visual.width

    @property
    def height(self) -> float:
        return self.visual.height

    @property
    def original_x(self) -> float:
        return self.original_position[0]

    @property
    def original_y(self) -> float:
        return self.original_position[1]

    @property
    def current_x(self) -> float:
        return self.current_position[0]

    @property
    def current_y(self) -> float:
        return self.current_position[1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "width": self.width,
            "height": self.height,
            "original_position": list(self.original_position),
            "current_position": list(self.current_position),
            "is_fixed": self.is_fixed,
        }


class PieceRegistry:
    """Single writer for the pieces of the current puzzle."""

    def __init__(
        self,
        pieces: Optional[Iterable[Piece]] = None,
        *,
        tolerance: float = COMPLETION_TOLERANCE,
    ) -> None:
        self.tolerance = tolerance
        self._pieces: List[Piece] = list(pieces) if pieces is not None else []

    @property
    def pieces(self) -> Tuple[Piece, ...]:
        return tuple(self._pieces)

    def __len__(self) -> int:
        return len(self._pieces)

    def set_pieces(self, new_pieces: Iterable[Piece]) -> None:
        """Replace the whole collection; ids are trusted to be unique."""

        self._pieces = list(new_pieces)
        logger.debug("Registry now holds %d pieces", len(self._pieces))

    def find_by_id(self, piece_id: str) -> Optional[Piece]:
        for piece in self._pieces:
            if piece.id == piece_id:
                return piece
        return None

    def update_position(self, piece_id: str, x: float, y: float) -> None:
        piece = self.find_by_id(piece_id)
        if piece is None:
            logger.debug("Ignoring position update for unknown piece %r", piece_id)
            return
        piece.current_position = (x, y)

    def update_status(self, piece_id: str, fixed: bool) -> None:
        piece = self.find_by_id(piece_id)
        if piece is None:
            logger.debug("Ignoring status update for unknown piece %r", piece_id)
            return
        piece.is_fixed = bool(fixed)

    def is_complete(self) -> bool:
        """Recomputed on every call; an empty registry counts as complete."""

        return is_within_tolerance(self._pieces, self.tolerance)

    def evaluate(self) -> CompletionResult:
        return evaluate_completion(self._pieces, self.tolerance)


__all__ = ["Piece", "PieceRegistry", "Position"]
