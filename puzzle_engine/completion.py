"""Proximity based completion checks for placed pieces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Sequence, Union

import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from .pieces import Piece

# Absolute per-axis distance, independent of piece size and display scale.
COMPLETION_TOLERANCE = 15.0


@dataclass
class PieceEvaluation:
    """Offset of a single piece from its solved position."""

    piece_id: str
    offset_x: float
    offset_y: float
    is_correct: bool

    def to_dict(self) -> Dict[str, Union[str, float, bool]]:
        return {
            "piece_id": self.piece_id,
            "offset_x": self.offset_x,
            "offset_y": self.offset_y,
            "is_correct": self.is_correct,
        }


@dataclass
class CompletionResult:
    """Aggregated completion state for every piece in a session."""

    correct_pieces: int
    total_pieces: int
    accuracy: float
    is_complete: bool
    per_piece: List[PieceEvaluation]

    def to_dict(self) -> dict:
        return {
            "correct_pieces": self.correct_pieces,
            "total_pieces": self.total_pieces,
            "accuracy": self.accuracy,
            "is_complete": self.is_complete,
            "per_piece": [piece.to_dict() for piece in self.per_piece],
        }


def _offsets(pieces: Sequence["Piece"]) -> np.ndarray:
    current = np.array([piece.current_position for piece in pieces], dtype=np.float64)
    original = np.array([piece.original_position for piece in pieces], dtype=np.float64)
    return np.abs(current - original)


def is_within_tolerance(
    pieces: Sequence["Piece"],
    tolerance: float = COMPLETION_TOLERANCE,
) -> bool:
    """Return True when every piece is strictly closer than ``tolerance`` on both axes.

    An empty sequence is vacuously complete; ``is_fixed`` plays no part.
    """

    if not pieces:
        return True
    return bool(np.all(_offsets(pieces) < tolerance))


def evaluate_completion(
    pieces: Sequence["Piece"],
    tolerance: float = COMPLETION_TOLERANCE,
) -> CompletionResult:
    if not pieces:
        return CompletionResult(
            correct_pieces=0,
            total_pieces=0,
            accuracy=1.0,
            is_complete=True,
            per_piece=[],
        )

    offsets = _offsets(pieces)
    within = np.all(offsets < tolerance, axis=1)
    per_piece = [
        PieceEvaluation(
            piece_id=piece.id,
            offset_x=float(offset[0]),
            offset_y=float(offset[1]),
            is_correct=bool(ok),
        )
        for piece, offset, ok in zip(pieces, offsets, within)
    ]
    correct = int(within.sum())
    total = len(per_piece)
    return CompletionResult(
        correct_pieces=correct,
        total_pieces=total,
        accuracy=correct / total,
        is_complete=correct == total,
        per_piece=per_piece,
    )


__all__ = [
    "COMPLETION_TOLERANCE",
    "CompletionResult",
    "PieceEvaluation",
    "evaluate_completion",
    "is_within_tolerance",
]
