"""State and layout engine for drag-and-drop jigsaw puzzles."""

__all__ = [
    "AbstractImageLoader",
    "AbstractPhotoSource",
    "AbstractPieceSlicer",
    "Piece",
    "PieceRegistry",
    "COMPLETION_TOLERANCE",
    "CompletionResult",
    "PieceEvaluation",
    "LayoutEngine",
    "Rect",
    "compute_target_rect",
    "scatter_position",
    "GridSlicer",
    "HttpImageLoader",
    "UnsplashPhotoSource",
    "PicsumPhotoSource",
    "ImageLoadError",
    "PhotoSourceError",
    "LoadRequest",
    "PuzzleSession",
]

from .base import AbstractImageLoader, AbstractPhotoSource, AbstractPieceSlicer
from .pieces import Piece, PieceRegistry
from .completion import COMPLETION_TOLERANCE, CompletionResult, PieceEvaluation
from .layout import LayoutEngine, Rect, compute_target_rect, scatter_position
from .slicer import GridSlicer
from .loader import (
    HttpImageLoader,
    UnsplashPhotoSource,
    PicsumPhotoSource,
    ImageLoadError,
    PhotoSourceError,
)
from .session import LoadRequest, PuzzleSession
