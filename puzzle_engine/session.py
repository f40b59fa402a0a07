"""Puzzle session state: image pipeline, pieces, layout and completion."""

from __future__ import annotations

import argparse
import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .base import AbstractImageLoader, AbstractPhotoSource, AbstractPieceSlicer
from .completion import COMPLETION_TOLERANCE, CompletionResult
from .layout import LayoutEngine
from .loader import DEFAULT_TIMEOUT, HttpImageLoader, PhotoSourceError
from .pieces import Piece, PieceRegistry
from .slicer import GridSlicer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadRequest:
    """Token identifying one image load; only the newest one may install its result."""

    token: int
    url: str


class PuzzleSession:
    """Owned state for one play session.

    Create one per UI and pass it to whatever needs it. Loading a new image
    replaces the piece registry, so slicing and ``set_pieces`` must follow.
    """

    def __init__(
        self,
        *,
        loader: Optional[AbstractImageLoader] = None,
        photo_source: Optional[AbstractPhotoSource] = None,
        slicer: Optional[AbstractPieceSlicer] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        tolerance: float = COMPLETION_TOLERANCE,
    ) -> None:
        self.loader = loader
        self.photo_source = photo_source
        self.slicer = slicer
        self.tolerance = tolerance
        self._rng = rng if rng is not None else random.Random(seed)

        self.image: Any = None
        self.image_url: Optional[str] = None
        self.is_image_loading = False
        self.is_game_started = False
        self._generation = 0
        self._reset_registry()

    def _reset_registry(self) -> None:
        self.registry = PieceRegistry(tolerance=self.tolerance)
        self.layout = LayoutEngine(self.registry, rng=self._rng)

    # ------------------------------------------------------------------
    # Pieces and layout

    @property
    def pieces(self) -> Tuple[Piece, ...]:
        return self.registry.pieces

    @property
    def is_complete(self) -> bool:
        return self.registry.is_complete()

    @property
    def image_size(self) -> Optional[Tuple[int, int]]:
        if self.image is None:
            return None
        return (self.image.width, self.image.height)

    def completion(self) -> CompletionResult:
        return self.registry.evaluate()

    def set_pieces(self, pieces: Iterable[Piece]) -> None:
        """Install ``pieces``; any image load still in flight is superseded."""

        if self.is_image_loading:
            logger.debug("Superseding in-flight image load for %s", self.image_url)
            self._generation += 1
            self.is_image_loading = False
        self.registry.set_pieces(pieces)

    def shuffle(self, canvas_width: float, canvas_height: float, scale: float) -> None:
        self.layout.shuffle(canvas_width, canvas_height, scale, image_size=self.image_size)

    def update_piece_position(self, piece_id: str, x: float, y: float) -> None:
        self.layout.update_piece_position(piece_id, x, y)

    def update_piece_status(self, piece_id: str, fixed: bool) -> None:
        self.layout.update_piece_status(piece_id, fixed)

    def prepare_pieces(self, canvas_width: float, canvas_height: float, scale: float) -> List[Piece]:
        """Slice the loaded image and install the resulting pieces."""

        if self.image is None:
            return []
        if self.slicer is None:
            raise RuntimeError("No piece slicer configured for this session")
        pieces = self.slicer.slice(
            self.image,
            canvas_width=canvas_width,
            canvas_height=canvas_height,
            scale=scale,
        )
        self.set_pieces(pieces)
        return pieces

    def start_game(self, canvas_width: float, canvas_height: float, scale: float) -> None:
        if self.image is None:
            return
        self.shuffle(canvas_width, canvas_height, scale)
        self.is_game_started = True

    # ------------------------------------------------------------------
    # Image pipeline

    def begin_load(self, url: str) -> LoadRequest:
        self._generation += 1
        self.image_url = url
        self.is_image_loading = True
        return LoadRequest(token=self._generation, url=url)

    def is_current(self, request: LoadRequest) -> bool:
        return request.token == self._generation

    def complete_load(self, request: LoadRequest, image: Any) -> bool:
        """Install ``image`` unless a newer load has started since ``request``."""

        if not self.is_current(request):
            logger.debug("Discarding stale image load for %s", request.url)
            return False
        self.image = image
        self.is_image_loading = False
        self.is_game_started = False
        self._reset_registry()
        return True

    def fail_load(self, request: LoadRequest, error: Exception) -> bool:
        if not self.is_current(request):
            logger.debug("Ignoring failure of stale image load for %s: %s", request.url, error)
            return False
        self.image = None
        self.is_image_loading = False
        return True

    def load_image(self, url: str) -> bool:
        if self.loader is None:
            raise RuntimeError("No image loader configured for this session")
        request = self.begin_load(url)
        try:
            image = self.loader.load(url)
        except Exception as exc:
            self.fail_load(request, exc)
            raise
        return self.complete_load(request, image)

    def fetch_puzzle_image(self) -> Optional[str]:
        if self.photo_source is None:
            raise RuntimeError("No photo source configured for this session")
        try:
            url = self.photo_source.fetch_url()
        except PhotoSourceError:
            logger.exception("Error fetching puzzle image")
            self.image_url = None
            return None
        self.image_url = url
        return url

    def change_puzzle(self) -> bool:
        url = self.fetch_puzzle_image()
        if url is None:
            return False
        return self.load_image(url)

    def init_puzzle_image(self, saved_url: Optional[str] = None) -> bool:
        url = saved_url or self.fetch_puzzle_image()
        if url is None:
            return False
        return self.load_image(url)

    def to_dict(self) -> Dict[str, Any]:
        size = self.image_size
        return {
            "image_url": self.image_url,
            "image_size": list(size) if size is not None else None,
            "is_image_loading": self.is_image_loading,
            "is_game_started": self.is_game_started,
            "is_complete": self.is_complete,
            "pieces": [piece.to_dict() for piece in self.pieces],
        }


__all__ = ["LoadRequest", "PuzzleSession"]


def _fit_scale(image_size: Tuple[int, int], canvas: Tuple[float, float], fill: float = 0.6) -> float:
    return min(canvas[0] * fill / image_size[0], canvas[1] * fill / image_size[1])


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Slice an image and scatter its pieces around the canvas")
    parser.add_argument("image", type=str, help="Image URL or local path")
    parser.add_argument("--rows", type=int, default=3)
    parser.add_argument("--cols", type=int, default=3)
    parser.add_argument(
        "--canvas",
        type=float,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=(1600.0, 900.0),
        help="Drawable surface size",
    )
    parser.add_argument(
        "--scale",
        type=float,
        default=None,
        help="Display scale for the image (defaults to fitting 60%% of the canvas)",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT)
    parser.add_argument("--output", type=Path, default=None, help="Write the layout JSON here instead of stdout")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    session = PuzzleSession(
        loader=HttpImageLoader(timeout=args.timeout),
        slicer=GridSlicer(rows=args.rows, cols=args.cols),
        seed=args.seed,
    )
    session.load_image(args.image)
    canvas_width, canvas_height = args.canvas
    scale = args.scale or _fit_scale(session.image_size, (canvas_width, canvas_height))
    session.prepare_pieces(canvas_width, canvas_height, scale)
    session.start_game(canvas_width, canvas_height, scale)

    payload = session.to_dict()
    payload["scale"] = scale
    payload["canvas"] = [canvas_width, canvas_height]
    text = json.dumps(payload, indent=2)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        print(f"Wrote {len(session.pieces)} pieces to {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    main()
