"""Abstract interfaces for the collaborators a puzzle session consumes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, List

if TYPE_CHECKING:  # pragma: no cover
    from .pieces import Piece


class AbstractImageLoader(ABC):
    """Base class for image acquisition backends."""

    @abstractmethod
    def load(self, url: str) -> Any:
        """Return a fully decoded bitmap for ``url``.

        Implementations raise :class:`~puzzle_engine.loader.ImageLoadError`
        when the location is unreachable or does not decode as an image.
        """


class AbstractPhotoSource(ABC):
    """Base class for services that hand out puzzle image URLs."""

    @abstractmethod
    def fetch_url(self) -> str:
        """Pick a new image URL for the next puzzle."""


class AbstractPieceSlicer(ABC):
    """Base class for turning a loaded image into puzzle pieces."""

    @abstractmethod
    def slice(
        self,
        image: Any,
        *,
        canvas_width: float,
        canvas_height: float,
        scale: float,
    ) -> List["Piece"]:
        """Cut ``image`` into pieces whose solved positions sit on the target rectangle."""


__all__ = [
    "AbstractImageLoader",
    "AbstractPhotoSource",
    "AbstractPieceSlicer",
]
