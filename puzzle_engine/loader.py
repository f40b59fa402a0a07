"""Default image acquisition collaborators backed by requests and Pillow."""

from __future__ import annotations

import logging
import os
import random
from io import BytesIO
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests
from PIL import Image, UnidentifiedImageError

from .base import AbstractImageLoader, AbstractPhotoSource

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0
UNSPLASH_ENDPOINT = "https://api.unsplash.com/photos/random"
UNSPLASH_KEY_ENV = "UNSPLASH_ACCESS_KEY"


class ImageLoadError(RuntimeError):
    """Raised when an image URL is unreachable or does not decode."""


class PhotoSourceError(RuntimeError):
    """Raised when a photo service cannot provide a new image URL."""


class HttpImageLoader(AbstractImageLoader):
    """Download and decode images over HTTP(S), or read them from disk."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None) -> None:
        self.timeout = timeout
        self._session = session or requests.Session()

    def load(self, url: str) -> Image.Image:
        parsed = urlparse(url)
        if parsed.scheme in ("http", "https"):
            payload = self._download(url)
        else:
            payload = self._read_local(Path(parsed.path) if parsed.scheme == "file" else Path(url))
        try:
            image = Image.open(BytesIO(payload))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ImageLoadError(f"Failed to decode image from {url}") from exc
        logger.info("Loaded %sx%s image from %s", image.width, image.height, url)
        return image.convert("RGB")

    def _download(self, url: str) -> bytes:
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ImageLoadError(f"Failed to download image from {url}") from exc
        return response.content

    @staticmethod
    def _read_local(path: Path) -> bytes:
        if not path.exists():
            raise ImageLoadError(f"Image path not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise ImageLoadError(f"Failed to read image from {path}") from exc


class UnsplashPhotoSource(AbstractPhotoSource):
    """Ask the Unsplash API for a random landscape photo."""

    def __init__(
        self,
        access_key: Optional[str] = None,
        *,
        endpoint: str = UNSPLASH_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.access_key = access_key or os.environ.get(UNSPLASH_KEY_ENV)
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch_url(self) -> str:
        if not self.access_key:
            raise PhotoSourceError(f"No Unsplash access key configured (set {UNSPLASH_KEY_ENV})")
        params = {"orientation": "landscape", "client_id": self.access_key}
        try:
            response = self._session.get(self.endpoint, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PhotoSourceError("Failed to reach the photo service") from exc
        if not response.ok:
            reason = response.reason or "Unknown error"
            raise PhotoSourceError(f"Failed to fetch image: {reason}")
        try:
            return str(response.json()["urls"]["full"])
        except (ValueError, KeyError, TypeError) as exc:
            raise PhotoSourceError("Photo service returned an unexpected payload") from exc


class PicsumPhotoSource(AbstractPhotoSource):
    """Build random picsum.photos URLs of a fixed size."""

    def __init__(self, width: int = 1280, height: int = 720, *, seed: Optional[int] = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        self.width = width
        self.height = height
        self._rng = random.Random(seed)

    def fetch_url(self) -> str:
        random_token = self._rng.randint(0, 1_000_000_000)
        return f"https://picsum.photos/{self.width}/{self.height}?random={random_token}"


__all__ = [
    "DEFAULT_TIMEOUT",
    "HttpImageLoader",
    "ImageLoadError",
    "PhotoSourceError",
    "PicsumPhotoSource",
    "UNSPLASH_ENDPOINT",
    "UnsplashPhotoSource",
]
