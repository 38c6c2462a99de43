"""Fetch and decode images from URLs or local files."""

import io
from pathlib import Path

import requests
from loguru import logger
from PIL import Image

from gallery_engine.errors import AssetLoadError


class HttpImageLoader:
    """Load images over HTTP(S) with a shared session, or from disk."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.sess = session or requests.Session()

    def _read_bytes(self, source: str) -> bytes:
        if source.startswith(("http://", "https://")):
            r = self.sess.get(source)
            r.raise_for_status()
            return r.content
        return Path(source).expanduser().read_bytes()

    def load(self, source: str) -> Image.Image:
        """Return the decoded image at ``source``.

        Raises:
            AssetLoadError: If the image cannot be fetched or decoded.
        """
        try:
            data = self._read_bytes(source)
            image = Image.open(io.BytesIO(data))
            image.load()
        except (OSError, Image.DecompressionBombError, requests.RequestException) as e:
            msg = f"Cannot load image {source!r}: {e}"
            raise AssetLoadError(msg) from e

        logger.debug("Loaded image {!r} ({}x{})", source, image.width, image.height)
        return image
