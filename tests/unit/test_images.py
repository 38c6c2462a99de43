"""Tests for HttpImageLoader."""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests
from PIL import Image

from gallery_engine.errors import AssetLoadError
from gallery_engine.images import HttpImageLoader


def _png_bytes(width: int = 8, height: int = 6) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (1, 2, 3)).save(buf, format="PNG")
    return buf.getvalue()


def test_load_local_file(tmp_path: Path) -> None:
    path = tmp_path / "mask.png"
    path.write_bytes(_png_bytes(20, 5))

    image = HttpImageLoader(session=MagicMock()).load(str(path))

    assert image.size == (20, 5)


def test_load_over_http_uses_session() -> None:
    session = MagicMock()
    session.get.return_value.content = _png_bytes()

    image = HttpImageLoader(session=session).load("https://cdn.example.com/a.png")

    session.get.assert_called_once_with("https://cdn.example.com/a.png")
    assert image.size == (8, 6)


def test_http_error_becomes_asset_error() -> None:
    session = MagicMock()
    session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")

    with pytest.raises(AssetLoadError, match="a.png"):
        HttpImageLoader(session=session).load("https://cdn.example.com/a.png")


def test_missing_file_becomes_asset_error(tmp_path: Path) -> None:
    with pytest.raises(AssetLoadError):
        HttpImageLoader(session=MagicMock()).load(str(tmp_path / "nope.png"))


def test_undecodable_bytes_become_asset_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"not an image")

    with pytest.raises(AssetLoadError):
        HttpImageLoader(session=MagicMock()).load(str(path))


def test_decompression_bomb_becomes_asset_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "huge.png"
    path.write_bytes(_png_bytes(8, 6))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

    with pytest.raises(AssetLoadError, match="huge.png"):
        HttpImageLoader(session=MagicMock()).load(str(path))
