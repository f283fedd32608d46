import struct
from pathlib import Path

import pytest
from PIL import Image

from photo_manifest.config import BuildSettings, BuildPaths


def write_jpeg(path: Path, size=(40, 20), color="red", **save_kwargs) -> Path:
    """Writes a real JPEG via Pillow, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with Image.new("RGB", size, color=color) as im:
        im.save(path, "JPEG", **save_kwargs)
    return path


def segment(marker: int, payload: bytes) -> bytes:
    """A length-prefixed JPEG marker segment."""
    return bytes([0xFF, marker]) + struct.pack(">H", len(payload) + 2) + payload


def sof_payload(width: int, height: int) -> bytes:
    return bytes([8]) + struct.pack(">HH", height, width) + bytes([3]) + bytes(9)


@pytest.fixture
def settings():
    return BuildSettings()


@pytest.fixture
def paths(tmp_path):
    """Default project layout under a temporary root."""
    return BuildPaths.for_root(tmp_path)


@pytest.fixture
def photos_dir(paths):
    paths.photos_dir.mkdir(parents=True)
    return paths.photos_dir
