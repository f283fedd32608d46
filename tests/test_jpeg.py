import pytest
from PIL import Image

from photo_manifest.exceptions import MalformedImageError
from photo_manifest.models import ImageDimensions
from photo_manifest.scanning.jpeg import read_jpeg_dimensions, read_jpeg_file_dimensions

from conftest import segment, sof_payload, write_jpeg

SOI = b"\xff\xd8"
EOI = b"\xff\xd9"
APP0 = segment(0xE0, b"JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00")


@pytest.mark.parametrize("size", [(1, 1), (40, 20), (333, 777)])
def test_matches_pillow_for_real_files(tmp_path, size):
    path = write_jpeg(tmp_path / "real.jpg", size=size)

    dims = read_jpeg_file_dimensions(path)

    with Image.open(path) as im:
        assert (dims.width, dims.height) == im.size


def test_progressive_jpeg(tmp_path):
    path = write_jpeg(tmp_path / "prog.jpg", size=(120, 80), progressive=True)
    assert read_jpeg_file_dimensions(path) == ImageDimensions(120, 80)


def test_skips_fill_bytes_and_standalone_markers():
    data = (
        SOI
        + b"\xff\xd0"           # RST0
        + b"\xff\x01"           # TEM
        + APP0
        + b"\xff\xff\xff"       # fill bytes before the marker code
        + bytes([0xC2]) + segment(0xC2, sof_payload(640, 480))[2:]
        + EOI
    )
    assert read_jpeg_dimensions(data) == ImageDimensions(640, 480)


def test_non_frame_markers_in_sof_range_are_skipped():
    # DHT (0xC4) sits between SOF3 and SOF5 and must not be read as a frame
    data = SOI + segment(0xC4, sof_payload(1, 1)) + segment(0xC1, sof_payload(800, 600)) + EOI
    assert read_jpeg_dimensions(data) == ImageDimensions(800, 600)


def test_stray_bytes_between_segments_are_skipped():
    data = SOI + b"\x00\x12" + segment(0xC0, sof_payload(10, 20))
    assert read_jpeg_dimensions(data) == ImageDimensions(10, 20)


@pytest.mark.parametrize("data", [
    b"",
    b"\xff\xd8",
    b"GIF89a\x00\x00\x00\x00",
    b"\x89PNG\r\n\x1a\n",
])
def test_rejects_non_jpeg(data):
    with pytest.raises(MalformedImageError):
        read_jpeg_dimensions(data)


def test_missing_sof_fails():
    with pytest.raises(MalformedImageError, match="SOF marker not found"):
        read_jpeg_dimensions(SOI + APP0 + EOI)


def test_block_running_past_buffer_fails():
    truncated = SOI + b"\xff\xe0\x00\x40" + b"\x00" * 8
    with pytest.raises(MalformedImageError):
        read_jpeg_dimensions(truncated)


def test_short_sof_block_fails():
    data = SOI + segment(0xC0, b"\x08\x00")
    with pytest.raises(MalformedImageError):
        read_jpeg_dimensions(data)


def test_zero_dimension_fails():
    data = SOI + segment(0xC0, sof_payload(0, 480))
    with pytest.raises(MalformedImageError, match="Could not read JPEG dimensions"):
        read_jpeg_dimensions(data)


def test_error_names_the_file(tmp_path):
    bad = tmp_path / "bad.jpg"
    bad.write_bytes(b"not a jpeg")
    with pytest.raises(MalformedImageError, match="bad.jpg"):
        read_jpeg_file_dimensions(bad)
