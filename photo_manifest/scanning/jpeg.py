"""
Minimal JPEG header reader.

Walks the marker segments of a JPEG stream until it reaches a Start-Of-Frame
block and returns the frame size. Used in degraded mode so that learning an
image's dimensions does not require Pillow.
"""
import struct
from pathlib import Path

from ..exceptions import MalformedImageError
from ..models import ImageDimensions

SOI = 0xD8
EOI = 0xD9
TEM = 0x01
RST_MARKERS = range(0xD0, 0xD8)

# SOF0-3, SOF5-7, SOF9-11, SOF13-15. 0xC4 (DHT), 0xC8 (JPG) and 0xCC (DAC)
# share the range but are not frames.
SOF_MARKERS = frozenset(
    list(range(0xC0, 0xC4)) + list(range(0xC5, 0xC8)) +
    list(range(0xC9, 0xCC)) + list(range(0xCD, 0xD0))
)

# precision (1) + height (2) + width (2), after the 2-byte length
_SOF_MIN_LENGTH = 7


def read_jpeg_dimensions(data: bytes, name: str = "<bytes>") -> ImageDimensions:
    """
    Returns the pixel size stored in the first SOF segment of ``data``.

    Raises MalformedImageError if the stream is not a JPEG, is truncated,
    or ends before a frame header is found.
    """
    size = len(data)
    if size < 4 or data[0] != 0xFF or data[1] != SOI:
        raise MalformedImageError(f"Not a valid JPEG file: {name}")

    offset = 2
    while offset < size:
        if data[offset] != 0xFF:
            offset += 1
            continue

        # Any number of 0xFF fill bytes may precede the marker code
        while offset < size and data[offset] == 0xFF:
            offset += 1
        if offset >= size:
            break

        marker = data[offset]
        offset += 1

        # Standalone markers carry no length field
        if marker in (TEM, SOI, EOI) or marker in RST_MARKERS:
            continue

        if offset + 1 >= size:
            break
        (block_length,) = struct.unpack_from(">H", data, offset)
        if block_length < 2 or offset + block_length > size:
            break

        if marker in SOF_MARKERS:
            if block_length < _SOF_MIN_LENGTH:
                raise MalformedImageError(f"Truncated frame header in JPEG: {name}")
            height, width = struct.unpack_from(">HH", data, offset + 3)
            if not width or not height:
                raise MalformedImageError(f"Could not read JPEG dimensions: {name}")
            return ImageDimensions(width=width, height=height)

        offset += block_length

    raise MalformedImageError(f"SOF marker not found for JPEG: {name}")


def read_jpeg_file_dimensions(path: Path) -> ImageDimensions:
    return read_jpeg_dimensions(path.read_bytes(), name=str(path))
