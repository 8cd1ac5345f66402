"""JPEG collaborator backed by Pillow.

Decodes JPEG bytes to interleaved 8-bit pixels and encodes them back.
Pixel rows are stored top to bottom, channels interleaved.
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import NamedTuple

from PIL import Image

from mtx_core.errors import DecodeError, UnsupportedFormatError
from mtx_core.protocol import DEFAULT_QUALITY, JPEG_SOI
from mtx_core.storage import atomic_write_bytes, read_file

# Channel count -> Pillow mode. 1 is grayscale, 3 is RGB; nothing else is written.
MODE_FOR_CHANNELS = {1: "L", 3: "RGB"}


class RawImage(NamedTuple):
    pixels: bytes
    width: int
    height: int
    channels: int


def looks_like_jpeg(data: bytes) -> bool:
    """True when data starts with the JPEG SOI marker."""
    return len(data) >= 2 and bytes(data[:2]) == JPEG_SOI


def _open_jpeg(data: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(bytes(data)))
    except (OSError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Malformed JPEG payload: {e}") from e
    if img.format != "JPEG":
        fmt = img.format
        img.close()
        raise DecodeError(f"Payload is {fmt} data, not JPEG")
    return img


def decode_jpeg(data: bytes) -> RawImage:
    with _open_jpeg(data) as img:
        try:
            img.load()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Malformed JPEG payload: {e}") from e
        return RawImage(img.tobytes(), img.width, img.height, len(img.getbands()))


def probe_jpeg(data: bytes) -> tuple[int, int, int]:
    """Read (width, height, channels) from the JPEG header without decoding pixels."""
    with _open_jpeg(data) as img:
        return (img.width, img.height, len(img.getbands()))


def encode_jpeg(
    pixels: bytes,
    width: int,
    height: int,
    channels: int,
    quality: int = DEFAULT_QUALITY,
) -> bytes:
    mode = MODE_FOR_CHANNELS.get(int(channels))
    if mode is None:
        raise UnsupportedFormatError(channels)
    if not 1 <= int(quality) <= 100:
        raise ValueError(f"JPEG quality {quality} outside 1..100")
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image size {width}x{height}")

    expected = int(width) * int(height) * int(channels)
    if len(pixels) != expected:
        raise ValueError(
            f"Pixel buffer holds {len(pixels)} bytes, {width}x{height}x{channels} needs {expected}"
        )

    img = Image.frombytes(mode, (int(width), int(height)), bytes(pixels))
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=int(quality))
    return buf.getvalue()


def read_jpeg(path: Path) -> RawImage:
    return decode_jpeg(read_file(Path(path)))


def write_jpeg(path: Path, image: RawImage, quality: int = DEFAULT_QUALITY) -> Path:
    blob = encode_jpeg(image.pixels, image.width, image.height, image.channels, quality)
    return atomic_write_bytes(Path(path), blob)
