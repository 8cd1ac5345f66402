import io

import pytest
from PIL import Image


def make_jpeg(width=32, height=24, mode="RGB", quality=90) -> bytes:
    img = Image.new(mode, (width, height))
    if mode == "RGB":
        img.putdata([(x * 8 % 256, y * 10 % 256, 128) for y in range(height) for x in range(width)])
    else:
        img.putdata([(x * 8 + y * 4) % 256 for y in range(height) for x in range(width)])
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


@pytest.fixture
def rgb_jpeg() -> bytes:
    return make_jpeg(32, 24, "RGB")


@pytest.fixture
def gray_jpeg() -> bytes:
    return make_jpeg(20, 30, "L")


@pytest.fixture
def jpeg_files(tmp_path, rgb_jpeg, gray_jpeg):
    first = tmp_path / "1.jpg"
    second = tmp_path / "2.jpg"
    first.write_bytes(rgb_jpeg)
    second.write_bytes(gray_jpeg)
    return first, second


def oversized_jpeg(width=60000, height=60000) -> bytes:
    """A small JPEG whose SOF0 header declares a huge frame."""
    b = bytearray(make_jpeg(16, 8, "RGB"))
    sof = b.index(b"\xff\xc0")
    b[sof + 5:sof + 7] = height.to_bytes(2, "big")
    b[sof + 7:sof + 9] = width.to_bytes(2, "big")
    return bytes(b)
