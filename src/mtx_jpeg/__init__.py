"""MTX JPEG - Pillow-backed JPEG collaborator."""
from .codec import (
    RawImage,
    decode_jpeg,
    encode_jpeg,
    looks_like_jpeg,
    probe_jpeg,
    read_jpeg,
    write_jpeg,
)

__all__ = [
    "RawImage",
    "decode_jpeg",
    "encode_jpeg",
    "looks_like_jpeg",
    "probe_jpeg",
    "read_jpeg",
    "write_jpeg",
]
