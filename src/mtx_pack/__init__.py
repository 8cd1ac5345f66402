"""MTX Pack - JPEG files to MTX containers and back."""
from .pipeline import (
    convert_jpeg_to_mtx,
    convert_mtx_to_jpeg,
    load_payload,
    pack_images,
    unpack_container,
)

__all__ = [
    "convert_jpeg_to_mtx",
    "convert_mtx_to_jpeg",
    "load_payload",
    "pack_images",
    "unpack_container",
]
