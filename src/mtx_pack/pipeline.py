"""MTX pack pipeline: JPEG files in, container out, and back."""
from __future__ import annotations

from pathlib import Path
from warnings import warn

from mtx_core.container import Metadata, MtxContainer, read_container, write_container
from mtx_core.errors import DecodeError
from mtx_core.protocol import DEFAULT_QUALITY
from mtx_core.storage import atomic_write_bytes, read_file
from mtx_jpeg.codec import decode_jpeg, encode_jpeg, looks_like_jpeg, probe_jpeg


def load_payload(
    jpeg_path: Path,
    quality: int = DEFAULT_QUALITY,
    recompress: bool = True,
) -> tuple[bytes, tuple[int, int, int]]:
    """Read one JPEG file and return (payload bytes, (width, height, channels)).

    With recompress the image is fully decoded and re-encoded at quality,
    otherwise the source bytes are kept verbatim and only the header is read.
    """
    src = read_file(Path(jpeg_path))
    if recompress:
        raw = decode_jpeg(src)
        return encode_jpeg(*raw, quality=quality), (raw.width, raw.height, raw.channels)
    return src, probe_jpeg(src)


def pack_images(
    first_path: Path | None,
    second_path: Path,
    out_path: Path,
    quality: int = DEFAULT_QUALITY,
    with_metadata: bool = True,
    recompress: bool = True,
) -> MtxContainer:
    """Pack one or two JPEG files into an MTX container at out_path."""
    if first_path is None:
        first, first_dims = b"", None
    else:
        first, first_dims = load_payload(first_path, quality, recompress)
    second, second_dims = load_payload(second_path, quality, recompress)

    meta = Metadata.from_images(first_dims, second_dims) if with_metadata else None
    container = MtxContainer(first, second, meta)
    write_container(out_path, container)
    return container


def _check_slot(slot: str, payload: bytes, declared: tuple[int, int, int] | None) -> None:
    if not looks_like_jpeg(payload):
        raise DecodeError(f"{slot} payload has no JPEG SOI marker")
    if declared is None:
        return
    found = probe_jpeg(payload)
    if found != declared:
        warn(f"{slot} payload header reports {found}, container metadata declares {declared}")


def unpack_container(
    mtx_path: Path,
    first_out: Path | None,
    second_out: Path,
    metadata_present: bool = True,
) -> MtxContainer:
    """Extract the payloads of an MTX container to JPEG files.

    Payload bytes are written verbatim. Both slots are checked before anything
    is written, and outputs already written are removed if a later write
    fails, so a bad container leaves no output behind.
    """
    container = read_container(mtx_path, metadata_present)
    meta = container.metadata

    jobs: list[tuple[bytes, Path]] = []
    slots = [
        ("first", container.first, first_out, meta.first if meta else None),
        ("second", container.second, second_out, meta.second if meta else None),
    ]
    for slot, payload, out, declared in slots:
        if not payload:
            warn(f"{slot} payload is empty; nothing extracted")
            continue
        if out is None:
            continue
        _check_slot(slot, payload, declared)
        jobs.append((payload, Path(out)))

    written: list[Path] = []
    try:
        for payload, out in jobs:
            written.append(atomic_write_bytes(out, payload))
    except BaseException:
        # Roll back outputs already in place.
        for out in written:
            out.unlink(missing_ok=True)
        raise
    return container


def convert_jpeg_to_mtx(jpeg_path: Path, mtx_path: Path) -> MtxContainer:
    """Wrap a single JPEG verbatim as the second payload of a basic container."""
    data = read_file(Path(jpeg_path))
    if not looks_like_jpeg(data):
        raise DecodeError(f"{jpeg_path} has no JPEG SOI marker")
    container = MtxContainer(b"", data)
    write_container(mtx_path, container)
    return container


def convert_mtx_to_jpeg(mtx_path: Path, jpeg_path: Path) -> Path:
    """Unwrap the JPEG held in the second payload of a basic container."""
    container = read_container(mtx_path, metadata_present=False)
    if not looks_like_jpeg(container.second):
        raise DecodeError(f"{mtx_path} holds no JPEG data")
    return atomic_write_bytes(Path(jpeg_path), container.second)
