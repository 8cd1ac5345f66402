"""MTX container codec.

One codec for both layouts, parameterized by FormatRevision.
Payloads are opaque bytes; JPEG validity is the collaborator's concern.
"""
from __future__ import annotations

import struct
from dataclasses import astuple, dataclass, fields
from pathlib import Path
from typing import BinaryIO
from warnings import warn

from mtx_core.errors import ContainerError, FormatMismatchError, TruncatedInputError
from mtx_core.protocol import (
    MAGIC,
    BASE_HEADER_FMT,
    BASE_HEADER_LEN,
    METADATA_FMT,
    METADATA_LEN,
    MAX_PAYLOAD_LEN,
    INT32_MIN,
    INT32_MAX,
)
from mtx_core.storage import atomic_write_bytes, read_file


@dataclass(frozen=True)
class Metadata:
    """Pixel metadata for both payload slots, in on-disk field order."""

    width1: int
    height1: int
    channels1: int
    width2: int
    height2: int
    channels2: int

    @classmethod
    def from_images(cls, first, second) -> Metadata:
        """Build from two (width, height, channels) values. None marks an empty slot."""
        return cls(*_dims(first), *_dims(second))

    @property
    def first(self) -> tuple[int, int, int]:
        return (self.width1, self.height1, self.channels1)

    @property
    def second(self) -> tuple[int, int, int]:
        return (self.width2, self.height2, self.channels2)

    def as_tuple(self) -> tuple[int, ...]:
        return astuple(self)


def _dims(image) -> tuple[int, int, int]:
    if image is None:
        return (0, 0, 0)
    if hasattr(image, "width"):
        return (int(image.width), int(image.height), int(image.channels))
    width, height, channels = image
    return (int(width), int(height), int(channels))


@dataclass(frozen=True)
class FormatRevision:
    """Field layout of one header revision."""

    name: str
    header_fmt: str
    has_metadata: bool

    @property
    def header_size(self) -> int:
        return struct.calcsize(self.header_fmt)

    def size(self, len_first: int, len_second: int) -> int:
        return self.header_size + int(len_first) + int(len_second)


BASIC = FormatRevision("basic", BASE_HEADER_FMT, False)
EXTENDED = FormatRevision("extended", BASE_HEADER_FMT + METADATA_FMT.lstrip("<"), True)


def revision_for(metadata_present: bool) -> FormatRevision:
    return EXTENDED if metadata_present else BASIC


def _short_read(rev: FormatRevision, len_a: int, len_b: int, available: int) -> TruncatedInputError:
    expected = rev.size(len_a, len_b)
    # A basic stream read as extended comes up short by exactly the metadata block.
    if rev.has_metadata and BASIC.size(len_a, len_b) == available:
        return FormatMismatchError(rev.name, expected, available)
    return TruncatedInputError(expected, available)


def _check_metadata(meta: Metadata) -> tuple[int, ...]:
    values = tuple(int(v) for v in meta.as_tuple())
    for field, value in zip(fields(meta), values):
        if not INT32_MIN <= value <= INT32_MAX:
            raise ContainerError(f"Metadata field {field.name}={value} does not fit int32")
    return values


def encode(payload_a: bytes, payload_b: bytes, meta: Metadata | None = None) -> bytes:
    """Serialize two payloads (and optional metadata) into MTX bytes.

    Layout: magic, len(a), len(b), [six int32 metadata fields], a, b.
    """
    for slot, payload in (("first", payload_a), ("second", payload_b)):
        if len(payload) > MAX_PAYLOAD_LEN:
            raise ContainerError(f"{slot} payload of {len(payload)} bytes exceeds uint32 length field")
    a = bytes(payload_a)
    b = bytes(payload_b)

    rev = revision_for(meta is not None)
    header_fields = [MAGIC, len(a), len(b)]
    if meta is not None:
        header_fields.extend(_check_metadata(meta))

    parts = [struct.pack(rev.header_fmt, *header_fields)]
    if a:
        parts.append(a)
    parts.append(b)
    return b"".join(parts)


def decode(data: bytes, metadata_present: bool) -> tuple[Metadata | None, bytes, bytes]:
    """Parse MTX bytes into (metadata, first payload, second payload).

    The caller must say which revision produced the bytes. Declared lengths
    are checked against the available bytes before anything is sliced.
    """
    rev = revision_for(metadata_present)
    view = memoryview(data).cast("B")
    available = len(view)

    if available < BASE_HEADER_LEN:
        raise TruncatedInputError(rev.header_size, available, "header")

    _magic, len_a, len_b = struct.unpack_from(BASE_HEADER_FMT, view, 0)
    expected = rev.size(len_a, len_b)
    if available < expected:
        raise _short_read(rev, len_a, len_b, available)
    if available > expected:
        extra = available - expected
        if not rev.has_metadata and EXTENDED.size(len_a, len_b) == available:
            warn(f"{extra} trailing bytes match a metadata block; stream may be the extended revision")
        else:
            warn(f"Ignoring {extra} trailing bytes after MTX payloads")

    meta = None
    offset = BASE_HEADER_LEN
    if rev.has_metadata:
        meta = Metadata(*struct.unpack_from(METADATA_FMT, view, offset))
        offset += METADATA_LEN

    first = bytes(view[offset:offset + len_a])
    offset += len_a
    second = bytes(view[offset:offset + len_b])
    return meta, first, second


@dataclass(frozen=True)
class MtxContainer:
    """In-memory container. Built once, serialized once, never mutated."""

    first: bytes
    second: bytes
    metadata: Metadata | None = None

    @property
    def revision(self) -> FormatRevision:
        return revision_for(self.metadata is not None)

    @property
    def header_size(self) -> int:
        return self.revision.header_size

    @property
    def size(self) -> int:
        return self.revision.size(len(self.first), len(self.second))

    def to_bytes(self) -> bytes:
        return encode(self.first, self.second, self.metadata)

    @classmethod
    def from_bytes(cls, data: bytes, metadata_present: bool) -> MtxContainer:
        meta, first, second = decode(data, metadata_present)
        return cls(first, second, meta)


def _read_exact(f: BinaryIO, n: int) -> bytes:
    chunks: list[bytes] = []
    remaining = n
    while remaining > 0:
        chunk = f.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_from(f: BinaryIO, metadata_present: bool) -> MtxContainer:
    """Read one container from a binary stream without reading past its end."""
    rev = revision_for(metadata_present)

    header = _read_exact(f, BASE_HEADER_LEN)
    if len(header) < BASE_HEADER_LEN:
        raise TruncatedInputError(rev.header_size, len(header), "header")
    _magic, len_a, len_b = struct.unpack(BASE_HEADER_FMT, header)
    consumed = BASE_HEADER_LEN

    meta = None
    if rev.has_metadata:
        raw = _read_exact(f, METADATA_LEN)
        consumed += len(raw)
        if len(raw) < METADATA_LEN:
            raise _short_read(rev, len_a, len_b, consumed)
        meta = Metadata(*struct.unpack(METADATA_FMT, raw))

    payloads = []
    for length in (len_a, len_b):
        data = _read_exact(f, length)
        consumed += len(data)
        if len(data) != length:
            raise _short_read(rev, len_a, len_b, consumed)
        payloads.append(data)

    return MtxContainer(payloads[0], payloads[1], meta)


def write_to(f: BinaryIO, container: MtxContainer) -> int:
    blob = container.to_bytes()
    f.write(blob)
    return len(blob)


def read_container(path: Path, metadata_present: bool) -> MtxContainer:
    return MtxContainer.from_bytes(read_file(Path(path)), metadata_present)


def write_container(path: Path, container: MtxContainer) -> Path:
    """Persist a container atomically. The destination is complete or untouched."""
    return atomic_write_bytes(Path(path), container.to_bytes())
