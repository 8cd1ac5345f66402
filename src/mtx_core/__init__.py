"""MTX Core - container layout and codec."""
from .container import (
    BASIC,
    EXTENDED,
    FormatRevision,
    Metadata,
    MtxContainer,
    decode,
    encode,
    read_container,
    read_from,
    revision_for,
    write_container,
    write_to,
)
from .errors import (
    ContainerError,
    DecodeError,
    FormatMismatchError,
    JpegError,
    MtxError,
    TruncatedInputError,
    UnsupportedFormatError,
)

__all__ = [
    "BASIC",
    "EXTENDED",
    "FormatRevision",
    "Metadata",
    "MtxContainer",
    "decode",
    "encode",
    "read_container",
    "read_from",
    "revision_for",
    "write_container",
    "write_to",
    "ContainerError",
    "DecodeError",
    "FormatMismatchError",
    "JpegError",
    "MtxError",
    "TruncatedInputError",
    "UnsupportedFormatError",
]
