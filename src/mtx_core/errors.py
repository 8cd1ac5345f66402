"""MTX error taxonomy.

Storage failures are not wrapped: they surface as plain OSError.
"""
from __future__ import annotations

from mtx_core.protocol import SUPPORTED_CHANNELS


class MtxError(Exception):
    code = "E_MTX"


class ContainerError(MtxError, ValueError):
    """Container bytes or container inputs do not fit the layout."""

    code = "E_CONTAINER"


class TruncatedInputError(ContainerError):
    """Header-declared lengths exceed the bytes actually available."""

    code = "E_TRUNCATED"

    def __init__(self, expected: int, available: int, what: str = "container"):
        self.expected = int(expected)
        self.available = int(available)
        super().__init__(
            f"Truncated {what}: expected {self.expected} bytes, {self.available} available"
        )


class FormatMismatchError(TruncatedInputError):
    """Metadata was requested from a stream written without it.

    The format has no version tag, so this is only detectable when the stream
    is short by exactly the size of the metadata block.
    """

    code = "E_FORMAT_MISMATCH"

    def __init__(self, requested: str, expected: int, available: int):
        self.requested = requested
        self.expected = int(expected)
        self.available = int(available)
        ContainerError.__init__(
            self,
            f"Format mismatch: decoding as {requested} expects {self.expected} bytes, "
            f"{self.available} available; stream looks like it was written without metadata",
        )


class JpegError(MtxError):
    code = "E_JPEG"


class DecodeError(JpegError, ValueError):
    """Malformed JPEG payload bytes."""

    code = "E_JPEG_DECODE"


class UnsupportedFormatError(JpegError, ValueError):
    code = "E_UNSUPPORTED_FORMAT"

    def __init__(self, channels: int):
        self.channels = int(channels)
        super().__init__(f"Unsupported channel count {self.channels} (supported: {SUPPORTED_CHANNELS})")
