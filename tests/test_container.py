import io
import struct

import pytest

from mtx_core import storage
from mtx_core.container import (
    BASIC,
    EXTENDED,
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
from mtx_core.errors import ContainerError, FormatMismatchError, TruncatedInputError

A = bytes([0xFF, 0xD8, 0x00, 0x01])
B = bytes([0xFF, 0xD8, 0x00, 0x02, 0x03])
META = Metadata(640, 480, 3, 320, 240, 1)


def test_reference_scenario_bytes():
    blob = encode(A, B)
    assert blob == bytes([0, 0, 0, 0, 4, 0, 0, 0, 5, 0, 0, 0]) + A + B
    assert len(blob) == 21
    assert decode(blob, False) == (None, A, B)


def test_revision_header_sizes():
    assert BASIC.header_size == 12
    assert EXTENDED.header_size == 36
    assert revision_for(True) is EXTENDED
    assert revision_for(False) is BASIC


@pytest.mark.parametrize(
    "a,b",
    [
        (b"", b"\xff"),
        (A, B),
        (b"\x00" * 1000, bytes(range(256)) * 3),
    ],
)
def test_round_trip_without_metadata(a, b):
    blob = encode(a, b)
    assert len(blob) == 12 + len(a) + len(b)
    assert decode(blob, metadata_present=False) == (None, a, b)


@pytest.mark.parametrize(
    "meta",
    [
        META,
        Metadata(0, 0, 0, 1, 1, 1),
        Metadata(-1, 2**31 - 1, -(2**31), 7, 8, 9),
    ],
)
def test_round_trip_with_metadata(meta):
    blob = encode(A, B, meta)
    assert len(blob) == 36 + len(A) + len(B)
    assert decode(blob, metadata_present=True) == (meta, A, B)


def test_extended_layout_offsets():
    blob = encode(A, B, META)
    magic, la, lb = struct.unpack_from("<III", blob, 0)
    assert (magic, la, lb) == (0, 4, 5)
    assert struct.unpack_from("<6i", blob, 12) == (640, 480, 3, 320, 240, 1)
    assert blob[36:40] == A
    assert blob[40:] == B


def test_zero_length_first_payload():
    blob = encode(b"", B)
    assert struct.unpack_from("<I", blob, 4) == (0,)
    assert blob[12:] == B
    meta, first, second = decode(blob, False)
    assert first == b""
    assert second == B


def test_empty_second_payload_is_accepted():
    blob = encode(A, b"")
    assert len(blob) == 16
    assert decode(blob, False) == (None, A, b"")


def test_accepts_bytes_like_inputs():
    blob = encode(bytearray(A), memoryview(B))
    assert decode(bytearray(blob), False) == (None, A, B)


def test_magic_is_not_validated():
    blob = bytearray(encode(A, B))
    blob[0:4] = b"\xde\xad\xbe\xef"
    assert decode(bytes(blob), False) == (None, A, B)


@pytest.mark.parametrize("metadata_present", [False, True])
def test_every_truncation_is_detected(metadata_present):
    meta = META if metadata_present else None
    blob = encode(A, B, meta)
    for cut in range(len(blob)):
        with pytest.raises(TruncatedInputError):
            decode(blob[:cut], metadata_present)


def test_truncation_reports_counts():
    blob = encode(A, B)
    with pytest.raises(TruncatedInputError) as exc:
        decode(blob[:-2], False)
    assert exc.value.expected == 21
    assert exc.value.available == 19
    assert "expected 21" in str(exc.value)


def test_short_header_is_truncation():
    with pytest.raises(TruncatedInputError) as exc:
        decode(b"\x00" * 5, True)
    assert exc.value.expected == 36
    assert exc.value.available == 5


def test_metadata_requested_on_basic_stream():
    blob = encode(A, B)
    with pytest.raises(FormatMismatchError) as exc:
        decode(blob, metadata_present=True)
    assert exc.value.requested == "extended"
    assert exc.value.expected == 45
    assert exc.value.available == 21


def test_extended_stream_read_as_basic_warns():
    blob = encode(A, B, META)
    with pytest.warns(UserWarning, match="metadata block"):
        decode(blob, metadata_present=False)


def test_trailing_bytes_warn():
    blob = encode(A, B) + b"\x00\x01"
    with pytest.warns(UserWarning, match="2 trailing bytes"):
        assert decode(blob, False) == (None, A, B)


def test_payload_length_overflow():
    class Huge(bytes):
        def __len__(self):
            return 2**32

    with pytest.raises(ContainerError):
        encode(Huge(), B)


@pytest.mark.parametrize("value", [2**31, -(2**31) - 1])
def test_metadata_out_of_int32_range(value):
    meta = Metadata(value, 1, 3, 1, 1, 1)
    with pytest.raises(ContainerError, match="width1"):
        encode(A, B, meta)


def test_metadata_from_images():
    meta = Metadata.from_images((640, 480, 3), None)
    assert meta == Metadata(640, 480, 3, 0, 0, 0)
    assert meta.first == (640, 480, 3)
    assert meta.second == (0, 0, 0)
    assert meta.as_tuple() == (640, 480, 3, 0, 0, 0)


def test_container_object():
    c = MtxContainer(A, B, META)
    assert c.revision is EXTENDED
    assert c.header_size == 36
    assert c.size == len(c.to_bytes()) == 45
    assert MtxContainer.from_bytes(c.to_bytes(), True) == c


def test_stream_reads_consecutive_containers():
    buf = io.BytesIO()
    first = MtxContainer(A, B, META)
    second = MtxContainer(b"", b"\xff\xd8\x09", META)
    assert write_to(buf, first) == 45
    write_to(buf, second)
    buf.seek(0)

    assert read_from(buf, True) == first
    assert read_from(buf, True) == second
    assert buf.read() == b""


def test_stream_truncation():
    blob = encode(A, B, META)
    with pytest.raises(TruncatedInputError) as exc:
        read_from(io.BytesIO(blob[:-1]), True)
    assert exc.value.expected == 45
    assert exc.value.available == 44


def test_stream_format_mismatch():
    with pytest.raises(FormatMismatchError):
        read_from(io.BytesIO(encode(A, B)), True)


def test_file_round_trip(tmp_path):
    path = tmp_path / "out.mtx"
    c = MtxContainer(A, B, META)
    assert write_container(path, c) == path
    assert path.read_bytes() == c.to_bytes()
    assert read_container(path, True) == c
    assert list(tmp_path.iterdir()) == [path]


def test_read_missing_file(tmp_path):
    with pytest.raises(OSError):
        read_container(tmp_path / "missing.mtx", False)


def test_failed_encode_leaves_destination_untouched(tmp_path):
    path = tmp_path / "out.mtx"
    path.write_bytes(b"previous")
    with pytest.raises(ContainerError):
        write_container(path, MtxContainer(A, B, Metadata(2**40, 0, 0, 0, 0, 0)))
    assert path.read_bytes() == b"previous"


def test_failed_rename_removes_temp_file(tmp_path, monkeypatch):
    path = tmp_path / "out.mtx"
    path.write_bytes(b"previous")

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(storage.os, "replace", boom)
    with pytest.raises(OSError, match="disk full"):
        write_container(path, MtxContainer(A, B))
    assert path.read_bytes() == b"previous"
    assert list(tmp_path.iterdir()) == [path]


def test_write_into_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        write_container(tmp_path / "nope" / "out.mtx", MtxContainer(A, B))
