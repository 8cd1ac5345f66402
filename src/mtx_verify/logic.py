import hashlib
import warnings
from pathlib import Path
from mtx_core.container import decode, revision_for
from mtx_core.errors import DecodeError, FormatMismatchError, TruncatedInputError
from mtx_jpeg.codec import looks_like_jpeg, probe_jpeg
from .const import ERRORS

def _fail(report: dict, code: str, **extra) -> dict:
    report["errors"].append({"code": code, "message": ERRORS[code], **extra})
    report["status"] = "FAIL"
    report["error_count"] = len(report["errors"])
    return report

def _slot(name: str, offset: int, payload: bytes) -> dict:
    return {
        "slot": name,
        "offset": offset,
        "length": len(payload),
        "content_hash": hashlib.sha256(payload).hexdigest(),
    }

def verify_container(path: Path, metadata_present: bool = True) -> dict:
    report = {"status": "PASS", "error_count": 0, "errors": [], "warnings": []}
    path = Path(path)
    rev = revision_for(metadata_present)

    if not path.is_file():
        return _fail(report, "E_LAYOUT_MISSING", path=str(path))

    data = path.read_bytes()
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            meta, first, second = decode(data, metadata_present)
    except FormatMismatchError as e:
        return _fail(report, "E_FORMAT_MISMATCH", expected=e.expected, available=e.available)
    except TruncatedInputError as e:
        return _fail(report, "E_TRUNCATED", expected=e.expected, available=e.available)
    report["warnings"] = [str(w.message) for w in caught]

    declared = {"first": None, "second": None}
    if meta is not None:
        declared = {"first": list(meta.first), "second": list(meta.second)}

    report["container"] = {
        "revision": rev.name,
        "header_size": rev.header_size,
        "size": len(data),
        "trailing_bytes": len(data) - rev.size(len(first), len(second)),
        "metadata": declared if meta is not None else None,
        "payloads": [
            _slot("first", rev.header_size, first),
            _slot("second", rev.header_size + len(first), second),
        ],
    }

    if not second:
        return _fail(report, "E_PAYLOAD_EMPTY")

    for name, payload in (("first", first), ("second", second)):
        if not payload:
            continue
        if not looks_like_jpeg(payload):
            return _fail(report, "E_JPEG_MAGIC", slot=name)
        try:
            found = list(probe_jpeg(payload))
        except DecodeError as e:
            return _fail(report, "E_JPEG_DECODE", slot=name, detail=str(e))
        if meta is not None and found != declared[name]:
            return _fail(report, "E_DIMENSION_MISMATCH", slot=name, declared=declared[name], found=found)

    return report
