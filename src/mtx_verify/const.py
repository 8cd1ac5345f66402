ERRORS = {
  "E_LAYOUT_MISSING": "Container file missing",
  "E_TRUNCATED": "Declared payload lengths exceed available bytes",
  "E_FORMAT_MISMATCH": "Container was written without the requested metadata block",
  "E_PAYLOAD_EMPTY": "Second payload is empty",
  "E_JPEG_MAGIC": "Payload missing JPEG SOI marker",
  "E_JPEG_DECODE": "Payload JPEG header could not be parsed",
  "E_DIMENSION_MISMATCH": "Container metadata does not match payload JPEG header",
}
