"""MTX container protocol constants.

Single source of truth for the on-disk layout. Keep this file stable.
Writers and readers must remain synchronized; the format carries no version tag.
"""

# Reserved. Always written as 0 and never checked on read.
MAGIC = 0

# Base header: [Magic(4) | LengthFirst(4) | LengthSecond(4)] = 12 bytes
BASE_HEADER_FMT = "<III"
BASE_HEADER_LEN = 12

# Metadata block: [W1 | H1 | C1 | W2 | H2 | C2], int32 each = 24 bytes
METADATA_FMT = "<6i"
METADATA_LEN = 24

# Field bounds
MAX_PAYLOAD_LEN = 0xFFFFFFFF
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# JPEG collaborator defaults
DEFAULT_QUALITY = 75
SUPPORTED_CHANNELS = (1, 3)
JPEG_SOI = b"\xff\xd8"

