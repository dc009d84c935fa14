"""
PFM Format Specification (Portable Float Map)
==============================================

Layout:
    PF | Pf                      <- Magic token ("PF" = RGB, "Pf" = monochrome)
    <width> <height>             <- Positive decimal integers
    <scale>                      <- Signed non-zero float, sign selects byte order
    <payload>                    <- width * height * channels float32 samples

Design Decisions:
    - Header is ASCII, tokens separated by any run of ASCII whitespace
    - Exactly one separator byte follows the scale token, then binary data starts
    - Scale sign is the byte order: positive => big-endian, negative => little-endian
    - Scale magnitude is a display multiplier and is stored without its sign
    - Rows are stored bottom-to-top on disk, top-to-bottom in memory
    - Samples within a row go left-to-right, channel-interleaved for RGB

Priority: Byte-exact round trip > Strict parsing > Speed
"""

# Magic tokens - first token of every .pfm file
MAGIC_COLOR = b"PF"
MAGIC_GRAY = b"Pf"
MAGIC_PREFIX = b"P"

# Bytes per sample (IEEE-754 single precision)
SAMPLE_SIZE = 4

# Channels per pixel
COLOR_CHANNELS = 3
GRAY_CHANNELS = 1

# ASCII whitespace recognised between header tokens (no vertical tab)
WHITESPACE = frozenset(b" \t\n\x0c\r")

# Header line terminator used when encoding
HEADER_SEPARATOR = b"\n"

# Scale written by default when building from arrays (little-endian, unit scale)
DEFAULT_SCALE = -1.0

# File extension
EXTENSION = ".pfm"

# Safety limits
MAX_FILE_SIZE = 1024 * 1024 * 1024  # 1GB max file size for reader

# Max bytes inspected for fast identification
MAX_MAGIC_SCAN_BYTES = 3


def channels_for(color: bool) -> int:
    """Number of samples per pixel for the given color mode."""
    return COLOR_CHANNELS if color else GRAY_CHANNELS
