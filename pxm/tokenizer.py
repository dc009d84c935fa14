"""
PFM Tokenizer - Splits the ASCII header into whitespace-delimited tokens.

Works on memoryviews so the binary payload behind the header is never copied.
"""

from __future__ import annotations

from pxm.errors import UnexpectedEof
from pxm.spec import WHITESPACE


def read_token(buffer: bytes | bytearray | memoryview) -> tuple[bytes, memoryview]:
    """
    Read one token from the front of buffer.

    Leading whitespace is skipped, then the longest run of non-whitespace
    bytes is returned together with the rest of the buffer. The rest starts
    at the whitespace byte that ended the token (it is not consumed).

        token, rest = read_token(b" 640 480")
        # token == b"640", bytes(rest) == b" 480"

    Raises UnexpectedEof when only whitespace (or nothing) is left.
    """
    view = memoryview(buffer)
    size = len(view)

    start = 0
    while start < size and view[start] in WHITESPACE:
        start += 1

    if start >= size:
        raise UnexpectedEof()

    end = start
    while end < size and view[end] not in WHITESPACE:
        end += 1

    return bytes(view[start:end]), view[end:]
