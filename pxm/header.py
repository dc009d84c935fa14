"""
PFM Header - Parse and emit the ASCII header.

Decode reads four tokens (magic, width, height, scale) and skips the single
separator byte after the scale; everything behind it is payload.
Encode writes the canonical three-line form.
"""

from __future__ import annotations

import re

import numpy as np

from pxm.errors import InvalidDimension, InvalidMagic, InvalidScale, UnexpectedEof
from pxm.image import Endian, PFMBuilder, PFMImage, is_valid_scale
from pxm.spec import HEADER_SEPARATOR, MAGIC_COLOR, MAGIC_GRAY, MAGIC_PREFIX
from pxm.tokenizer import read_token

_INTEGER = re.compile(rb"\+?[0-9]+")
_FLOAT = re.compile(rb"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_header(buffer: bytes | bytearray | memoryview) -> tuple[PFMBuilder, memoryview]:
    """
    Parse the header at the front of buffer.

    Returns a builder with size, color and scale already set, and a view of
    the payload that follows the separator byte.
    """
    builder = PFMBuilder()

    # Magic
    magic, rest = read_token(buffer)
    builder.color(_parse_magic(magic))

    # Dimensions
    token, rest = read_token(rest)
    width = _parse_dimension(token, "width")
    token, rest = read_token(rest)
    height = _parse_dimension(token, "height")
    builder.size(width, height)

    # Scale (sign = byte order)
    token, rest = read_token(rest)
    builder.scale(_parse_scale(token))

    # One separator byte, whatever it is, then the payload
    if len(rest) < 1:
        raise UnexpectedEof("Reached EOF before the payload separator")
    return builder, rest[1:]


def _parse_magic(token: bytes) -> bool:
    """Return the color flag for a magic token. Bytes after the second are ignored."""
    if not token.startswith(MAGIC_PREFIX):
        raise InvalidMagic(f"The first character must be 'P', got {token[:1]!r}")
    kind = token[1:2]
    if kind == MAGIC_COLOR[1:]:
        return True
    if kind == MAGIC_GRAY[1:]:
        return False
    raise InvalidMagic(f"The second character must be 'F' or 'f', got {token!r}")


def _parse_dimension(token: bytes, name: str) -> int:
    if not _INTEGER.fullmatch(token):
        raise InvalidDimension(f"Invalid {name}: {token!r}")
    value = int(token)
    if value == 0:
        raise InvalidDimension(f"Invalid {name}: must be positive")
    return value


def _parse_scale(token: bytes) -> float:
    if not _FLOAT.fullmatch(token):
        raise InvalidScale(f"Invalid scale: {token!r}")
    value = float(token)
    if not is_valid_scale(value):
        raise InvalidScale(f"Invalid scale: {token!r} is zero or out of float32 range")
    return value


def format_scale(scale_factor: float, endian: Endian) -> str:
    """
    Signed scale token: positive for big-endian, negative for little-endian.
    Uses the shortest positional text that reads back as the same float32.

        format_scale(1.0, Endian.LITTLE)  # "-1"
        format_scale(0.5, Endian.BIG)     # "0.5"
    """
    magnitude = np.format_float_positional(np.float32(scale_factor), trim="-")
    if endian is Endian.LITTLE:
        return f"-{magnitude}"
    return magnitude


def encode_header(image: PFMImage) -> bytes:
    """Canonical header: magic, dimensions and signed scale, one per line."""
    magic = MAGIC_COLOR if image.color else MAGIC_GRAY
    dims = f"{image.width} {image.height}".encode("ascii")
    scale = format_scale(image.scale_factor, image.endian).encode("ascii")
    return HEADER_SEPARATOR.join((magic, dims, scale)) + HEADER_SEPARATOR
