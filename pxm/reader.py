"""
PFM Reader - Decode .pfm files into PFMImage values.

Usage:
    # From bytes already in memory
    image = PFMReader.parse(data)

    # From disk (whole file is read, then decoded)
    image = PFMReader.read("depth.pfm")

    # Cheap identification
    if PFMReader.is_pfm("unknown.bin"):
        ...
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pxm.errors import UnexpectedEof
from pxm.header import parse_header
from pxm.image import PFMImage
from pxm.payload import decode_payload
from pxm.spec import MAGIC_COLOR, MAGIC_GRAY, MAX_FILE_SIZE, MAX_MAGIC_SCAN_BYTES

logger = logging.getLogger(__name__)


class PFMReader:
    """Reads PFM images from bytes or from files."""

    @staticmethod
    def is_pfm(path: str | Path) -> bool:
        """Fast check if a file is PFM format. Reads only the first few bytes."""
        with open(path, "rb") as f:
            head = f.read(MAX_MAGIC_SCAN_BYTES)
        return PFMReader.is_pfm_bytes(head)

    @staticmethod
    def is_pfm_bytes(data: bytes) -> bool:
        """Fast check if bytes start like a PFM header ("PF" or "Pf" plus at least one byte)."""
        head = bytes(data[:MAX_MAGIC_SCAN_BYTES])
        return len(head) == MAX_MAGIC_SCAN_BYTES and head[:2] in (MAGIC_COLOR, MAGIC_GRAY)

    @classmethod
    def read(cls, path: str | Path, max_size: int = MAX_FILE_SIZE) -> PFMImage:
        """Read and decode a whole .pfm file."""
        file_size = os.path.getsize(path)
        if file_size > max_size:
            raise ValueError(
                f"File size {file_size} exceeds maximum allowed size {max_size}"
            )

        with open(path, "rb") as f:
            data = f.read()

        if not data:
            raise UnexpectedEof(f"Empty file: {path}")

        logger.debug("Read %d bytes from %s", len(data), path)
        return cls.parse(data)

    @classmethod
    def parse(cls, data: bytes | bytearray | memoryview) -> PFMImage:
        """Decode PFM bytes into a PFMImage."""
        builder, payload = parse_header(data)
        samples = decode_payload(
            payload,
            builder.width,
            builder.height,
            builder.channels,
            builder.endian,
        )
        image = builder.data(samples).build()

        logger.debug(
            "Decoded %dx%d %s PFM (%s-endian, scale %g)",
            image.width,
            image.height,
            "color" if image.color else "monochrome",
            image.endian.name.lower(),
            image.scale_factor,
        )
        return image
