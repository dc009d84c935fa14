"""
PFM Writer - Encode PFMImage values into .pfm bytes.

Usage:
    data = PFMWriter.serialize(image)
    PFMWriter.write(image, "depth.pfm")
"""

from __future__ import annotations

import logging
from pathlib import Path

from pxm.header import encode_header
from pxm.image import PFMImage
from pxm.payload import encode_payload

logger = logging.getLogger(__name__)


class PFMWriter:
    """Serializes PFM images. The image is only read, never changed."""

    @staticmethod
    def serialize(image: PFMImage) -> bytes:
        """Header followed directly by the bottom-to-top float32 payload."""
        header = encode_header(image)
        payload = encode_payload(
            image.data,
            image.width,
            image.height,
            image.channels,
            image.endian,
        )
        logger.debug(
            "Encoded %dx%d PFM: %d header bytes, %d payload bytes",
            image.width,
            image.height,
            len(header),
            len(payload),
        )
        return header + payload

    @classmethod
    def write(cls, image: PFMImage, path: str | Path) -> int:
        """Write image to path. Returns the number of bytes written."""
        data = cls.serialize(image)
        with open(path, "wb") as f:
            f.write(data)
        logger.debug("Wrote %d bytes to %s", len(data), path)
        return len(data)
