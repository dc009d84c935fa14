"""
PFM Payload - float32 samples after the header.

On disk rows run bottom-to-top; in memory they run top-to-bottom. Both
directions go through flip_rows, which is its own inverse.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from pxm.errors import PayloadSizeMismatch, TruncatedPayload
from pxm.image import Endian
from pxm.spec import SAMPLE_SIZE


def decode_samples(payload: bytes | memoryview, count: int, endian: Endian) -> np.ndarray:
    """Read count float32 samples in the given byte order, in file order."""
    needed = count * SAMPLE_SIZE
    if len(payload) < needed:
        raise TruncatedPayload(
            f"Need {needed} bytes for {count} samples, got {len(payload)}"
        )
    return np.frombuffer(payload, dtype=endian.dtype, count=count)


def flip_rows(samples: np.ndarray, height: int) -> np.ndarray:
    """
    Reverse the row order of a flat sample array.

    Row r trades places with row height-1-r; with an odd height the middle
    row stays put. Applying it twice gives back the original order.
    """
    return np.ascontiguousarray(samples.reshape(height, -1)[::-1]).ravel()


def decode_payload(
    payload: bytes | memoryview,
    width: int,
    height: int,
    channels: int,
    endian: Endian,
) -> np.ndarray:
    """
    Decode the payload into native float32 samples, top row first.

    The payload must hold exactly width * height * channels samples.
    """
    expected = width * height * channels
    size = len(payload)
    if size % SAMPLE_SIZE != 0 or size // SAMPLE_SIZE != expected:
        raise PayloadSizeMismatch(
            f"Payload has {size} bytes, header declares {expected} float32 samples"
        )

    samples = decode_samples(payload, expected, endian)
    return flip_rows(samples, height).astype(np.float32)


def encode_payload(
    data: Sequence[float] | np.ndarray,
    width: int,
    height: int,
    channels: int,
    endian: Endian,
) -> bytes:
    """Serialize top-first samples as bottom-first float32 rows, no padding."""
    samples = np.asarray(data, dtype=np.float32).reshape(height, width * channels)
    return flip_rows(samples, height).astype(endian.dtype).tobytes()
