"""
PFM Image - The decoded image value and the builder that validates it.

An image only exists once PFMBuilder.build() has checked that the sample
count matches width * height * channels. After that it is frozen.

Usage:
    image = (
        PFMBuilder()
        .size(640, 480)
        .color(True)
        .scale(-1.0)
        .data(samples)
        .build()
    )
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

import numpy as np

from pxm.errors import DataLengthMismatch
from pxm.spec import COLOR_CHANNELS, DEFAULT_SCALE, channels_for


class Endian(Enum):
    """Byte order of the float32 samples in the payload."""

    BIG = ">"
    LITTLE = "<"

    @classmethod
    def from_scale(cls, scale: float) -> Endian:
        """Positive scale means big-endian, negative means little-endian."""
        return cls.BIG if scale > 0 else cls.LITTLE

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(f"{self.value}f4")

    @property
    def sign(self) -> float:
        return 1.0 if self is Endian.BIG else -1.0


def _float32_magnitude(value: float) -> np.float32:
    with np.errstate(over="ignore"):
        return np.float32(abs(value))


def is_valid_scale(value: float) -> bool:
    """True if value is finite and its magnitude rounds to a finite, non-zero float32."""
    if not math.isfinite(value) or value == 0.0:
        return False
    magnitude = _float32_magnitude(value)
    return bool(np.isfinite(magnitude)) and magnitude != 0


@dataclass(frozen=True)
class PFMImage:
    """
    A complete PFM image.

    data holds width * height * channels samples, top row first, left to
    right, RGB interleaved when color is set. scale_factor is always
    positive; the byte order it came with lives in endian.

    Samples are kept as a tuple of Python floats so images compare by value.
    That costs far more memory than packed float32; to_array() builds a new
    packed copy on every call, so keep the result for large images.
    """

    width: int
    height: int
    color: bool
    scale_factor: float
    endian: Endian
    data: tuple[float, ...] = field(repr=False)

    def __post_init__(self) -> None:
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise DataLengthMismatch(
                f"Got {len(self.data)} samples, expected width * height * channels = {expected}"
            )

    @property
    def channels(self) -> int:
        return channels_for(self.color)

    @property
    def num_pixels(self) -> int:
        return self.width * self.height

    @property
    def shape(self) -> tuple[int, ...]:
        if self.color:
            return (self.height, self.width, COLOR_CHANNELS)
        return (self.height, self.width)

    @property
    def signed_scale(self) -> float:
        """Scale as written in the header (sign encodes the byte order)."""
        return self.endian.sign * self.scale_factor

    def to_array(self) -> np.ndarray:
        """Read-only float32 array of shape (H, W, 3) or (H, W), row 0 = top."""
        array = np.asarray(self.data, dtype=np.float32).reshape(self.shape)
        array.flags.writeable = False
        return array

    @classmethod
    def from_array(cls, array: Iterable, scale: float = DEFAULT_SCALE) -> PFMImage:
        """
        Build an image from an (H, W), (H, W, 1) or (H, W, 3) array.
        Row 0 of the array is the top row of the image.
        """
        array = np.asarray(array, dtype=np.float32)
        if array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]

        if array.ndim == 2:
            color = False
        elif array.ndim == 3 and array.shape[2] == COLOR_CHANNELS:
            color = True
        else:
            raise ValueError(f"PFM expects (H, W) or (H, W, 3) array, got shape {array.shape}")

        height, width = array.shape[:2]
        return (
            PFMBuilder()
            .size(width, height)
            .color(color)
            .scale(scale)
            .data(array.ravel())
            .build()
        )


class PFMBuilder:
    """
    Accumulates image fields in any order; build() validates and freezes.

    size() and scale() reject impossible values immediately with ValueError:
    those are caller bugs, not bad files. build() raises DataLengthMismatch
    when the samples do not fit the declared size.
    """

    def __init__(self) -> None:
        self._width = 0
        self._height = 0
        self._color = True
        self._scale_factor = 1.0
        self._endian = Endian.LITTLE
        self._data: Iterable[float] = ()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def channels(self) -> int:
        return channels_for(self._color)

    @property
    def endian(self) -> Endian:
        return self._endian

    def size(self, width: int, height: int) -> PFMBuilder:
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        return self

    def color(self, color: bool) -> PFMBuilder:
        self._color = bool(color)
        return self

    def scale(self, scale: float) -> PFMBuilder:
        """Set scale factor and byte order: positive => big, negative => little."""
        scale = float(scale)
        if not is_valid_scale(scale):
            raise ValueError(f"Scale must be a finite non-zero float32 value, got {scale!r}")
        self._endian = Endian.from_scale(scale)
        self._scale_factor = float(_float32_magnitude(scale))
        return self

    def data(self, data: Iterable[float]) -> PFMBuilder:
        self._data = data if isinstance(data, np.ndarray) else list(data)
        return self

    def build(self) -> PFMImage:
        if self._width == 0 or self._height == 0:
            raise ValueError("Image size must be set before build()")

        samples = np.asarray(self._data, dtype=np.float32).ravel()
        # PFMImage checks the sample count on construction
        return PFMImage(
            width=self._width,
            height=self._height,
            color=self._color,
            scale_factor=self._scale_factor,
            endian=self._endian,
            data=tuple(samples.tolist()),
        )
