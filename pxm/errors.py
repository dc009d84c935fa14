"""
PFM Errors - Typed failures raised while decoding or building images.

Every codec failure is a PFMError, which is a ValueError: the input was
malformed, so callers can catch the whole family or one specific member.
"""

from __future__ import annotations


class PFMError(ValueError):
    """Base class for all PFM codec errors."""


class UnexpectedEof(PFMError):
    """Header buffer ran out before a token or the payload separator."""

    def __init__(self, message: str = "Header ended before all fields were read") -> None:
        super().__init__(message)


class InvalidMagic(PFMError):
    """Magic token is neither 'PF' nor 'Pf'."""


class InvalidDimension(PFMError):
    """Width or height is zero or not a decimal integer."""


class InvalidScale(PFMError):
    """Scale is zero, not finite, or not a number."""


class PayloadSizeMismatch(PFMError):
    """Payload byte count does not match width * height * channels."""


class TruncatedPayload(PFMError):
    """Ran out of bytes while reading float samples."""


class DataLengthMismatch(PFMError):
    """Builder data length does not match width * height * channels."""
