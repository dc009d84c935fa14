"""
PXM - Loader and saver for PxM images.
Currently only PFM (Portable Float Map) is supported.

    image = pxm.decode(data)
    data = pxm.encode(image)
"""

__version__ = "0.1.0"

from pxm.spec import EXTENSION, MAGIC_COLOR, MAGIC_GRAY
from pxm.errors import (
    DataLengthMismatch,
    InvalidDimension,
    InvalidMagic,
    InvalidScale,
    PayloadSizeMismatch,
    PFMError,
    TruncatedPayload,
    UnexpectedEof,
)
from pxm.image import Endian, PFMBuilder, PFMImage
from pxm.reader import PFMReader
from pxm.writer import PFMWriter

decode = PFMReader.parse
encode = PFMWriter.serialize
