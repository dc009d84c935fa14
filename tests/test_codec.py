"""
Codec Tests - Payload codec, full decode/encode and round trips.
"""

import struct

import numpy as np
import pytest

import pxm
from pxm import (
    Endian,
    PFMBuilder,
    PFMReader,
    PFMWriter,
    PayloadSizeMismatch,
    TruncatedPayload,
    UnexpectedEof,
    InvalidMagic,
)
from pxm.payload import decode_payload, decode_samples, encode_payload, flip_rows


def le(*values):
    return struct.pack(f"<{len(values)}f", *values)


def be(*values):
    return struct.pack(f">{len(values)}f", *values)


@pytest.fixture
def color_image():
    return (
        PFMBuilder()
        .size(2, 3)
        .color(True)
        .scale(-1.0)
        .data([float(i) for i in range(18)])
        .build()
    )


@pytest.fixture
def mono_image():
    return (
        PFMBuilder()
        .size(3, 2)
        .color(False)
        .scale(2.5)
        .data([0.5, -1.25, 3.0, 1e-3, 7.0, -0.0])
        .build()
    )


# =============================================================================
# Payload codec
# =============================================================================

class TestFlipRows:

    def test_even_height(self):
        samples = np.arange(6, dtype=np.float32)
        assert flip_rows(samples, 2).tolist() == [3, 4, 5, 0, 1, 2]

    def test_odd_height_middle_row_stays(self):
        samples = np.arange(3, dtype=np.float32)
        assert flip_rows(samples, 3).tolist() == [2, 1, 0]

    def test_single_row(self):
        samples = np.arange(4, dtype=np.float32)
        assert flip_rows(samples, 1).tolist() == [0, 1, 2, 3]

    @pytest.mark.parametrize("height", [1, 2, 3, 4, 7])
    def test_self_inverse(self, height):
        samples = np.random.default_rng(height).random(height * 6).astype(np.float32)
        assert np.array_equal(flip_rows(flip_rows(samples, height), height), samples)


class TestDecodeSamples:

    def test_little_endian(self):
        assert decode_samples(le(1.0, 0.5), 2, Endian.LITTLE).tolist() == [1.0, 0.5]

    def test_big_endian(self):
        assert decode_samples(be(1.0, 0.5), 2, Endian.BIG).tolist() == [1.0, 0.5]

    def test_truncated(self):
        with pytest.raises(TruncatedPayload):
            decode_samples(le(1.0)[:3], 1, Endian.LITTLE)


class TestDecodePayload:

    def test_rows_flipped(self):
        payload = le(1.0, 1.0, 1.0, 0.5, 0.5, 0.5)
        samples = decode_payload(payload, 1, 2, 3, Endian.LITTLE)
        assert samples.tolist() == [0.5, 0.5, 0.5, 1.0, 1.0, 1.0]

    def test_native_dtype(self):
        samples = decode_payload(be(1.0, 2.0), 2, 1, 1, Endian.BIG)
        assert samples.dtype == np.float32
        assert samples.dtype.isnative

    def test_too_few_samples(self):
        with pytest.raises(PayloadSizeMismatch):
            decode_payload(le(1.0, 2.0), 3, 1, 1, Endian.LITTLE)

    def test_too_many_samples(self):
        with pytest.raises(PayloadSizeMismatch):
            decode_payload(le(1.0, 2.0, 3.0, 4.0), 3, 1, 1, Endian.LITTLE)

    @pytest.mark.parametrize("extra", [1, 2, 3])
    def test_not_a_multiple_of_four(self, extra):
        with pytest.raises(PayloadSizeMismatch):
            decode_payload(le(1.0, 2.0) + b"\x00" * extra, 2, 1, 1, Endian.LITTLE)


class TestEncodePayload:

    def test_rows_written_bottom_first(self):
        payload = encode_payload([1.0, 2.0, 3.0, 4.0], 2, 2, 1, Endian.LITTLE)
        assert payload == le(3.0, 4.0, 1.0, 2.0)

    def test_big_endian(self):
        assert encode_payload([1.0], 1, 1, 1, Endian.BIG) == b"\x3f\x80\x00\x00"

    def test_no_padding(self):
        assert len(encode_payload([0.0] * 12, 2, 2, 3, Endian.LITTLE)) == 48


# =============================================================================
# Decode
# =============================================================================

class TestDecode:

    def test_little_endian_color(self):
        buffer = b"PF\n1 2\n-1.0\n" + bytes([
            0x00, 0x00, 0x80, 0x3F, 0x00, 0x00, 0x80, 0x3F, 0x00, 0x00, 0x80, 0x3F,
            0x00, 0x00, 0x00, 0x3F, 0x00, 0x00, 0x00, 0x3F, 0x00, 0x00, 0x00, 0x3F,
        ])

        image = pxm.decode(buffer)

        assert image.color is True
        assert image.endian is Endian.LITTLE
        assert image.scale_factor == 1.0
        assert image.height == 2
        assert image.width == 1
        assert image.data == (0.5, 0.5, 0.5, 1.0, 1.0, 1.0)

    def test_long_scale_token(self):
        image = pxm.decode(b"PF\n1 2\n-1.000000\n" + le(1, 1, 1, 0.5, 0.5, 0.5))
        assert image.scale_factor == 1.0

    def test_big_endian_monochrome(self):
        image = pxm.decode(b"Pf\n2 2\n4\n" + be(1.0, 2.0, 3.0, 4.0))
        assert image.color is False
        assert image.endian is Endian.BIG
        assert image.scale_factor == 4.0
        assert image.data == (3.0, 4.0, 1.0, 2.0)

    def test_accepts_bytearray(self):
        image = pxm.decode(bytearray(b"Pf\n1 1\n-1\n" + le(9.0)))
        assert image.data == (9.0,)

    def test_payload_size_mismatch(self):
        with pytest.raises(PayloadSizeMismatch):
            pxm.decode(b"PF\n2 2\n-1.0\n" + le(*([0.0] * 11)))

    def test_payload_with_trailing_bytes(self):
        with pytest.raises(PayloadSizeMismatch):
            pxm.decode(b"Pf\n1 1\n-1.0\n" + le(1.0) + b"\x00")

    def test_header_only(self):
        with pytest.raises(PayloadSizeMismatch):
            pxm.decode(b"Pf\n1 1\n-1.0\n")

    def test_empty(self):
        with pytest.raises(UnexpectedEof):
            pxm.decode(b"")

    def test_not_pfm(self):
        with pytest.raises(InvalidMagic):
            pxm.decode(b"P6\n1 1\n255\n\x00\x00\x00")

    def test_magic_with_trailing_bytes(self):
        image = pxm.decode(b"PF4\n1 1\n-1\n" + le(1.0, 2.0, 3.0))
        assert image.color is True
        assert image.data == (1.0, 2.0, 3.0)

    def test_reader_parse_is_decode(self):
        data = b"Pf\n1 1\n-1\n" + le(2.0)
        assert PFMReader.parse(data) == pxm.decode(data)


# =============================================================================
# Encode
# =============================================================================

class TestEncode:

    def test_little_endian_color(self):
        image = (
            PFMBuilder()
            .size(1, 3)
            .color(True)
            .scale(-1.0)
            .data([0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 1.0, 1.0, 1.0])
            .build()
        )

        expected = b"PF\n1 3\n-1\n" + le(1.0, 1.0, 1.0, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5)
        assert pxm.encode(image) == expected

    def test_big_endian_monochrome(self, mono_image):
        data = pxm.encode(mono_image)
        assert data.startswith(b"Pf\n3 2\n2.5\n")
        assert len(data) == len(b"Pf\n3 2\n2.5\n") + 6 * 4

    def test_encode_does_not_mutate(self, color_image):
        before = (color_image.data, color_image.scale_factor, color_image.endian)
        PFMWriter.serialize(color_image)
        assert (color_image.data, color_image.scale_factor, color_image.endian) == before


# =============================================================================
# Round trip
# =============================================================================

class TestRoundTrip:

    def test_color(self, color_image):
        assert pxm.decode(pxm.encode(color_image)) == color_image

    def test_monochrome(self, mono_image):
        assert pxm.decode(pxm.encode(mono_image)) == mono_image

    def test_random_images(self):
        rng = np.random.default_rng(7)
        for _ in range(20):
            width, height = rng.integers(1, 9, size=2)
            color = bool(rng.integers(0, 2))
            scale = float(rng.uniform(0.01, 100.0)) * (1 if rng.integers(0, 2) else -1)
            samples = rng.normal(size=width * height * (3 if color else 1))
            image = (
                PFMBuilder()
                .size(int(width), int(height))
                .color(color)
                .scale(scale)
                .data(samples)
                .build()
            )
            assert pxm.decode(pxm.encode(image)) == image

    def test_bytes_stable(self):
        data = b"PF\n2 1\n-1\n" + le(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
        assert pxm.encode(pxm.decode(data)) == data

    def test_largest_float32_scale(self):
        largest = float(np.finfo(np.float32).max)
        for scale in (largest, -largest):
            image = PFMBuilder().size(1, 1).color(False).scale(scale).data([1.0]).build()
            assert pxm.decode(pxm.encode(image)) == image

    def test_smallest_float32_scale(self):
        tiny = float(np.finfo(np.float32).smallest_subnormal)
        image = PFMBuilder().size(1, 1).color(False).scale(tiny).data([1.0]).build()
        assert pxm.decode(pxm.encode(image)) == image
