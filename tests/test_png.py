from __future__ import annotations

import base64
import struct

import pytest

from pdfpng.errors import PNGFormatError
from pdfpng.png import (
    ColorType,
    GrayscaleTransparency,
    IndexedTransparency,
    PNG,
    RGBTransparency,
    iter_chunks,
    parse_png,
)

from pngdata import SIGNATURE, build_png, ihdr, png_chunk


SAMPLE_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAIAAACQd1PeAAAADElEQVR4nGP4z8AAAAMBAQDJ/pLvAAAAAElFTkSuQmCC"
)


def test_parse_png_metadata() -> None:
    parsed = parse_png(SAMPLE_PNG)
    assert parsed.width == 1
    assert parsed.height == 1
    assert parsed.bits == 8
    assert parsed.color_type == ColorType.RGB
    assert parsed.img_data
    assert parsed.palette == b""
    assert parsed.transparency is None
    assert parsed.alpha_channel is None


def test_rgb_header_properties() -> None:
    parsed = parse_png(SIGNATURE + ihdr(10, 10, 8, 2) + png_chunk(b"IEND", b""))
    assert (parsed.width, parsed.height, parsed.bits) == (10, 10, 8)
    assert parsed.colors == 3
    assert parsed.pixel_bitlength == 24
    assert parsed.has_alpha_channel is False


@pytest.mark.parametrize(
    "color_type, bits, colors, bitlength, alpha",
    [
        (0, 1, 1, 1, False),
        (3, 4, 1, 4, False),
        (4, 8, 1, 16, True),
        (6, 8, 3, 32, True),
        (6, 16, 3, 64, True),
    ],
)
def test_derived_properties(color_type: int, bits: int, colors: int, bitlength: int, alpha: bool) -> None:
    parsed = parse_png(SIGNATURE + ihdr(2, 2, bits, color_type) + png_chunk(b"IEND", b""))
    assert parsed.colors == colors
    assert parsed.pixel_bitlength == bitlength
    assert parsed.has_alpha_channel is alpha
    assert parsed.alpha_channel_bits == 8


def test_unknown_color_type_has_no_color_count() -> None:
    parsed = parse_png(SIGNATURE + ihdr(2, 2, 8, 5) + png_chunk(b"IEND", b""))
    assert parsed.colors is None


def test_idat_chunks_are_concatenated_in_order() -> None:
    data = (
        SIGNATURE
        + ihdr(1, 1)
        + png_chunk(b"IDAT", b"first-")
        + png_chunk(b"tEXt", b"Comment\x00ignored")
        + png_chunk(b"IDAT", b"second")
        + png_chunk(b"IEND", b"")
    )
    assert parse_png(data).img_data == b"first-second"


def test_palette_chunks_accumulate() -> None:
    data = (
        SIGNATURE
        + ihdr(1, 1, 8, 3)
        + png_chunk(b"PLTE", bytes([255, 0, 0]))
        + png_chunk(b"PLTE", bytes([0, 255, 0]))
        + png_chunk(b"IEND", b"")
    )
    assert parse_png(data).palette == bytes([255, 0, 0, 0, 255, 0])


def test_indexed_transparency_is_padded_to_256_entries() -> None:
    data = SIGNATURE + ihdr(1, 1, 8, 3) + png_chunk(b"tRNS", bytes([10, 20, 30])) + png_chunk(b"IEND", b"")
    transparency = parse_png(data).transparency
    assert isinstance(transparency, IndexedTransparency)
    assert len(transparency.alphas) == 256
    assert transparency.alphas[:3] == [10, 20, 30]
    assert all(value == 255 for value in transparency.alphas[3:])


def test_indexed_transparency_is_not_truncated() -> None:
    payload = bytes(range(256)) + bytes([1, 2, 3])
    data = SIGNATURE + ihdr(1, 1, 8, 3) + png_chunk(b"tRNS", payload) + png_chunk(b"IEND", b"")
    transparency = parse_png(data).transparency
    assert isinstance(transparency, IndexedTransparency)
    assert len(transparency.alphas) == 259
    assert transparency.alphas[-3:] == [1, 2, 3]


def test_grayscale_transparency_key() -> None:
    data = SIGNATURE + ihdr(1, 1, 16, 0) + png_chunk(b"tRNS", struct.pack(">H", 0x1234)) + png_chunk(b"IEND", b"")
    assert parse_png(data).transparency == GrayscaleTransparency(0x1234)


def test_rgb_transparency_key_ignores_extra_bytes() -> None:
    payload = struct.pack(">HHH", 1, 2, 3) + b"\xff\xff"
    data = SIGNATURE + ihdr(1, 1, 8, 2) + png_chunk(b"tRNS", payload) + png_chunk(b"IEND", b"")
    assert parse_png(data).transparency == RGBTransparency((1, 2, 3))


@pytest.mark.parametrize(
    "color_type, payload",
    [
        (0, b"\x07"),
        (0, b""),
        (2, b"\x00\x01"),
        (2, b"\x00\x01\x00\x02\x00"),
    ],
)
def test_short_transparency_key_is_ignored(color_type: int, payload: bytes) -> None:
    data = SIGNATURE + ihdr(1, 1, 8, color_type) + png_chunk(b"tRNS", payload) + png_chunk(b"IEND", b"")
    parsed = parse_png(data)
    assert parsed.transparency is None
    assert parsed.width == 1


def test_buffers_accumulate_on_the_descriptor() -> None:
    png = PNG()
    png._consume(b"IDAT", b"ab")
    png._consume(b"PLTE", b"\x01\x02\x03")
    png._consume(b"IDAT", b"cd")
    assert png.img_data == b"abcd"
    assert png.palette == b"\x01\x02\x03"


def test_transparency_before_header_is_ignored() -> None:
    data = SIGNATURE + png_chunk(b"tRNS", bytes([1, 2])) + ihdr(1, 1, 8, 3) + png_chunk(b"IEND", b"")
    assert parse_png(data).transparency is None


def test_transparency_for_alpha_color_types_is_dropped() -> None:
    data = SIGNATURE + ihdr(1, 1, 8, 6) + png_chunk(b"tRNS", b"\x00\x01") + png_chunk(b"IEND", b"")
    assert parse_png(data).transparency is None


def test_missing_iend_raises_format_error() -> None:
    data = SIGNATURE + ihdr(1, 1) + png_chunk(b"IDAT", b"abc")
    with pytest.raises(PNGFormatError):
        parse_png(data)


def test_truncated_chunk_payload_raises_format_error() -> None:
    data = SIGNATURE + ihdr(1, 1) + struct.pack(">I", 100) + b"IDAT" + b"short"
    with pytest.raises(PNGFormatError):
        parse_png(data)


def test_empty_input_raises_format_error() -> None:
    with pytest.raises(PNGFormatError):
        parse_png(b"")


def test_signature_and_crc_are_not_validated() -> None:
    bad_crc_header = ihdr(3, 4)[:-4] + b"\x00\x00\x00\x00"
    data = b"NOTAPNG!" + bad_crc_header + png_chunk(b"IEND", b"")
    parsed = parse_png(data)
    assert (parsed.width, parsed.height) == (3, 4)


def test_iend_without_crc_is_accepted() -> None:
    data = SIGNATURE + ihdr(1, 1) + struct.pack(">I", 0) + b"IEND"
    assert parse_png(data).width == 1


def test_chunks_after_iend_are_not_read() -> None:
    data = SIGNATURE + ihdr(1, 1) + png_chunk(b"IEND", b"") + png_chunk(b"IDAT", b"late")
    assert parse_png(data).img_data == b""


def test_iter_chunks_yields_tags_in_stream_order() -> None:
    data = build_png(1, 1, [b"\x00\x00\x00"])
    tags = [tag for tag, _ in iter_chunks(data)]
    assert tags == [b"IHDR", b"IDAT", b"IEND"]


def test_unsupported_methods_are_accepted_while_parsing() -> None:
    data = SIGNATURE + ihdr(1, 1, compression=1, filter_method=1, interlace=1) + png_chunk(b"IEND", b"")
    parsed = parse_png(data)
    assert parsed.compression_method == 1
    assert parsed.filter_method == 1
    assert parsed.interlace_method == 1


def test_split_alpha_channel_ignores_images_without_alpha() -> None:
    parsed = parse_png(SAMPLE_PNG)
    original = parsed.img_data
    parsed.split_alpha_channel()
    assert parsed.img_data == original
    assert parsed.alpha_channel is None
