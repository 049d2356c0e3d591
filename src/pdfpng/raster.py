"""Scanline decoding used to pull the alpha channel out of PNG image data.

PDF has no pixel format with interleaved alpha, so grey+alpha and RGBA PNGs
are inflated, unfiltered and split into a colour stream and an 8-bit alpha
stream, each deflated again on its own.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple
import zlib

from .config import EmbedOptions
from .errors import PNGFormatError, UnsupportedImageType

logger = logging.getLogger(__name__)

FILTER_NONE = 0
FILTER_SUB = 1
FILTER_UP = 2
FILTER_AVERAGE = 3
FILTER_PAETH = 4


def _paeth(a: int, b: int, c: int) -> int:
    p = a + b - c
    pa = abs(p - a)
    pb = abs(p - b)
    pc = abs(p - c)
    if pa <= pb and pa <= pc:
        return a
    if pb <= pc:
        return b
    return c


def unfilter_scanline(filter_type: int, line: bytes, prev: Optional[bytes], fu: int) -> bytearray:
    """Reverse the PNG filter of one scanline.

    *line* excludes the leading filter byte, *prev* is the previous
    unfiltered scanline (``None`` for the first row) and *fu* is the filter
    unit, i.e. the number of bytes per complete pixel (at least 1).
    """

    out = bytearray(line)
    if filter_type == FILTER_NONE:
        return out
    if prev is None:
        prev = bytes(len(line))

    if filter_type == FILTER_SUB:
        for i in range(fu, len(out)):
            out[i] = (out[i] + out[i - fu]) & 0xFF
    elif filter_type == FILTER_UP:
        for i in range(len(out)):
            out[i] = (out[i] + prev[i]) & 0xFF
    elif filter_type == FILTER_AVERAGE:
        for i in range(len(out)):
            a = out[i - fu] if i >= fu else 0
            out[i] = (out[i] + ((a + prev[i]) >> 1)) & 0xFF
    elif filter_type == FILTER_PAETH:
        for i in range(len(out)):
            if i >= fu:
                a = out[i - fu]
                c = prev[i - fu]
            else:
                a = c = 0
            out[i] = (out[i] + _paeth(a, prev[i], c)) & 0xFF
    else:
        raise PNGFormatError(f"Invalid PNG scanline filter type {filter_type}")
    return out


def decode_scanlines(raw: bytes, width: int, height: int, bits_per_pixel: int) -> List[bytes]:
    """Split inflated IDAT data into *height* unfiltered scanlines."""

    stride = (width * bits_per_pixel + 7) // 8
    fu = max(1, bits_per_pixel // 8)
    if len(raw) < height * (stride + 1):
        raise PNGFormatError(
            f"PNG image data is too short: expected {height * (stride + 1)} bytes, got {len(raw)}"
        )

    rows: List[bytes] = []
    prev: Optional[bytes] = None
    offset = 0
    for _ in range(height):
        filter_type = raw[offset]
        line = raw[offset + 1 : offset + 1 + stride]
        offset += stride + 1
        current = bytes(unfilter_scanline(filter_type, line, prev, fu))
        rows.append(current)
        prev = current
    return rows


def unfilter_image_data(
    img_data: bytes,
    width: int,
    height: int,
    bits: int,
    colors: int,
    options: Optional[EmbedOptions] = None,
) -> Tuple[bytes, bytes]:
    """Separate interleaved colour and alpha samples.

    Returns ``(color_stream, alpha_stream)``, both deflated. The colour stream
    keeps the source bit depth and carries no PNG filter bytes. The alpha
    stream is always 8 bits per sample: for 16-bit images only the most
    significant byte of each alpha sample is kept.
    """

    options = options or EmbedOptions()
    if options.max_pixels is not None and width * height > options.max_pixels:
        raise UnsupportedImageType(
            f"PNG is {width}x{height}, larger than the configured limit of {options.max_pixels} pixels"
        )
    if bits not in (8, 16):
        raise PNGFormatError(f"PNG images with an alpha channel must be 8 or 16 bit, not {bits}")

    try:
        raw = zlib.decompress(img_data)
    except zlib.error as exc:
        raise PNGFormatError(f"PNG image data could not be inflated: {exc}") from exc

    sample_bytes = bits // 8
    color_bytes = sample_bytes * colors
    pixel_bytes = color_bytes + sample_bytes
    rows = decode_scanlines(raw, width, height, pixel_bytes * 8)

    color = bytearray()
    alpha = bytearray()
    for row in rows:
        color_row = bytearray(width * color_bytes)
        for k in range(color_bytes):
            color_row[k::color_bytes] = row[k::pixel_bytes]
        color.extend(color_row)
        # Big-endian samples: the first alpha byte is the most significant one.
        alpha.extend(row[color_bytes::pixel_bytes])

    logger.debug(
        "Separated alpha channel of %dx%d image: %d colour bytes, %d alpha bytes",
        width,
        height,
        len(color),
        len(alpha),
    )
    level = options.compression_level
    return zlib.compress(bytes(color), level), zlib.compress(bytes(alpha), level)


__all__ = [
    "FILTER_AVERAGE",
    "FILTER_NONE",
    "FILTER_PAETH",
    "FILTER_SUB",
    "FILTER_UP",
    "decode_scanlines",
    "unfilter_image_data",
    "unfilter_scanline",
]
