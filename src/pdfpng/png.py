"""Minimal PNG reader that extracts what a PDF writer needs to embed an image.

The reader walks the chunk stream once, collecting the header fields, the
palette, the still-compressed IDAT data and any ``tRNS`` transparency. It does
not verify the signature or the chunk CRCs and it does not enforce chunk
ordering. Whether the image can actually be embedded is decided later, when
:func:`pdfpng.embed.build_pdf_object` is called.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
import logging
import struct
from typing import Iterator, List, Optional, Tuple, Union

from .config import EmbedOptions
from .errors import PNGFormatError
from .raster import unfilter_image_data

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
INDEXED_PALETTE_SIZE = 256


class ColorType(IntEnum):
    GRAYSCALE = 0
    RGB = 2
    INDEXED = 3
    GRAYSCALE_ALPHA = 4
    RGBA = 6


@dataclass
class IndexedTransparency:
    """One alpha value per palette entry, padded with opaque entries."""

    alphas: List[int]


@dataclass
class GrayscaleTransparency:
    """A single grey sample value that is fully transparent."""

    value: int


@dataclass
class RGBTransparency:
    """A single RGB sample triple that is fully transparent."""

    values: Tuple[int, int, int]


Transparency = Union[IndexedTransparency, GrayscaleTransparency, RGBTransparency]


def iter_chunks(data: bytes) -> Iterator[Tuple[bytes, bytes]]:
    """Yield ``(tag, payload)`` pairs up to and including ``IEND``.

    The 8-byte signature is skipped unchecked and each chunk's CRC is read
    but discarded. Running out of input before ``IEND`` raises
    :class:`PNGFormatError`.
    """

    view = memoryview(data)
    offset = len(PNG_SIGNATURE)
    while True:
        if offset + 8 > len(view):
            raise PNGFormatError("Unexpected end of PNG data before IEND chunk")
        (length,) = struct.unpack_from(">I", view, offset)
        tag = bytes(view[offset + 4 : offset + 8])
        offset += 8
        if offset + length > len(view):
            raise PNGFormatError(f"PNG chunk {tag!r} is truncated")
        payload = bytes(view[offset : offset + length])
        offset += length
        if tag == b"IEND":
            yield tag, payload
            return
        if offset + 4 > len(view):
            raise PNGFormatError(f"PNG chunk {tag!r} is missing its CRC")
        # skip CRC (4 bytes)
        offset += 4
        yield tag, payload


def _parse_transparency(color_type: Optional[int], payload: bytes) -> Optional[Transparency]:
    if color_type == ColorType.INDEXED:
        alphas = list(payload)
        short = INDEXED_PALETTE_SIZE - len(alphas)
        if short > 0:
            alphas.extend([255] * short)
        return IndexedTransparency(alphas)
    if color_type == ColorType.GRAYSCALE and len(payload) >= 2:
        (value,) = struct.unpack_from(">H", payload)
        return GrayscaleTransparency(value)
    if color_type == ColorType.RGB and len(payload) >= 6:
        return RGBTransparency(struct.unpack_from(">HHH", payload))
    if color_type in (ColorType.GRAYSCALE, ColorType.RGB):
        logger.debug("Ignoring %d-byte tRNS chunk, too short for a colour key", len(payload))
    return None


@dataclass
class PNG:
    """Metadata and data buffers of a PNG image, ready for PDF embedding.

    Build one with :meth:`PNG.from_bytes` (or :func:`parse_png`). The palette
    and IDAT buffers accumulate across repeated chunks of the same type.
    """

    width: int = 0
    height: int = 0
    bits: int = 0
    color_type: Optional[int] = None
    compression_method: int = 0
    filter_method: int = 0
    interlace_method: int = 0
    palette: bytearray = field(default_factory=bytearray, repr=False)
    img_data: bytearray = field(default_factory=bytearray, repr=False)
    transparency: Optional[Transparency] = None
    alpha_channel: Optional[bytes] = None
    scaled_width: Optional[float] = None
    scaled_height: Optional[float] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "PNG":
        png = cls()
        for tag, payload in iter_chunks(data):
            png._consume(tag, payload)
        logger.debug(
            "Read PNG %dx%d, %d-bit, colour type %s, %d bytes of IDAT",
            png.width,
            png.height,
            png.bits,
            png.color_type,
            len(png.img_data),
        )
        return png

    def _consume(self, tag: bytes, payload: bytes) -> None:
        if tag == b"IHDR":
            try:
                (
                    self.width,
                    self.height,
                    self.bits,
                    self.color_type,
                    self.compression_method,
                    self.filter_method,
                    self.interlace_method,
                ) = struct.unpack_from(">IIBBBBB", payload)
            except struct.error as exc:
                raise PNGFormatError("IHDR chunk is shorter than 13 bytes") from exc
        elif tag == b"PLTE":
            self.palette.extend(payload)
        elif tag == b"IDAT":
            self.img_data.extend(payload)
        elif tag == b"tRNS":
            # The colour type seen so far decides the layout; ordering is not checked.
            self.transparency = _parse_transparency(self.color_type, payload)
        elif tag == b"IEND":
            pass
        else:
            logger.debug("Skipping PNG chunk %r (%d bytes)", tag, len(payload))

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------
    @property
    def colors(self) -> Optional[int]:
        """Number of colour components per pixel, alpha excluded."""

        if self.color_type in (ColorType.GRAYSCALE, ColorType.INDEXED, ColorType.GRAYSCALE_ALPHA):
            return 1
        if self.color_type in (ColorType.RGB, ColorType.RGBA):
            return 3
        return None

    @property
    def pixel_bitlength(self) -> int:
        colors = self.colors or 0
        if self.has_alpha_channel:
            return self.bits * (colors + 1)
        return self.bits * colors

    @property
    def has_alpha_channel(self) -> bool:
        return self.color_type in (ColorType.GRAYSCALE_ALPHA, ColorType.RGBA)

    @property
    def alpha_channel_bits(self) -> int:
        # PDF viewers expect 8-bit soft masks, 16-bit alpha is truncated.
        return 8

    @property
    def is_separated(self) -> bool:
        return self.alpha_channel is not None

    def split_alpha_channel(self, options: Optional[EmbedOptions] = None) -> None:
        """Move interleaved alpha samples out of ``img_data``.

        Afterwards ``img_data`` holds deflated, unfiltered colour samples and
        ``alpha_channel`` holds the deflated 8-bit alpha samples. Images without
        an alpha channel, and images that were already split, are left alone.
        """

        if not self.has_alpha_channel or self.is_separated:
            return
        options = options or EmbedOptions()
        color, self.alpha_channel = unfilter_image_data(
            bytes(self.img_data),
            width=self.width,
            height=self.height,
            bits=self.bits,
            colors=self.colors or 0,
            options=options,
        )
        self.img_data = bytearray(color)


def parse_png(data: bytes) -> PNG:
    """Parse PNG bytes and return the metadata required for PDF embedding."""

    return PNG.from_bytes(data)


__all__ = [
    "ColorType",
    "GrayscaleTransparency",
    "IndexedTransparency",
    "PNG",
    "PNG_SIGNATURE",
    "RGBTransparency",
    "Transparency",
    "iter_chunks",
    "parse_png",
]
