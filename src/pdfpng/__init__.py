"""Read PNG images and embed them in PDF documents as image XObjects."""

from .config import EmbedOptions
from .document import PDFDocument
from .embed import build_pdf_object, embed_png, min_pdf_version
from .errors import PNGError, PNGFormatError, UnsupportedImageType
from .png import (
    PNG,
    ColorType,
    GrayscaleTransparency,
    IndexedTransparency,
    RGBTransparency,
    parse_png,
)

__all__ = [
    "ColorType",
    "EmbedOptions",
    "GrayscaleTransparency",
    "IndexedTransparency",
    "PDFDocument",
    "PNG",
    "PNGError",
    "PNGFormatError",
    "RGBTransparency",
    "UnsupportedImageType",
    "build_pdf_object",
    "embed_png",
    "min_pdf_version",
    "parse_png",
]
