"""Turn a parsed :class:`~pdfpng.png.PNG` into PDF image XObjects."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .config import EmbedOptions
from .document import PDFDocument
from .errors import UnsupportedImageType
from .png import PNG, GrayscaleTransparency, IndexedTransparency, RGBTransparency, parse_png
from .primitives import PDFName, PDFObject

logger = logging.getLogger(__name__)

PDF_VERSION_BASELINE = 1.0
PDF_VERSION_SOFT_MASK = 1.4
PDF_VERSION_16_BIT = 1.5


def min_pdf_version(png: PNG) -> float:
    """Return the minimum PDF version required to display *png*."""

    if png.bits > 8:
        # 16-bit components need PDF 1.5 (ISO 32000-1:2008 8.9.5.1)
        return PDF_VERSION_16_BIT
    if png.has_alpha_channel:
        return PDF_VERSION_SOFT_MASK
    return PDF_VERSION_BASELINE


def _check_supported(png: PNG) -> PDFName:
    if png.compression_method != 0:
        raise UnsupportedImageType("PNG uses an unsupported compression method")
    if png.filter_method != 0:
        raise UnsupportedImageType("PNG uses an unsupported filter method")
    if png.interlace_method != 0:
        raise UnsupportedImageType("PNG uses unsupported interlace method")

    if png.colors == 1:
        return PDFName("DeviceGray")
    if png.colors == 3:
        return PDFName("DeviceRGB")
    raise UnsupportedImageType(f"PNG uses an unsupported number of colors ({png.colors})")


def _color_key_mask(png: PNG) -> Optional[List[int]]:
    transparency = png.transparency
    if isinstance(transparency, GrayscaleTransparency):
        return [transparency.value, transparency.value]
    if isinstance(transparency, RGBTransparency):
        return [value for value in transparency.values for _ in range(2)]
    if isinstance(transparency, IndexedTransparency):
        # Palette alphas would need a soft mask built from the palette indices.
        logger.debug("Indexed PNG transparency is not translated into a PDF mask")
    return None


def build_pdf_object(png: PNG, document: PDFDocument, options: Optional[EmbedOptions] = None) -> PDFObject:
    """Build the image XObject for *png* in *document* and return it.

    Interleaved alpha is split out first, so the returned object carries an
    ``/SMask`` for grey+alpha and RGBA images. Unseparated data keeps its PNG
    row filters and is described with ``/DecodeParms`` so the reader can undo
    them.
    """

    color = _check_supported(png)
    png.split_alpha_channel(options)

    obj = document.ref(
        {
            "Type": PDFName("XObject"),
            "Subtype": PDFName("Image"),
            "Height": png.height,
            "Width": png.width,
            "BitsPerComponent": png.bits,
            "Length": len(png.img_data),
            "Filter": PDFName("FlateDecode"),
        }
    )

    if png.alpha_channel is None:
        obj.data["DecodeParms"] = {
            "Predictor": 15,
            "Colors": png.colors,
            "BitsPerComponent": png.bits,
            "Columns": png.width,
        }

    obj << png.img_data

    if not png.palette:
        obj.data["ColorSpace"] = color
    else:
        palette_obj = document.ref({"Length": len(png.palette)})
        palette_obj << png.palette
        obj.data["ColorSpace"] = [
            PDFName("Indexed"),
            PDFName("DeviceRGB"),
            len(png.palette) // 3 - 1,
            palette_obj,
        ]

    mask = _color_key_mask(png)
    if mask is not None:
        obj.data["Mask"] = mask

    if png.alpha_channel is not None:
        smask_obj = document.ref(
            {
                "Type": PDFName("XObject"),
                "Subtype": PDFName("Image"),
                "Height": png.height,
                "Width": png.width,
                "BitsPerComponent": png.alpha_channel_bits,
                "Length": len(png.alpha_channel),
                "Filter": PDFName("FlateDecode"),
                "ColorSpace": PDFName("DeviceGray"),
                "Decode": [0, 1],
            }
        )
        smask_obj << png.alpha_channel
        obj.data["SMask"] = smask_obj

    logger.debug(
        "Built image object %d for %dx%d PNG (colour type %s)",
        obj.obj_id,
        png.width,
        png.height,
        png.color_type,
    )
    return obj


def embed_png(
    document: PDFDocument, data: bytes, options: Optional[EmbedOptions] = None
) -> Tuple[PNG, PDFObject]:
    """Parse *data*, raise the document version as needed and embed the image."""

    png = parse_png(data)
    obj = build_pdf_object(png, document, options)
    document.min_version(min_pdf_version(png))
    return png, obj


__all__ = [
    "PDF_VERSION_16_BIT",
    "PDF_VERSION_BASELINE",
    "PDF_VERSION_SOFT_MASK",
    "build_pdf_object",
    "embed_png",
    "min_pdf_version",
]
