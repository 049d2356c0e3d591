"""Exceptions raised while reading PNG data or embedding it in a PDF."""

from __future__ import annotations


class PNGError(ValueError):
    """Base class for every error raised by pdfpng."""


class PNGFormatError(PNGError):
    """Raised when the PNG byte stream is truncated or malformed."""


class UnsupportedImageType(PNGError):
    """Raised when a PNG uses features that cannot be embedded in a PDF."""


__all__ = ["PNGError", "PNGFormatError", "UnsupportedImageType"]
