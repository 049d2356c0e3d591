"""Settings that control how PNG data is reshaped for embedding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

DEFAULT_COMPRESSION_LEVEL = 6


@dataclass(frozen=True)
class EmbedOptions:
    """Tunables for :func:`pdfpng.embed.build_pdf_object`.

    ``compression_level`` is the zlib level used when the colour and alpha
    streams of an image are re-deflated after separation. ``max_pixels``
    caps ``width * height`` for images that need separation, since that step
    holds the whole inflated raster in memory.
    """

    compression_level: int = DEFAULT_COMPRESSION_LEVEL
    max_pixels: Optional[int] = None

    def __post_init__(self) -> None:
        if not -1 <= self.compression_level <= 9:
            raise ValueError(f"compression_level must be between -1 and 9, got {self.compression_level}")
        if self.max_pixels is not None and self.max_pixels <= 0:
            raise ValueError("max_pixels must be a positive integer")

    def to_dict(self) -> Dict[str, object]:
        return {
            "compression_level": self.compression_level,
            "max_pixels": self.max_pixels,
        }

    @classmethod
    def from_mapping(cls, data: Dict[str, object]) -> "EmbedOptions":
        max_pixels = data.get("max_pixels")
        return cls(
            compression_level=int(data.get("compression_level", DEFAULT_COMPRESSION_LEVEL)),
            max_pixels=int(max_pixels) if max_pixels is not None else None,
        )


__all__ = ["DEFAULT_COMPRESSION_LEVEL", "EmbedOptions"]
