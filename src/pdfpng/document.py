"""In-memory PDF object store that image objects are built into."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .primitives import PDFName, PDFObject
from .serializer import write_pdf

logger = logging.getLogger(__name__)

BASELINE_PDF_VERSION = 1.3


class PDFDocument:
    """Owns numbered PDF objects and the minimum version they require.

    A catalog and an empty page tree are created up front so that
    :meth:`render` always produces a well-formed file; the image objects
    added through :meth:`ref` are written as unreferenced indirect objects.
    """

    def __init__(self, version: float = BASELINE_PDF_VERSION):
        self.version = version
        self._objects: List[PDFObject] = []
        self.pages = self.ref({"Type": PDFName("Pages"), "Kids": [], "Count": 0})
        self.catalog = self.ref({"Type": PDFName("Catalog"), "Pages": self.pages})

    @property
    def objects(self) -> List[PDFObject]:
        return list(self._objects)

    def ref(self, data: Optional[Dict[str, Any]] = None) -> PDFObject:
        """Allocate a new indirect object holding *data*."""

        obj = PDFObject(obj_id=len(self._objects) + 1, generation=0, data=data if data is not None else {})
        self._objects.append(obj)
        return obj

    def min_version(self, version: float) -> None:
        """Raise the document version to at least *version*."""

        if version > self.version:
            logger.debug("Raising PDF version from %.1f to %.1f", self.version, version)
            self.version = version

    def render(self) -> bytes:
        return write_pdf(self._objects, {"Root": self.catalog}, version=self.version)


__all__ = ["BASELINE_PDF_VERSION", "PDFDocument"]
