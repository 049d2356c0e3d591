"""PDF primitive data structures used when embedding images.

Only the handful of object kinds an image XObject needs are modelled here:
names, indirect references, streams and the numbered objects that own them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PDFName:
    """A name such as ``/DeviceGray`` or ``/FlateDecode``, kept without its slash."""

    value: str

    def __str__(self) -> str:
        return "/" + self.value


@dataclass(frozen=True)
class PDFReference:
    """Points at a numbered object; written as ``<id> <generation> R``."""

    obj_id: int
    generation: int = 0


@dataclass
class PDFStream:
    """Raw bytes attached to a stream object."""

    data: bytes = b""


@dataclass(eq=False)
class PDFObject:
    """A numbered object owned by a :class:`pdfpng.document.PDFDocument`.

    Attributes
    ----------
    obj_id:
        Integer identifier of the object.
    generation:
        Generation number (always ``0`` for objects we create).
    data:
        Python representation of the object value, usually a dictionary keyed
        by name strings.
    stream:
        Optional :class:`PDFStream` holding the stream bytes.
    """

    obj_id: int
    generation: int
    data: Any
    stream: PDFStream | None = None

    @property
    def reference(self) -> PDFReference:
        return PDFReference(self.obj_id, self.generation)

    def append(self, data: bytes) -> "PDFObject":
        """Append *data* to the object's stream, creating it if needed."""

        if self.stream is None:
            self.stream = PDFStream(bytes(data))
        else:
            self.stream.data += data
        return self

    def __lshift__(self, data: bytes) -> "PDFObject":
        return self.append(data)

    def __repr__(self) -> str:
        return f"PDFObject({self.obj_id}, {self.generation})"


__all__ = ["PDFName", "PDFObject", "PDFReference", "PDFStream"]
