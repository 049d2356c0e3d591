"""Write image objects and their document skeleton as PDF file syntax."""

from __future__ import annotations

import io
from typing import Dict, Iterable, List

from .primitives import PDFName, PDFObject, PDFReference


def _format_number(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    return ("%.6f" % value).rstrip("0").rstrip(".")


def serialize(value) -> bytes:
    """Serialise names, references, numbers, dictionaries and arrays.

    A :class:`PDFObject` found inside another value is written as an indirect
    reference, which is how palettes and soft masks hang off their image.
    """

    if isinstance(value, PDFObject):
        value = value.reference
    if isinstance(value, PDFName):
        return str(value).encode("latin-1")
    if isinstance(value, PDFReference):
        return f"{value.obj_id} {value.generation} R".encode("ascii")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _format_number(value).encode("ascii")
    if isinstance(value, dict):
        entries = b"".join(
            serialize(PDFName(key) if isinstance(key, str) else key) + b" " + serialize(item) + b"\n"
            for key, item in value.items()
        )
        return b"<<" + entries + b">>"
    if isinstance(value, (list, tuple)):
        return b"[" + b" ".join(serialize(item) for item in value) + b"]"
    raise TypeError(f"Cannot write {type(value).__name__} values into an image object")


def _write_object(buffer: io.BytesIO, obj: PDFObject) -> None:
    if obj.stream is not None and isinstance(obj.data, dict):
        obj.data["Length"] = len(obj.stream.data)
    buffer.write(f"{obj.obj_id} {obj.generation} obj\n".encode("ascii"))
    buffer.write(serialize(obj.data))
    if obj.stream is not None:
        buffer.write(b"\nstream\n" + obj.stream.data + b"\nendstream")
    buffer.write(b"\nendobj\n")


def write_pdf(objects: Iterable[PDFObject], trailer: Dict[str, object], version: float = 1.3) -> bytes:
    """Assemble a complete file: header, numbered objects, xref and trailer.

    Object ids are expected to run from 1 without gaps, as handed out by
    :class:`pdfpng.document.PDFDocument`.
    """

    ordered = sorted(objects, key=lambda obj: obj.obj_id)
    buffer = io.BytesIO()
    buffer.write(f"%PDF-{version:.1f}\n%\xE2\xE3\xCF\xD3\n".encode("latin-1"))

    offsets: List[int] = []
    for obj in ordered:
        offsets.append(buffer.tell())
        _write_object(buffer, obj)

    startxref = buffer.tell()
    size = len(ordered) + 1
    xref = [f"xref\n0 {size}\n", "0000000000 65535 f \n"]
    xref.extend(f"{offset:010d} 00000 n \n" for offset in offsets)
    buffer.write("".join(xref).encode("ascii"))
    buffer.write(b"trailer\n" + serialize(dict(trailer, Size=size)))
    buffer.write(f"\nstartxref\n{startxref}\n%%EOF\n".encode("ascii"))
    return buffer.getvalue()


__all__ = ["serialize", "write_pdf"]
