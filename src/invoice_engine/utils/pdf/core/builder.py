"""
PDF object builder: assembles page content streams, fonts and images into PDF bytes.
No timestamps or IDs are written, so equal input gives equal bytes.
"""

from __future__ import annotations

from typing import List, Mapping

from invoice_engine.utils.pdf.core.fonts import BOLD, REGULAR, FontFamily
from invoice_engine.utils.pdf.core.images import PdfImage
from invoice_engine.utils.pdf.core.layout_common import PAGE_H, PAGE_W


def build_pdf_bytes(
    content_streams: List[str],
    family: FontFamily,
    images: Mapping[str, PdfImage] | None = None,
    page_size=(PAGE_W, PAGE_H),
) -> bytes:
    """
    Given list of page content streams (str), return ready-to-write PDF bytes.
    `images` maps XObject names used by `Do` operators to image data; they are shared by all pages.
    """
    streams_bytes = [s.encode("ascii", "ignore") for s in content_streams]

    objs: list[bytes] = [
        f"3 0 obj << /Type /Font /Subtype /Type1 /BaseFont /{family.base_font(REGULAR)} /Encoding /WinAnsiEncoding >> endobj\n".encode("ascii"),
        f"4 0 obj << /Type /Font /Subtype /Type1 /BaseFont /{family.base_font(BOLD)} /Encoding /WinAnsiEncoding >> endobj\n".encode("ascii"),
    ]
    next_obj_id = 5

    xobject_refs: list[str] = []
    for name in sorted(images or {}):
        image = (images or {})[name]
        objs.append(
            f"{next_obj_id} 0 obj << /Type /XObject /Subtype /Image /Width {image.width} /Height {image.height} "
            f"/ColorSpace /DeviceRGB /BitsPerComponent 8 /Filter /FlateDecode /Length {len(image.data)} >> stream\n".encode("ascii")
            + image.data
            + b"\nendstream endobj\n"
        )
        xobject_refs.append(f"/{name} {next_obj_id} 0 R")
        next_obj_id += 1
    xobjects = f" /XObject << {' '.join(xobject_refs)} >>" if xobject_refs else ""

    pages_kids: list[int] = []
    for stream in streams_bytes:
        content_id = next_obj_id
        page_id = next_obj_id + 1
        pages_kids.append(page_id)
        objs.append(f"{content_id} 0 obj << /Length {len(stream)} >> stream\n".encode("ascii") + stream + b"\nendstream endobj\n")
        objs.append(
            f"{page_id} 0 obj << /Type /Page /Parent 2 0 R /MediaBox [0 0 {page_size[0]} {page_size[1]}] /Contents {content_id} 0 R "
            f"/Resources << /Font << {REGULAR} 3 0 R {BOLD} 4 0 R >>{xobjects} >> >> endobj\n".encode("ascii")
        )
        next_obj_id += 2

    kids_ref = " ".join(f"{kid} 0 R" for kid in pages_kids)
    pages_obj = f"2 0 obj << /Type /Pages /Count {len(pages_kids)} /Kids [{kids_ref}] >> endobj\n".encode("ascii")
    catalog_obj = b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"

    objs = [catalog_obj, pages_obj] + objs

    header = b"%PDF-1.4\n"
    offsets = [0]
    pdf_body = bytearray()
    current_offset = len(header)
    for obj in objs:
        offsets.append(current_offset)
        pdf_body += obj
        current_offset += len(obj)

    xref_entries = ["0000000000 65535 f \n"] + [_format_xref_entry(off) for off in offsets[1:]]
    xref = ("xref\n0 %d\n" % len(offsets)).encode("ascii") + "".join(xref_entries).encode("ascii")
    startxref = len(header) + len(pdf_body)
    trailer = f"trailer << /Size {len(offsets)} /Root 1 0 R >>\nstartxref\n{startxref}\n%%EOF\n".encode("ascii")

    return header + bytes(pdf_body) + xref + trailer


def _format_xref_entry(offset: int) -> str:
    return f"{offset:010d} 00000 n \n"
