# quotation_pdf/rendering/page_numbers.py
from __future__ import annotations

import io

from pypdf import PdfReader, PdfWriter
from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from quotation_pdf.rendering.base import FONT_REGULAR, PAGE_MARGIN, PAGE_NO_FROM_BOTTOM, PAGE_NO_FS

# Stamp region, mm: from the right margin leftwards, around the stamp baseline.
STAMP_REGION_W = 40.0
STAMP_REGION_ABOVE = 3.2
STAMP_REGION_BELOW = 0.5


def page_label(page_no: int, total_pages: int) -> str:
    return f"Page {page_no} of {total_pages}"


def stamp_page_numbers(pdf_bytes: bytes) -> tuple[bytes, int]:
    """
    Overlay "Page i of N" on every page once the page count is final.
    Only the stamp region at the bottom right is painted; everything else on
    the page is left as drawn.
    """
    reader = PdfReader(io.BytesIO(pdf_bytes))
    writer = PdfWriter()
    total = len(reader.pages)

    for idx, page in enumerate(reader.pages):
        w = float(page.mediabox.width)
        h = float(page.mediabox.height)

        x_right = w - PAGE_MARGIN * mm
        baseline = PAGE_NO_FROM_BOTTOM * mm

        overlay_buf = io.BytesIO()
        c = canvas.Canvas(overlay_buf, pagesize=(w, h), invariant=1)

        c.setFillColor(colors.white)
        c.rect(
            x_right - STAMP_REGION_W * mm,
            baseline - STAMP_REGION_BELOW * mm,
            STAMP_REGION_W * mm,
            (STAMP_REGION_ABOVE + STAMP_REGION_BELOW) * mm,
            stroke=0,
            fill=1,
        )

        c.setFillColor(colors.black)
        c.setFont(FONT_REGULAR, PAGE_NO_FS)
        c.drawRightString(x_right, baseline, page_label(idx + 1, total))

        c.save()
        overlay_buf.seek(0)

        overlay_page = PdfReader(overlay_buf).pages[0]
        # merge into the writer's copy; reader pages cannot take new contents
        stamped = writer.add_page(page)
        stamped.merge_page(overlay_page)

    out = io.BytesIO()
    writer.write(out)
    return out.getvalue(), total
