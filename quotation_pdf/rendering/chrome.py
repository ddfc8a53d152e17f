# quotation_pdf/rendering/chrome.py
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from quotation_pdf.models import LoadedImage
from quotation_pdf.rendering.base import (
    COLOR_A,
    COLOR_B,
    FONT_BOLD,
    FONT_REGULAR,
    FOOTER_BOX_H,
    FOOTER_BOX_INSET,
    FOOTER_BOX_TOP_FROM_BOTTOM,
    FOOTER_FS,
    FOOTER_TEXT_FROM_BOTTOM,
    HEADER_ADDRESS_FS,
    HEADER_ADDRESS_LINE_FACTOR,
    HEADER_ADDRESS_Y,
    HEADER_GRAY,
    HEADER_NAME_FS,
    HEADER_NAME_Y,
    HEADER_RULE_Y1,
    HEADER_RULE_Y2,
    INNER_BORDER_INSET,
    INNER_BORDER_W,
    LOGO_H,
    LOGO_W,
    LOGO_X,
    LOGO_Y,
    OUTER_BORDER_INSET,
    OUTER_BORDER_W,
    PageSpec,
)


@dataclass(frozen=True)
class ChromeText:
    company_name: str
    company_address: str
    contact_line: str


class PageChrome:
    """
    Draws the fixed frame every page carries: double border, footer contact
    strip, header band with logo and company address, and the two accent rules.

    The page-number stamp region (bottom right) is left empty here and filled
    by the numbering pass once the page count is known.
    """

    def __init__(self, ps: PageSpec, text: ChromeText, logo: Optional[LoadedImage] = None):
        self.ps = ps
        self.text = text
        self.logo = logo
        self._logo_reader = ImageReader(io.BytesIO(logo.encoded_bytes)) if logo else None

    def draw(self, c: canvas.Canvas) -> None:
        c.saveState()
        try:
            self._draw_borders(c)
            self._draw_footer(c)
            self._draw_header(c)
        finally:
            c.restoreState()

    def _draw_borders(self, c: canvas.Canvas) -> None:
        ps = self.ps

        c.setStrokeColor(COLOR_A)
        c.setLineWidth(OUTER_BORDER_W * mm)
        c.rect(
            ps.px(OUTER_BORDER_INSET),
            ps.py(ps.h - OUTER_BORDER_INSET),
            (ps.w - 2 * OUTER_BORDER_INSET) * mm,
            (ps.h - 2 * OUTER_BORDER_INSET) * mm,
            stroke=1,
            fill=0,
        )

        c.setStrokeColor(COLOR_B)
        c.setLineWidth(INNER_BORDER_W * mm)
        c.rect(
            ps.px(INNER_BORDER_INSET),
            ps.py(ps.h - INNER_BORDER_INSET),
            (ps.w - 2 * INNER_BORDER_INSET) * mm,
            (ps.h - 2 * INNER_BORDER_INSET) * mm,
            stroke=1,
            fill=0,
        )

    def _draw_footer(self, c: canvas.Canvas) -> None:
        ps = self.ps

        box_x = ps.x0 + FOOTER_BOX_INSET
        box_w = ps.content_w - 2 * FOOTER_BOX_INSET
        box_top = ps.h - FOOTER_BOX_TOP_FROM_BOTTOM

        c.setStrokeColor(colors.black)
        c.setLineWidth(0.3 * mm)
        c.rect(ps.px(box_x), ps.py(box_top + FOOTER_BOX_H), box_w * mm, FOOTER_BOX_H * mm, stroke=1, fill=0)

        c.setFillColor(colors.black)
        c.setFont(FONT_BOLD, FOOTER_FS)
        c.drawCentredString(ps.px(ps.w / 2.0), ps.py(ps.h - FOOTER_TEXT_FROM_BOTTOM), self.text.contact_line)

    def _draw_header(self, c: canvas.Canvas) -> None:
        ps = self.ps

        if self._logo_reader is not None:
            c.drawImage(
                self._logo_reader,
                ps.px(LOGO_X),
                ps.py(LOGO_Y + LOGO_H),
                width=LOGO_W * mm,
                height=LOGO_H * mm,
                preserveAspectRatio=True,
                anchor="nw",
            )

        c.setFillColor(COLOR_A)
        c.setFont(FONT_BOLD, HEADER_NAME_FS)
        c.drawRightString(ps.px(ps.x1), ps.py(HEADER_NAME_Y), self.text.company_name)

        c.setFillColor(HEADER_GRAY)
        c.setFont(FONT_REGULAR, HEADER_ADDRESS_FS)
        line_h = HEADER_ADDRESS_FS * HEADER_ADDRESS_LINE_FACTOR / mm  # pt -> mm
        y = HEADER_ADDRESS_Y
        for ln in (self.text.company_address or "").split("\n"):
            ln = ln.strip()
            if ln:
                c.drawRightString(ps.px(ps.x1), ps.py(y), ln)
            y += line_h

        c.setLineWidth(0.2 * mm)
        c.setStrokeColor(COLOR_A)
        c.line(ps.px(ps.x0), ps.py(HEADER_RULE_Y1), ps.px(ps.x1), ps.py(HEADER_RULE_Y1))
        c.setStrokeColor(COLOR_B)
        c.line(ps.px(ps.x0), ps.py(HEADER_RULE_Y2), ps.px(ps.x1), ps.py(HEADER_RULE_Y2))
