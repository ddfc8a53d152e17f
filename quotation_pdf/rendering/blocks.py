# quotation_pdf/rendering/blocks.py
from __future__ import annotations

import io
from datetime import date
from typing import List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Paragraph, Table, TableStyle

from quotation_pdf.models import (
    Currency,
    ImageLayout,
    LineItem,
    LoadedImage,
    Quotation,
    SelectedTerm,
)
from quotation_pdf.rendering.base import (
    BODY_FS,
    BULLET_GLYPH,
    BULLET_TEXT_INDENT,
    COLOR_A,
    FONT_BOLD,
    FONT_REGULAR,
    HEADING_GAP,
    LINE_H,
    SECTION_GAP,
    SIGNATURE_GAP,
    SIGNATURE_LINE_H,
    SUBTITLE_FS,
    SUBTITLE_GAP,
    SUBTITLE_LINE_H,
    TABLE_GAP,
    TABLE_HEADING_GAP,
    TALL_COLUMN_GAP,
    TALL_IMAGE_MAX_H,
    TALL_TEXT_FRACTION,
    TERMS_HEADING_FS,
    TERMS_HEADING_GAP,
    TEXT_ASCENT,
    TITLE_FS,
    TITLE_GAP,
    WIDE_IMAGE_INSET,
    WIDE_IMAGE_MAX_H,
    PageSpec,
)
from quotation_pdf.rendering.cursor import LayoutCursor
from quotation_pdf.rendering.text import clean, format_date, price_cell, wrap_text


OFFER_TITLE = "Technical & Commercial Offer"

CELL_STYLE = ParagraphStyle("cell", fontName=FONT_REGULAR, fontSize=BODY_FS - 1, leading=12)
CELL_BOLD_STYLE = ParagraphStyle("cell_bold", fontName=FONT_BOLD, fontSize=BODY_FS, leading=13)

GRID_COLOR = colors.Color(0.55, 0.55, 0.55)


# =========================
# Drawing helpers
# =========================

def _draw_text(cur: LayoutCursor, x: float, y: float, s: str, font: str = FONT_REGULAR,
               size: float = BODY_FS, color=colors.black, align: str = "left") -> None:
    c, ps = cur.c, cur.ps
    c.setFillColor(color)
    c.setFont(font, size)
    if align == "center":
        c.drawCentredString(ps.px(x), ps.py(y), s)
    elif align == "right":
        c.drawRightString(ps.px(x), ps.py(y), s)
    else:
        c.drawString(ps.px(x), ps.py(y), s)


def _draw_image(cur: LayoutCursor, image: LoadedImage, x: float, top: float, w: float, h: float) -> None:
    ps = cur.ps
    reader = ImageReader(io.BytesIO(image.encoded_bytes))
    cur.c.drawImage(reader, ps.px(x), ps.py(top + h), width=w * mm, height=h * mm)


def fit_image(image: LoadedImage, max_w: float, max_h: float) -> Tuple[float, float]:
    """Largest (w, h) in mm with the image's aspect ratio inside max_w x max_h."""
    w = max_w
    h = w * image.aspect
    if h > max_h:
        h = max_h
        w = h / image.aspect
    return w, h


def _draw_table(cur: LayoutCursor, table: Table, top: float, height: float) -> None:
    ps = cur.ps
    table.drawOn(cur.c, ps.px(ps.x0), ps.py(top + height))


def _measure_table(cur: LayoutCursor, table: Table) -> float:
    ps = cur.ps
    _, h = table.wrapOn(cur.c, ps.content_w * mm, ps.h * mm)
    return h / mm


def _bullet_entries(raw: Sequence[str]) -> List[str]:
    return [clean(x) for x in raw if clean(x)]


def render_bullets(
    cur: LayoutCursor,
    entries: Sequence[str],
    *,
    x: float,
    width: float,
    kind: str,
    item_index: Optional[int] = None,
    heading: Optional[str] = None,
) -> float:
    """
    Bulleted list with per-bullet pagination: every bullet is checked before
    it is drawn and never split across pages. The heading is kept on the same
    page as the first bullet.
    """
    if not entries:
        return cur.y

    text_w = width - BULLET_TEXT_INDENT
    wrapped = [wrap_text(e, FONT_REGULAR, BODY_FS, text_w) or [e] for e in entries]

    if heading:
        cur.ensure_space(HEADING_GAP + len(wrapped[0]) * LINE_H)
        top = cur.y
        _draw_text(cur, x, top, heading, font=FONT_BOLD)
        cur.advance(HEADING_GAP)
        cur.record(f"{kind}_heading", top, cur.y, item_index)

    for lines in wrapped:
        h = len(lines) * LINE_H
        cur.ensure_space(h)
        top = cur.y

        _draw_text(cur, x, top, BULLET_GLYPH)
        y = top
        for ln in lines:
            _draw_text(cur, x + BULLET_TEXT_INDENT, y, ln)
            y += LINE_H

        cur.advance(h)
        cur.record(kind, top, top + h, item_index)

    return cur.y


# =========================
# First page: customer / quotation metadata
# =========================

def render_customer_block(
    cur: LayoutCursor,
    quotation: Quotation,
    validity: Optional[date],
    quote_date: date,
) -> float:
    """Two-cell grid: addressee on the left, quote number/date/validity on the right."""
    ps = cur.ps

    left = "To<br/><br/>" + escape(clean(quotation.customer_name))
    for ln in (quotation.customer_address or "").replace("\r", "\n").split("\n"):
        if clean(ln):
            left += "<br/>" + escape(clean(ln))

    right = (
        f"Quote No : {escape(clean(quotation.quotation_number))}<br/>"
        f"Date : {format_date(quote_date)}<br/>"
        f"Validity : {format_date(validity)}"
    )

    half = ps.content_w / 2.0
    table = Table(
        [[Paragraph(left, CELL_BOLD_STYLE), Paragraph(right, CELL_BOLD_STYLE)]],
        colWidths=[half * mm, half * mm],
    )
    table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ("LEFTPADDING", (0, 0), (-1, -1), 6),
    ]))

    h = _measure_table(cur, table)
    cur.ensure_space(h)
    top = cur.y
    _draw_table(cur, table, top, h)
    cur.record("customer_block", top, top + h)
    return top + h + TABLE_GAP


# =========================
# Per-item sections
# =========================

def render_title(cur: LayoutCursor, item: LineItem, item_index: int) -> float:
    ps = cur.ps
    xc = ps.w / 2.0

    name_lines = wrap_text(f"For {clean(item.name)}", FONT_BOLD, SUBTITLE_FS, ps.content_w)
    name_h = (len(name_lines) - 1) * SUBTITLE_LINE_H + SUBTITLE_GAP

    # banner and item name stay together
    cur.ensure_space(TITLE_GAP + name_h)

    top = cur.y
    _draw_text(cur, xc, top, OFFER_TITLE, font=FONT_BOLD, size=TITLE_FS, color=COLOR_A, align="center")
    cur.advance(TITLE_GAP)
    cur.record("title", top, cur.y, item_index)

    top = cur.y
    y = top
    for ln in name_lines:
        _draw_text(cur, xc, y, ln, font=FONT_BOLD, size=SUBTITLE_FS, align="center")
        y += SUBTITLE_LINE_H
    cur.advance(name_h)
    cur.record("subtitle", top, cur.y, item_index)

    return cur.y


def render_description(cur: LayoutCursor, item: LineItem, item_index: int) -> float:
    """Heading plus word-wrapped paragraph, emitted as one unsplit block."""
    ps = cur.ps

    lines = wrap_text(item.description, FONT_REGULAR, BODY_FS, ps.content_w)
    if not lines:
        return cur.y

    h = HEADING_GAP + len(lines) * LINE_H + SECTION_GAP
    cur.ensure_space(h)

    top = cur.y
    _draw_text(cur, ps.x0, top, "Description:", font=FONT_BOLD)
    y = top + HEADING_GAP
    for ln in lines:
        _draw_text(cur, ps.x0, y, ln)
        y += LINE_H

    cur.advance(h)
    cur.record("description", top, top + h - SECTION_GAP, item_index)
    return cur.y


def _render_wide(cur: LayoutCursor, features: List[str], image: Optional[LoadedImage], item_index: int) -> float:
    ps = cur.ps

    if image is not None:
        w, h = fit_image(image, ps.content_w - 2 * WIDE_IMAGE_INSET, WIDE_IMAGE_MAX_H)
        cur.ensure_space(h)
        top = cur.y
        _draw_image(cur, image, ps.x0 + (ps.content_w - w) / 2.0, top, w, h)
        cur.record("image", top, top + h, item_index)
        cur.advance(h + SECTION_GAP)

    return render_bullets(
        cur, features, x=ps.x0, width=ps.content_w, kind="feature", item_index=item_index, heading="FEATURES:"
    )


def _render_tall(cur: LayoutCursor, features: List[str], image: LoadedImage, item_index: int) -> float:
    ps = cur.ps

    text_w = ps.content_w * TALL_TEXT_FRACTION
    col_x = ps.x0 + text_w + TALL_COLUMN_GAP
    col_w = ps.content_w - text_w - TALL_COLUMN_GAP
    w, h = fit_image(image, col_w, TALL_IMAGE_MAX_H)

    first_h = 0.0
    if features:
        first_h = HEADING_GAP + len(wrap_text(features[0], FONT_REGULAR, BODY_FS, text_w - BULLET_TEXT_INDENT)) * LINE_H
    cur.ensure_space(max(first_h, h - TEXT_ASCENT))

    top = cur.y
    image_page = cur.page_index
    image_top = top - TEXT_ASCENT  # flush with the cap height of the first text line
    _draw_image(cur, image, col_x + (col_w - w) / 2.0, image_top, w, h)
    image_rec = cur.record("image", image_top, image_top + h, item_index)

    text_bottom = render_bullets(
        cur, features, x=ps.x0, width=text_w, kind="feature", item_index=item_index, heading="FEATURES:"
    )

    # Columns are measured independently; the taller one decides where the next block starts.
    if cur.page_index != image_page:
        return text_bottom

    final_y = max(text_bottom, image_rec.bottom)
    cur.record("image_features", top, final_y, item_index)
    return final_y


def render_image_features(cur: LayoutCursor, item: LineItem, image: Optional[LoadedImage], item_index: int) -> float:
    features = _bullet_entries(item.features)
    if item.image_layout is ImageLayout.TALL and image is not None:
        return _render_tall(cur, features, image, item_index)
    return _render_wide(cur, features, image, item_index)


def render_specs(cur: LayoutCursor, item: LineItem, item_index: int) -> float:
    ps = cur.ps

    entries: List[str] = []
    for s in item.specs:
        k, v = clean(s.key), clean(s.value)
        if k and v:
            entries.append(f"{k}: {v}")
        elif k or v:
            entries.append(k or v)

    if not entries:
        return cur.y

    cur.advance(SECTION_GAP)
    return render_bullets(
        cur, entries, x=ps.x0, width=ps.content_w, kind="spec", item_index=item_index, heading="Specifications:"
    )


def build_pricing_table(ps: PageSpec, item: LineItem, currency: Currency) -> Table:
    desc = escape(clean(item.name))
    if item.selected_addons:
        desc += "<br/><br/>Standard Accessories:"
        for a in item.selected_addons:
            desc += f"<br/>{BULLET_GLYPH} {escape(clean(a.name))}"

    sno_w, qty_w, price_w = 15.0, 15.0, 45.0
    desc_w = ps.content_w - sno_w - qty_w - price_w

    table = Table(
        [
            ["S.No", "Description", "Qty", f"Price ({currency.label})"],
            ["01", Paragraph(desc, CELL_STYLE), "1", price_cell(item.unit_price, currency)],
        ],
        colWidths=[sno_w * mm, desc_w * mm, qty_w * mm, price_w * mm],
        repeatRows=1,
    )
    table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ("BACKGROUND", (0, 0), (-1, 0), COLOR_A),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), FONT_BOLD),
        ("FONTNAME", (0, 1), (-1, -1), FONT_REGULAR),
        ("FONTSIZE", (0, 0), (-1, -1), BODY_FS - 1),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("ALIGN", (0, 0), (0, -1), "CENTER"),
        ("ALIGN", (2, 0), (2, -1), "CENTER"),
        ("ALIGN", (3, 1), (3, -1), "RIGHT"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    return table


def render_pricing_table(cur: LayoutCursor, item: LineItem, currency: Currency, item_index: int) -> float:
    """
    "Commercial Offer:" heading plus a one-row grid. The table measures itself;
    the returned Y is reported back to the cursor by the caller.
    """
    ps = cur.ps
    cur.advance(TABLE_GAP)

    table = build_pricing_table(ps, item, currency)
    th = _measure_table(cur, table)

    cur.ensure_space(TABLE_HEADING_GAP + th)
    top = cur.y
    _draw_text(cur, ps.x0, top, "Commercial Offer:", font=FONT_BOLD)

    table_top = top + TABLE_HEADING_GAP
    _draw_table(cur, table, table_top, th)
    final_y = table_top + th
    cur.record("pricing_table", top, final_y, item_index)
    return final_y + TABLE_GAP


# =========================
# Closing pages
# =========================

def render_terms(cur: LayoutCursor, terms: Sequence[SelectedTerm]) -> float:
    ps = cur.ps

    entries = []
    for t in terms:
        title, text = clean(t.title), clean(t.text)
        entries.append(f"{title}: {text}" if title and text else (title or text))

    cur.ensure_space(TERMS_HEADING_GAP + LINE_H)
    top = cur.y
    _draw_text(cur, ps.x0, top, "Terms And Conditions:", font=FONT_BOLD, size=TERMS_HEADING_FS, color=COLOR_A)
    cur.advance(TERMS_HEADING_GAP)
    cur.record("terms_heading", top, cur.y)

    return render_bullets(cur, entries, x=ps.x0, width=ps.content_w, kind="term")


def render_signature(cur: LayoutCursor, company_name: str, user_name: str, phone: str) -> float:
    """Right-aligned "From <company>" / salesperson / phone lines."""
    ps = cur.ps

    h = SIGNATURE_GAP + 2 * SIGNATURE_LINE_H + LINE_H
    cur.ensure_space(h)

    top = cur.y + SIGNATURE_GAP
    y = top
    _draw_text(cur, ps.x1, y, f"From {company_name}", font=FONT_BOLD, align="right")
    y += SIGNATURE_LINE_H
    _draw_text(cur, ps.x1, y, user_name, font=FONT_BOLD, align="right")
    y += SIGNATURE_LINE_H
    _draw_text(cur, ps.x1, y, f"Contact: {phone}", align="right")

    cur.advance(h)
    cur.record("signature", top, cur.y)
    return cur.y
