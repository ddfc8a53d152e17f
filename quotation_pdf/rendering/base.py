# quotation_pdf/rendering/base.py
from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm


# =========================
# Page + layout constants (millimetres, measured from the page top)
# =========================

PAGE_MARGIN = 15.0
FOOTER_SAFE = 30.0          # reserved above the page bottom for footer chrome
CONTENT_TOP = 50.0          # first content line on every page, below the header rules

# Chrome
OUTER_BORDER_INSET = 5.0
OUTER_BORDER_W = 1.2
INNER_BORDER_INSET = 7.0
INNER_BORDER_W = 0.8

LOGO_X = PAGE_MARGIN
LOGO_Y = 12.0
LOGO_W = 70.0
LOGO_H = 25.0

HEADER_NAME_Y = 18.0
HEADER_ADDRESS_Y = 24.0
HEADER_NAME_FS = 11
HEADER_ADDRESS_FS = 9
HEADER_ADDRESS_LINE_FACTOR = 1.4
HEADER_RULE_Y1 = 42.0
HEADER_RULE_Y2 = 43.0

FOOTER_BOX_INSET = 10.0     # extra inset of the contact box beyond the page margin
FOOTER_BOX_TOP_FROM_BOTTOM = 20.0
FOOTER_BOX_H = 8.0
FOOTER_TEXT_FROM_BOTTOM = 14.5
FOOTER_FS = 8

PAGE_NO_FROM_BOTTOM = 8.0
PAGE_NO_FS = 8

# Content typography
TITLE_FS = 14
SUBTITLE_FS = 12
BODY_FS = 10
LINE_H = 5.0                # one wrapped text line
BULLET_TEXT_INDENT = 5.0    # wrapped bullet text starts this far right of the glyph
BULLET_GLYPH = "•"

TITLE_GAP = 7.0             # title banner -> item name
SUBTITLE_GAP = 10.0         # item name -> description heading
HEADING_GAP = 6.0           # section heading -> first line
SECTION_GAP = 5.0
TABLE_HEADING_GAP = 3.0     # "Commercial Offer:" baseline -> table top
TEXT_ASCENT = 3.0           # approx. cap height of body text above its baseline
SUBTITLE_LINE_H = 6.0
TERMS_HEADING_FS = 12
TERMS_HEADING_GAP = 10.0
SIGNATURE_GAP = 15.0
SIGNATURE_LINE_H = 6.0
TABLE_GAP = 10.0

# Image blocks
WIDE_IMAGE_INSET = 10.0     # wide photos are inset this far on each side
WIDE_IMAGE_MAX_H = 110.0
TALL_TEXT_FRACTION = 0.58   # share of content width used by the feature column
TALL_COLUMN_GAP = 5.0
TALL_IMAGE_MAX_H = 120.0

# Colors
COLOR_A = colors.Color(0 / 255.0, 82 / 255.0, 156 / 255.0)       # blue
COLOR_B = colors.Color(255 / 255.0, 102 / 255.0, 0 / 255.0)      # orange
HEADER_GRAY = colors.Color(60 / 255.0, 60 / 255.0, 60 / 255.0)

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


@dataclass(frozen=True)
class PageSpec:
    w: float = A4[0] / mm
    h: float = A4[1] / mm

    @property
    def points(self) -> tuple[float, float]:
        return (self.w * mm, self.h * mm)

    @property
    def safe_bottom(self) -> float:
        return self.h - FOOTER_SAFE

    @property
    def x0(self) -> float:
        return PAGE_MARGIN

    @property
    def x1(self) -> float:
        return self.w - PAGE_MARGIN

    @property
    def content_w(self) -> float:
        return self.x1 - self.x0

    def px(self, x_mm: float) -> float:
        return x_mm * mm

    def py(self, top_mm: float) -> float:
        """Top-down millimetres -> reportlab's bottom-up points."""
        return (self.h - top_mm) * mm
