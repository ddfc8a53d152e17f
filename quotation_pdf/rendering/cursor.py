# quotation_pdf/rendering/cursor.py
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from reportlab.pdfgen import canvas

from quotation_pdf.rendering.base import CONTENT_TOP, PageSpec
from quotation_pdf.rendering.chrome import PageChrome


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CursorState:
    page_index: int = 0
    y: float = CONTENT_TOP


@dataclass(frozen=True)
class Placement:
    """Where one emitted block landed. ``top``/``bottom`` are mm from the page top."""
    kind: str
    page_index: int
    top: float
    bottom: float
    item_index: Optional[int] = None


class LayoutCursor:
    """
    Owns the running write position for one document.

    Two calling conventions:
      - pre-check: ``ensure_space(h)`` before emitting a block of known height,
        then ``advance(h)`` once it is drawn.
      - post-adjust: blocks that only know their extent after measuring
        (tables) report their final Y through ``settle(y)``.

    ``advance``/``settle`` never check bounds; the next ``ensure_space`` does.
    """

    def __init__(self, c: canvas.Canvas, ps: PageSpec, chrome: PageChrome):
        self.c = c
        self.ps = ps
        self.chrome = chrome
        self.state = CursorState()
        self.placements: List[Placement] = []
        self._opened = False

    # ---- read-only views ----

    @property
    def y(self) -> float:
        return self.state.y

    @property
    def page_index(self) -> int:
        return self.state.page_index

    @property
    def page_count(self) -> int:
        return self.state.page_index + 1 if self._opened else 0

    @property
    def safe_bottom(self) -> float:
        return self.ps.safe_bottom

    def fits(self, required: float) -> bool:
        return self.state.y + required <= self.safe_bottom

    def at_page_top(self) -> bool:
        return self.state.y <= CONTENT_TOP

    # ---- page transitions ----

    def open_first_page(self) -> None:
        if self._opened:
            raise RuntimeError("first page already open")
        self._opened = True
        self.state = CursorState(page_index=0, y=CONTENT_TOP)
        self.chrome.draw(self.c)

    def new_page(self) -> None:
        self.c.showPage()
        self.state = CursorState(page_index=self.state.page_index + 1, y=CONTENT_TOP)
        self.chrome.draw(self.c)
        logger.debug("Opened page %d", self.state.page_index + 1)

    def ensure_space(self, required: float) -> bool:
        """
        Break to a fresh page when ``required`` mm do not fit above the safe
        bottom. Returns True when a break happened.

        On a page that is still empty a block taller than the whole content
        area is let through and overflows.
        """
        if self.fits(required):
            return False
        if self.at_page_top():
            logger.warning(
                "Block of %.1fmm exceeds the page content area; drawing it past the footer boundary",
                required,
            )
            return False
        self.new_page()
        return True

    # ---- movement ----

    def advance(self, consumed: float) -> None:
        self.state = replace(self.state, y=self.state.y + consumed)

    def settle(self, final_y: float) -> None:
        self.state = replace(self.state, y=final_y)

    # ---- bookkeeping ----

    def record(self, kind: str, top: float, bottom: float, item_index: Optional[int] = None) -> Placement:
        p = Placement(kind=kind, page_index=self.state.page_index, top=top, bottom=bottom, item_index=item_index)
        self.placements.append(p)
        return p
