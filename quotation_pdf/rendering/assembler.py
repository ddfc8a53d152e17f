# quotation_pdf/rendering/assembler.py
from __future__ import annotations

import io
import logging
import time
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from reportlab.pdfgen import canvas

from quotation_pdf.config import Settings
from quotation_pdf.errors import DocumentRenderError, InvalidInputError
from quotation_pdf.models import LineItem, LoadedImage, Quotation, RenderContext, SelectedTerm
from quotation_pdf.rendering.base import PageSpec
from quotation_pdf.rendering.blocks import (
    render_customer_block,
    render_description,
    render_image_features,
    render_pricing_table,
    render_signature,
    render_specs,
    render_terms,
    render_title,
)
from quotation_pdf.rendering.chrome import ChromeText, PageChrome
from quotation_pdf.rendering.cursor import LayoutCursor, Placement
from quotation_pdf.rendering.image_loader import ImageLoader
from quotation_pdf.rendering.page_numbers import stamp_page_numbers
from quotation_pdf.rendering.terms import resolve_terms
from quotation_pdf.services.keys import document_filename
from quotation_pdf.services.quotation_input import RenderRequest, validate_render_request


logger = logging.getLogger(__name__)


class AssemblyStage(str, Enum):
    LOADING_ASSETS = "loading_assets"
    FIRST_PAGE_HEADER = "first_page_header"
    RENDERING_ITEM = "rendering_item"
    TERMS_PAGE = "terms_page"
    PAGE_NUMBERS = "page_numbers"
    DONE = "done"


@dataclass
class RenderedQuotation:
    pdf_bytes: bytes
    filename: str
    page_count: int
    placements: List[Placement] = field(default_factory=list)

    def save(self, directory: Path) -> Path:
        """Write the finished document as ``{quotation_number}_Quotation.pdf``."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        out = directory / self.filename
        out.write_bytes(self.pdf_bytes)
        return out

    def layout_signature(self) -> List[tuple]:
        """Block order per page, independent of image encoding."""
        return [(p.page_index, p.kind, p.item_index) for p in self.placements]


class QuotationDocumentAssembler:
    """
    Renders one quotation into a paged PDF:

      LOADING_ASSETS -> FIRST_PAGE_HEADER (once) -> RENDERING_ITEM(i) for each item
      -> TERMS_PAGE -> PAGE_NUMBERS -> DONE

    Every item after the first starts on a fresh page; the terms page is
    always a fresh page. Canvas and cursor live only for the duration of one
    ``render`` call, so one assembler can serve concurrent renders.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        loader: Optional[ImageLoader] = None,
        page: Optional[PageSpec] = None,
    ):
        self.settings = settings or Settings()
        self.loader = loader or ImageLoader(
            max_width_px=self.settings.image_max_width_px,
            jpeg_quality=self.settings.image_jpeg_quality,
            timeout=self.settings.image_fetch_timeout,
            max_workers=self.settings.image_fetch_workers,
        )
        self.page = page or PageSpec()

    def render(
        self,
        quotation: Quotation,
        items: Sequence[LineItem],
        context: RenderContext,
        selected_terms: Optional[Sequence[SelectedTerm]] = None,
    ) -> RenderedQuotation:
        validate_render_request(
            RenderRequest(
                quotation=quotation,
                items=list(items),
                context=context,
                selected_terms=list(selected_terms or []),
            )
        )

        started = time.perf_counter()
        stage = AssemblyStage.LOADING_ASSETS
        log_extra = {"quotation_number": quotation.quotation_number}
        logger.info("Rendering quotation %s (%d items)", quotation.quotation_number, len(items), extra=log_extra)

        try:
            logo = self.loader.load_optional(self.settings.logo_path)
            images = self.loader.load_for_items(items)

            buf = io.BytesIO()
            c = canvas.Canvas(buf, pagesize=self.page.points, invariant=1)
            c.setTitle(f"Quotation {quotation.quotation_number}")
            c.setAuthor(context.settings.company_name or self.settings.company_name)

            chrome = PageChrome(
                self.page,
                ChromeText(
                    company_name=self.settings.company_name,
                    company_address=self.settings.company_address,
                    contact_line=self.settings.contact_line,
                ),
                logo=logo,
            )
            cur = LayoutCursor(c, self.page, chrome)

            stage = AssemblyStage.FIRST_PAGE_HEADER
            cur.open_first_page()
            y = render_customer_block(
                cur,
                quotation,
                validity=context.validity_date or quotation.resolve_validity(),
                quote_date=quotation.created_at.date() if quotation.created_at else date.today(),
            )
            cur.settle(y)

            stage = AssemblyStage.RENDERING_ITEM
            for idx, item in enumerate(items):
                if idx > 0:
                    cur.new_page()
                self._render_item(cur, item, idx, images, context)

            stage = AssemblyStage.TERMS_PAGE
            cur.new_page()
            render_terms(cur, resolve_terms(selected_terms))
            render_signature(
                cur,
                company_name=context.settings.company_name or self.settings.company_name,
                user_name=context.user.full_name or "SALES TEAM",
                phone=context.user.phone or self.settings.default_contact_phone,
            )

            c.save()

            stage = AssemblyStage.PAGE_NUMBERS
            pdf_bytes, total = stamp_page_numbers(buf.getvalue())
            if total != cur.page_count:
                raise DocumentRenderError(
                    f"layout produced {cur.page_count} pages but the document has {total}",
                    stage=stage.value,
                )

            stage = AssemblyStage.DONE

        except (DocumentRenderError, InvalidInputError):
            raise
        except Exception as e:
            logger.exception(
                "Quotation %s failed during %s", quotation.quotation_number, stage.value, extra=log_extra
            )
            raise DocumentRenderError(
                f"Failed to render quotation {quotation.quotation_number}: {type(e).__name__}: {e}",
                stage=stage.value,
            ) from e

        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Rendered quotation %s: %d pages",
            quotation.quotation_number,
            total,
            extra={**log_extra, "duration_ms": duration_ms},
        )

        return RenderedQuotation(
            pdf_bytes=pdf_bytes,
            filename=document_filename(quotation.quotation_number),
            page_count=total,
            placements=list(cur.placements),
        )

    def _render_item(
        self,
        cur: LayoutCursor,
        item: LineItem,
        idx: int,
        images: Dict[str, LoadedImage],
        context: RenderContext,
    ) -> None:
        render_title(cur, item, idx)
        render_description(cur, item, idx)
        cur.settle(render_image_features(cur, item, images.get(item.id), idx))
        render_specs(cur, item, idx)
        cur.settle(render_pricing_table(cur, item, context.currency, idx))


def render_quotation(
    quotation: Quotation,
    items: Sequence[LineItem],
    context: RenderContext,
    selected_terms: Optional[Sequence[SelectedTerm]] = None,
    *,
    settings: Optional[Settings] = None,
    loader: Optional[ImageLoader] = None,
) -> RenderedQuotation:
    """One-shot convenience: a fresh assembler per call."""
    return QuotationDocumentAssembler(settings=settings, loader=loader).render(
        quotation, items, context, selected_terms
    )
