# scripts/render_sample_quotation.py
from __future__ import annotations

import json
from pathlib import Path

from quotation_pdf.config import load_settings
from quotation_pdf.rendering.assembler import QuotationDocumentAssembler
from quotation_pdf.rendering.text_extract import page_lines
from quotation_pdf.services.quotation_input import request_from_json


def _sample_payload() -> dict:
    p = Path("samples/quotation_sample.json")
    return json.loads(p.read_text(encoding="utf-8"))


def main() -> None:
    settings = load_settings()
    req = request_from_json(_sample_payload())
    rendered = QuotationDocumentAssembler(settings=settings).render(
        req.quotation, req.items, req.context, req.selected_terms
    )

    out_path = rendered.save(Path("tmp"))
    print("\n✅ Draft created:", out_path.resolve())
    print("pages            :", rendered.page_count)

    print("\n--- Block placements ---")
    for p in rendered.placements:
        print(f"page {p.page_index + 1:2}  {p.kind:16} item={p.item_index}  {p.top:6.1f} -> {p.bottom:6.1f} mm")

    print("\n--- Page text ---")
    for idx, lines in enumerate(page_lines(rendered.pdf_bytes), start=1):
        print(f"[page {idx}]")
        for ln in lines:
            print("  ", ln)


if __name__ == "__main__":
    main()
