# quotation_pdf/services/keys.py
from __future__ import annotations

import re


def document_filename(quotation_number: str) -> str:
    # expected: Q-2024-001 -> Q-2024-001_Quotation.pdf
    return f"{(quotation_number or '').strip()}_Quotation.pdf"


def safe_download_name(name: str) -> str:
    # Keep it simple for Content-Disposition; browsers are picky.
    name = (name or "Quotation.pdf").strip().replace("\n", " ").replace("\r", " ")
    name = re.sub(r'["\\/]', "_", name)
    if not name.lower().endswith(".pdf"):
        name += ".pdf"
    return name
