# quotation_pdf/rendering/text_extract.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

import fitz  # PyMuPDF


@dataclass
class Word:
    page: int
    x0: float
    y0: float
    x1: float
    y1: float
    text: str


def extract_words(pdf_bytes: bytes) -> List[Word]:
    """
    Every word token of a rendered document with its coordinates
    (points, origin top-left, as PyMuPDF reports them).
    """
    out: List[Word] = []
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        for pno in range(doc.page_count):
            page = doc.load_page(pno)

            # Each word item: (x0, y0, x1, y1, "word", block_no, line_no, word_no)
            for (x0, y0, x1, y1, w, _block, _line, _word) in page.get_text("words"):
                w = (w or "").strip()
                if not w:
                    continue
                out.append(Word(page=pno, x0=float(x0), y0=float(y0), x1=float(x1), y1=float(y1), text=w))

    return out


def page_lines(pdf_bytes: bytes) -> List[List[str]]:
    """
    Text of each page as lines, top to bottom. Words sharing a baseline
    (rounded to 1pt) form one line, left to right.
    """
    words = extract_words(pdf_bytes)
    if not words:
        return []

    n_pages = max(w.page for w in words) + 1
    pages: List[List[str]] = [[] for _ in range(n_pages)]

    words_sorted = sorted(words, key=lambda w: (w.page, round(w.y1), w.x0))
    current_key = None
    current_words: List[str] = []

    for w in words_sorted:
        key = (w.page, round(w.y1))
        if current_key is not None and key != current_key and current_words:
            pages[current_key[0]].append(" ".join(current_words))
            current_words = []
        current_key = key
        current_words.append(w.text)

    if current_key is not None and current_words:
        pages[current_key[0]].append(" ".join(current_words))

    return pages


def page_count(pdf_bytes: bytes) -> int:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return doc.page_count
