# quotation_pdf/rendering/text.py
from __future__ import annotations

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

from quotation_pdf.models import Currency


def clean(s: str) -> str:
    return (s or "").replace("\u00a0", " ").replace("\x00", "").strip()


def wrap_text(text: str, font: str, size: float, max_w_mm: float) -> List[str]:
    """
    Greedy word wrap measured with the real font metrics. Words wider than the
    column are split character by character. Explicit newlines start new lines.
    """
    max_w = max_w_mm * mm
    lines: List[str] = []

    for para in (text or "").replace("\r", "\n").split("\n"):
        words = clean(para).split()
        cur = ""
        for w in words:
            test = (cur + " " + w).strip()
            if stringWidth(test, font, size) <= max_w:
                cur = test
                continue
            if cur:
                lines.append(cur)
            if stringWidth(w, font, size) <= max_w:
                cur = w
            else:
                chunk = ""
                for ch in w:
                    t2 = chunk + ch
                    if stringWidth(t2, font, size) <= max_w:
                        chunk = t2
                    else:
                        if chunk:
                            lines.append(chunk)
                        chunk = ch
                cur = chunk
        if cur:
            lines.append(cur)

    return lines


def _group_western(digits: str) -> str:
    return f"{int(digits):,}"


def _group_indian(digits: str) -> str:
    # 1250000 -> 12,50,000
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: List[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_amount(value: Decimal, currency: Currency) -> str:
    """
    Thousands-grouped amount. INR uses lakh/crore grouping. Whole amounts
    print without decimals, anything else with two.
    """
    q = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if q < 0 else ""
    q = abs(q)
    whole, frac = f"{q:.2f}".split(".")
    grouped = _group_indian(whole) if currency is Currency.INR else _group_western(whole)
    if frac == "00":
        return f"{sign}{grouped}"
    return f"{sign}{grouped}.{frac}"


def price_cell(value: Decimal, currency: Currency) -> str:
    return f"{currency.symbol} {format_amount(value, currency)}/-"


def format_date(d: Optional[date]) -> str:
    return d.strftime("%d-%m-%Y") if d else ""
