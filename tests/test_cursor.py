"""Pagination controller: pre-check and post-adjust conventions."""

import io

import pytest
from reportlab.pdfgen import canvas

from quotation_pdf.rendering.base import CONTENT_TOP, PageSpec
from quotation_pdf.rendering.chrome import ChromeText, PageChrome
from quotation_pdf.rendering.cursor import LayoutCursor
from quotation_pdf.rendering.text_extract import page_count, page_lines


@pytest.fixture
def cursor_and_buffer():
    ps = PageSpec()
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=ps.points)
    chrome = PageChrome(ps, ChromeText("ACME INSTRUMENTS", "1 Main Road\nPune", "Write us: hello@acme.test"))
    cur = LayoutCursor(c, ps, chrome)
    cur.open_first_page()
    return cur, buf


def test_first_page_starts_at_content_top(cursor_and_buffer):
    cur, _ = cursor_and_buffer
    assert cur.page_index == 0
    assert cur.page_count == 1
    assert cur.y == CONTENT_TOP
    assert cur.safe_bottom == pytest.approx(PageSpec().h - 30.0)


def test_ensure_space_is_noop_when_block_fits(cursor_and_buffer):
    cur, _ = cursor_and_buffer
    cur.advance(100)
    assert cur.ensure_space(20) is False
    assert cur.page_index == 0
    assert cur.y == CONTENT_TOP + 100


def test_ensure_space_breaks_page_and_resets_y(cursor_and_buffer):
    cur, _ = cursor_and_buffer
    cur.settle(cur.safe_bottom - 4)
    assert cur.ensure_space(5) is True
    assert cur.page_index == 1
    assert cur.page_count == 2
    assert cur.y == CONTENT_TOP


def test_block_ending_exactly_on_safe_bottom_fits(cursor_and_buffer):
    cur, _ = cursor_and_buffer
    cur.settle(cur.safe_bottom - 10)
    assert cur.ensure_space(10) is False


def test_oversized_block_on_empty_page_overflows_instead_of_looping(cursor_and_buffer):
    cur, _ = cursor_and_buffer
    assert cur.ensure_space(1000) is False
    assert cur.page_index == 0


def test_advance_and_settle_never_break(cursor_and_buffer):
    cur, _ = cursor_and_buffer
    cur.advance(500)
    assert cur.page_index == 0
    cur.settle(12.5)
    assert cur.y == 12.5
    assert cur.page_index == 0


def test_record_tags_current_page(cursor_and_buffer):
    cur, _ = cursor_and_buffer
    cur.new_page()
    p = cur.record("feature", 60.0, 65.0, item_index=3)
    assert (p.page_index, p.kind, p.item_index) == (1, "feature", 3)
    assert cur.placements == [p]


def test_opening_twice_is_rejected(cursor_and_buffer):
    cur, _ = cursor_and_buffer
    with pytest.raises(RuntimeError):
        cur.open_first_page()


def test_every_page_gets_chrome(cursor_and_buffer):
    cur, buf = cursor_and_buffer
    cur.new_page()
    cur.new_page()
    cur.c.save()

    pdf = buf.getvalue()
    assert page_count(pdf) == 3
    for lines in page_lines(pdf):
        text = "\n".join(lines)
        assert "ACME INSTRUMENTS" in text
        assert "Write us: hello@acme.test" in text
