# quotation_pdf/cli.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from quotation_pdf.config import load_settings
from quotation_pdf.errors import DocumentRenderError, InvalidInputError
from quotation_pdf.logging_config import setup_logging
from quotation_pdf.rendering.assembler import QuotationDocumentAssembler
from quotation_pdf.rendering.text_extract import page_lines
from quotation_pdf.services.quotation_input import request_from_json


def print_summary(pdf_bytes: bytes) -> None:
    for idx, lines in enumerate(page_lines(pdf_bytes), start=1):
        print(f"--- page {idx} ---")
        for ln in lines:
            print(f"  {ln}")


def cmd_render(args: argparse.Namespace) -> int:
    settings = load_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)

    payload_path = Path(args.payload)
    payload = json.loads(payload_path.read_text(encoding="utf-8"))

    try:
        req = request_from_json(payload)
    except InvalidInputError as e:
        print("Invalid quotation payload:", file=sys.stderr)
        for p in e.problems:
            print(f"  - {p}", file=sys.stderr)
        return 2

    try:
        rendered = QuotationDocumentAssembler(settings=settings).render(
            req.quotation, req.items, req.context, req.selected_terms
        )
    except DocumentRenderError as e:
        print(f"Failed to generate document, please retry ({e})", file=sys.stderr)
        return 1

    out_dir = Path(args.out) if args.out else settings.output_dir
    out_path = rendered.save(out_dir)
    print(f"OK: {rendered.page_count} pages -> {out_path}")

    if args.summary:
        print_summary(rendered.pdf_bytes)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quotation-pdf")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a quotation payload (JSON) to PDF")
    render.add_argument("payload", help="Path to the quotation JSON payload")
    render.add_argument("--out", help="Output directory (default: QUOTATION_OUTPUT_DIR or ./out)")
    render.add_argument("--summary", action="store_true", help="Print the text of each page")
    render.set_defaults(func=cmd_render)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
