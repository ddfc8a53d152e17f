# quotation_pdf/errors.py
from __future__ import annotations

from typing import List


class QuotationPdfError(Exception):
    """Base class for every error raised by the quotation renderer."""


class ImageLoadError(QuotationPdfError):
    """A single image could not be fetched or decoded. Always recovered."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not load image {source!r}: {reason}")


class InvalidInputError(QuotationPdfError):
    """
    Raised before any drawing starts when the quotation, its items or the
    render context are missing required fields.
    """

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Invalid quotation input: " + "; ".join(self.problems))


class DocumentRenderError(QuotationPdfError):
    """Layout or drawing failed after assets were loaded. No output is produced."""

    def __init__(self, message: str, stage: str = ""):
        self.stage = stage
        super().__init__(f"{message} (stage={stage})" if stage else message)
