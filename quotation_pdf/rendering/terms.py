# quotation_pdf/rendering/terms.py
from __future__ import annotations

from typing import List, Optional, Sequence

from quotation_pdf.models import SelectedTerm


DEFAULT_TERMS: List[SelectedTerm] = [
    SelectedTerm(
        title="Packaging",
        text="Equipment is supplied in standard export-worthy packing; special packing is charged extra.",
    ),
    SelectedTerm(
        title="Freight",
        text="Freight and transit insurance are extra at actuals unless stated otherwise in the offer.",
    ),
    SelectedTerm(
        title="Delivery",
        text="Within 4 to 6 weeks from the date of receipt of a confirmed purchase order with advance.",
    ),
    SelectedTerm(
        title="Installation",
        text="Installation and demonstration at site by our engineer; site readiness is the customer's responsibility.",
    ),
    SelectedTerm(
        title="Payment",
        text="50% advance along with the purchase order, balance before dispatch.",
    ),
    SelectedTerm(
        title="Warranty",
        text="12 months from the date of installation against manufacturing defects; consumables are not covered.",
    ),
    SelectedTerm(
        title="Governing Law",
        text="Subject to Hyderabad jurisdiction only.",
    ),
    SelectedTerm(
        title="Modification",
        text="Specifications are subject to change without prior notice as part of continuous product improvement.",
    ),
]


def resolve_terms(selected: Optional[Sequence[SelectedTerm]]) -> List[SelectedTerm]:
    """Curated terms when any were selected, otherwise the built-in list."""
    chosen = [t for t in (selected or []) if (t.title or "").strip() or (t.text or "").strip()]
    return chosen if chosen else list(DEFAULT_TERMS)
