# quotation_pdf/services/quotation_input.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from quotation_pdf.errors import InvalidInputError
from quotation_pdf.models import (
    Addon,
    CompanySettings,
    Currency,
    ImageLayout,
    LineItem,
    Quotation,
    RenderContext,
    SelectedTerm,
    Spec,
    UserInfo,
)


@dataclass
class RenderRequest:
    quotation: Quotation
    items: List[LineItem]
    context: RenderContext
    selected_terms: List[SelectedTerm] = field(default_factory=list)


def _s(x: Any) -> str:
    return "" if x is None else str(x).strip()


def _dec_or_none(s: Any) -> Optional[Decimal]:
    """
    Accepts 125000, 125000.5, "125,000", "Rs. 1,25,000", "$ 99.00".
    Raises ValueError on anything else that is non-empty.
    """
    if s is None:
        return None
    if isinstance(s, bool):
        raise ValueError(f"not a price: {s!r}")
    if isinstance(s, (int, float, Decimal)):
        d = Decimal(str(s))
    else:
        t = str(s).replace("Rs.", "").replace("$", "").replace(",", "").replace("/-", "").strip()
        if not t:
            return None
        try:
            d = Decimal(t)
        except InvalidOperation:
            raise ValueError(f"not a price: {s!r}") from None
    # NaN and Infinity parse as Decimals but cannot be compared or quantized
    if not d.is_finite():
        raise ValueError(f"not a price: {s!r}")
    return d


def _date_or_none(s: Any) -> Optional[date]:
    if s is None or s == "":
        return None
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    return datetime.fromisoformat(str(s).strip().replace("Z", "+00:00")).date()


def _datetime_or_none(s: Any) -> Optional[datetime]:
    if s is None or s == "":
        return None
    if isinstance(s, datetime):
        return s
    return datetime.fromisoformat(str(s).strip().replace("Z", "+00:00"))


def _money_str(x: Optional[Decimal]) -> str:
    return "" if x is None else str(x)


def _layout(raw: Any, problems: List[str], where: str) -> ImageLayout:
    k = _s(raw).lower() or ImageLayout.WIDE.value
    try:
        return ImageLayout(k)
    except ValueError:
        problems.append(f"{where}: unknown image layout {raw!r}")
        return ImageLayout.WIDE


def _obj(x: Any, where: str, problems: List[str]) -> dict:
    if x is None:
        return {}
    if not isinstance(x, dict):
        problems.append(f"{where}: expected an object, got {type(x).__name__}")
        return {}
    return x


def _objects(x: Any, where: str, problems: List[str]) -> List[tuple]:
    """(index, entry) for every object in a JSON list; anything else is reported."""
    if x is None:
        return []
    if not isinstance(x, list):
        problems.append(f"{where}: expected a list, got {type(x).__name__}")
        return []
    out = []
    for i, entry in enumerate(x):
        if isinstance(entry, dict):
            out.append((i, entry))
        else:
            problems.append(f"{where}[{i}]: expected an object, got {type(entry).__name__}")
    return out


def _features(x: Any, where: str, problems: List[str]) -> list:
    if x is None:
        return []
    if not isinstance(x, list):
        problems.append(f"{where}.features: expected a list, got {type(x).__name__}")
        return []
    return x


def _item_from_json(x: dict, idx: int, problems: List[str]) -> LineItem:
    where = f"items[{idx}]"

    try:
        price = _dec_or_none(x.get("price"))
    except ValueError as e:
        problems.append(f"{where}.price: {e}")
        price = None

    addons: List[Addon] = []
    raw_addons = x.get("selectedAddons") or x.get("selected_addons")
    for a_idx, a in _objects(raw_addons, f"{where}.selected_addons", problems):
        try:
            a_price = _dec_or_none(a.get("price"))
        except ValueError as e:
            problems.append(f"{where}.selected_addons[{a_idx}].price: {e}")
            a_price = None
        addons.append(Addon(name=_s(a.get("name")), price=a_price))

    specs = [
        Spec(key=_s(s.get("key")), value=_s(s.get("value")))
        for _, s in _objects(x.get("specs"), f"{where}.specs", problems)
    ]

    return LineItem(
        id=_s(x.get("id")) or str(idx),
        name=_s(x.get("name")),
        price=price,
        description=_s(x.get("description")),
        features=[_s(f) for f in _features(x.get("features"), where, problems) if _s(f)],
        specs=specs,
        image_url=_s(x.get("image_url")) or None,
        image_layout=_layout(x.get("image_format") or x.get("image_layout"), problems, where),
        selected_addons=addons,
    )


def request_from_json(j: dict) -> RenderRequest:
    """
    Map an admin-app payload onto typed records. Conversion problems are
    collected and then checked together with the field rules in
    ``validate_render_request``.
    """
    if not isinstance(j, dict):
        raise InvalidInputError([f"payload: expected an object, got {type(j).__name__}"])

    problems: List[str] = []

    q = _obj(j.get("quotation"), "quotation", problems)
    validity = _obj(j.get("validity") or j.get("validityData"), "validity", problems)

    try:
        created_at = _datetime_or_none(q.get("created_at"))
    except ValueError:
        problems.append(f"quotation.created_at: not a timestamp {q.get('created_at')!r}")
        created_at = None

    try:
        validity_date = _date_or_none(validity.get("validityDate") or validity.get("validity_date"))
    except ValueError:
        problems.append("validity.validity_date: not a date")
        validity_date = None

    raw_days = validity.get("validityDays", validity.get("validity_days"))
    validity_days: Optional[int] = None
    if raw_days not in (None, ""):
        try:
            validity_days = int(raw_days)
        except (TypeError, ValueError):
            problems.append(f"validity.validity_days: not an integer {raw_days!r}")

    try:
        grand_total = _dec_or_none(q.get("grand_total"))
    except ValueError as e:
        problems.append(f"quotation.grand_total: {e}")
        grand_total = None

    quotation = Quotation(
        id=_s(q.get("id")),
        quotation_number=_s(q.get("quotation_number")),
        customer_name=_s(q.get("customer_name")),
        customer_address=_s(q.get("customer_address")),
        created_at=created_at,
        validity_date=validity_date,
        validity_days=validity_days,
        grand_total=grand_total,
    )

    items = [_item_from_json(x, i, problems) for i, x in _objects(j.get("items"), "items", problems)]

    raw_currency = _s(j.get("currency")).upper() or Currency.INR.value
    try:
        currency = Currency(raw_currency)
    except ValueError:
        problems.append(f"currency: unknown currency {j.get('currency')!r}")
        currency = Currency.INR

    user = _obj(j.get("user"), "user", problems)
    settings = _obj(j.get("settings"), "settings", problems)

    context = RenderContext(
        currency=currency,
        user=UserInfo(full_name=_s(user.get("full_name")), phone=_s(user.get("phone"))),
        settings=CompanySettings(company_name=_s(settings.get("company_name"))),
        validity_date=quotation.resolve_validity(),
    )

    terms = [
        SelectedTerm(title=_s(t.get("title")), text=_s(t.get("text")))
        for _, t in _objects(j.get("selected_terms") or j.get("selectedTerms"), "selected_terms", problems)
    ]

    req = RenderRequest(quotation=quotation, items=items, context=context, selected_terms=terms)
    validate_render_request(req, problems)
    return req


def validate_render_request(req: RenderRequest, problems: Optional[List[str]] = None) -> None:
    problems = list(problems or [])
    q = req.quotation

    if not _s(q.quotation_number):
        problems.append("quotation.quotation_number is required")
    if not _s(q.customer_name):
        problems.append("quotation.customer_name is required")
    if not req.items:
        problems.append("at least one line item is required")

    for idx, it in enumerate(req.items):
        where = f"items[{idx}]"
        if not _s(it.name):
            problems.append(f"{where}.name is required")
        if it.price is None:
            if not any(p.startswith(f"{where}.price") for p in problems):
                problems.append(f"{where}.price is required")
        elif not it.price.is_finite():
            problems.append(f"{where}.price must be a finite amount")
        elif it.price < 0:
            problems.append(f"{where}.price must not be negative")
        if not isinstance(it.image_layout, ImageLayout):
            problems.append(f"{where}: unknown image layout {it.image_layout!r}")
        for a_idx, a in enumerate(it.selected_addons):
            a_where = f"{where}.selected_addons[{a_idx}]"
            if not _s(a.name):
                problems.append(f"{a_where}.name is required")
            if a.price is None:
                if not any(p.startswith(f"{a_where}.price") for p in problems):
                    problems.append(f"{a_where}.price is required")
            elif not a.price.is_finite():
                problems.append(f"{a_where}.price must be a finite amount")
            elif a.price < 0:
                problems.append(f"{a_where}.price must not be negative")

    if not isinstance(req.context.currency, Currency):
        problems.append(f"currency: unknown currency {req.context.currency!r}")

    if problems:
        raise InvalidInputError(problems)


def request_to_json(req: RenderRequest) -> dict:
    q = req.quotation
    return {
        "quotation": {
            "id": q.id,
            "quotation_number": q.quotation_number,
            "customer_name": q.customer_name,
            "customer_address": q.customer_address or "",
            "created_at": q.created_at.isoformat() if q.created_at else None,
            "grand_total": _money_str(q.grand_total),
        },
        "validity": {
            "validity_date": q.validity_date.isoformat() if q.validity_date else None,
            "validity_days": q.validity_days,
        },
        "items": [
            {
                "id": it.id,
                "name": it.name,
                "price": _money_str(it.price),
                "description": it.description or "",
                "features": list(it.features),
                "specs": [{"key": s.key, "value": s.value} for s in it.specs],
                "image_url": it.image_url,
                "image_format": it.image_layout.value,
                "selected_addons": [
                    {"name": a.name, "price": _money_str(a.price)} for a in it.selected_addons
                ],
            }
            for it in req.items
        ],
        "currency": req.context.currency.value,
        "user": {"full_name": req.context.user.full_name, "phone": req.context.user.phone},
        "settings": {"company_name": req.context.settings.company_name},
        "selected_terms": [{"title": t.title, "text": t.text} for t in req.selected_terms],
    }
