# quotation_pdf/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class ImageLayout(str, Enum):
    # photo spans the content width above the feature list
    WIDE = "wide"
    # features on the left, photo in a right-hand column
    TALL = "tall"


class Currency(str, Enum):
    INR = "INR"
    USD = "USD"

    @property
    def symbol(self) -> str:
        return "Rs." if self is Currency.INR else "$"

    @property
    def label(self) -> str:
        return self.value


@dataclass
class Addon:
    name: str
    price: Optional[Decimal] = None


@dataclass
class Spec:
    key: str
    value: str = ""


@dataclass
class LineItem:
    id: str
    name: str
    price: Optional[Decimal] = None
    description: str = ""
    features: List[str] = field(default_factory=list)
    specs: List[Spec] = field(default_factory=list)
    image_url: Optional[str] = None
    image_layout: ImageLayout = ImageLayout.WIDE
    selected_addons: List[Addon] = field(default_factory=list)

    @property
    def unit_price(self) -> Decimal:
        """Price shown in the commercial table: base price plus every selected addon."""
        total = self.price or Decimal("0")
        for a in self.selected_addons:
            total += a.price or Decimal("0")
        return total


@dataclass
class Quotation:
    id: str
    quotation_number: str
    customer_name: str
    customer_address: str = ""
    created_at: Optional[datetime] = None
    validity_date: Optional[date] = None
    validity_days: Optional[int] = None
    grand_total: Optional[Decimal] = None

    def resolve_validity(self) -> Optional[date]:
        if self.validity_date is not None:
            return self.validity_date
        if self.validity_days is not None and self.created_at is not None:
            return self.created_at.date() + timedelta(days=int(self.validity_days))
        return None


@dataclass
class SelectedTerm:
    title: str
    text: str


@dataclass
class UserInfo:
    full_name: str = ""
    phone: str = ""


@dataclass
class CompanySettings:
    company_name: str = ""


@dataclass
class RenderContext:
    currency: Currency = Currency.INR
    user: UserInfo = field(default_factory=UserInfo)
    settings: CompanySettings = field(default_factory=CompanySettings)
    validity_date: Optional[date] = None


@dataclass(frozen=True)
class LoadedImage:
    encoded_bytes: bytes
    width: int
    height: int

    @property
    def aspect(self) -> float:
        """height / width"""
        return float(self.height) / float(self.width) if self.width else 1.0
