"""
Shared pytest fixtures for the quotation renderer test suite.

Nothing here touches the network: photos and logos are small images written
to ``tmp_path`` with Pillow and handed to the loader as local paths. Remote
fetches are covered by monkeypatching ``requests.get`` in the loader tests.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from PIL import Image

from quotation_pdf.config import Settings
from quotation_pdf.models import (
    CompanySettings,
    Currency,
    ImageLayout,
    LineItem,
    Quotation,
    RenderContext,
    Spec,
    UserInfo,
)


@pytest.fixture
def make_image_file(tmp_path):
    """Factory: write a solid-colour image and return its path."""
    def _make(name="photo.png", size=(400, 300), mode="RGB", color=(200, 30, 30)):
        p = tmp_path / name
        Image.new(mode, size, color).save(p)
        return p
    return _make


@pytest.fixture
def settings(tmp_path):
    """Defaults, with a logo path that does not exist (header renders without a logo)."""
    return Settings(logo_path=str(tmp_path / "missing-logo.jpg"))


@pytest.fixture
def quotation():
    return Quotation(
        id="q-1",
        quotation_number="Q-2024-001",
        customer_name="Sri Venkateswara Pharma Pvt. Ltd.",
        customer_address="Plot 42, Phase II, IDA Pashamylaram\nSangareddy, Telangana 502307",
        created_at=datetime(2024, 3, 12, 10, 30),
        validity_days=30,
        grand_total=Decimal("125000"),
    )


@pytest.fixture
def disintegration_tester():
    return LineItem(
        id="item-1",
        name="Disintegration Tester",
        price=Decimal("125000"),
        description=(
            "Microprocessor based two station disintegration test apparatus conforming "
            "to USP and IP standards, with digital temperature control."
        ),
        features=[
            "Two independent baskets with individual timers",
            "Digital temperature controller with PT-100 sensor",
            "Audio-visual alarm at end of test",
        ],
        specs=[Spec("Stroke", "55 mm +/- 2 mm"), Spec("Power", "230 V AC, 50 Hz")],
        image_url=None,
        image_layout=ImageLayout.WIDE,
    )


@pytest.fixture
def context():
    return RenderContext(
        currency=Currency.INR,
        user=UserInfo(full_name="Anil Kumar", phone="+91 98480 12345"),
        settings=CompanySettings(company_name="Raise Lab Equipment"),
    )
