# quotation_pdf/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_COMPANY_NAME = "RAISE LAB EQUIPMENT"
DEFAULT_COMPANY_ADDRESS = (
    "C-6, B1, Industrial Park, Moula Ali,\n"
    "Hyderabad, Secunderabad,\n"
    "Telangana 500040"
)
DEFAULT_CONTACT_LINE = (
    "Write us: info@raiselabequip.com / sales@raiselabequip.com | Contact: +91 91777 70365"
)
DEFAULT_CONTACT_PHONE = "+91 91777 70365"


@dataclass(frozen=True)
class Settings:
    logo_path: str = "static/quotation-logo.jpg"

    company_name: str = DEFAULT_COMPANY_NAME
    company_address: str = DEFAULT_COMPANY_ADDRESS
    contact_line: str = DEFAULT_CONTACT_LINE
    default_contact_phone: str = DEFAULT_CONTACT_PHONE

    # Photos wider than this are downsampled before JPEG re-encoding
    image_max_width_px: int = 800
    image_jpeg_quality: int = 85
    image_fetch_timeout: float = 10.0
    image_fetch_workers: int = 8

    output_dir: Path = Path("out")

    log_level: str = "INFO"
    log_json: bool = True


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _bool_env(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    # Local dev convenience: loads from .env if present.
    load_dotenv()

    # .env files write newlines in the address as literal "\n"
    address = os.getenv("COMPANY_ADDRESS")
    if address:
        address = address.replace("\\n", "\n")

    return Settings(
        logo_path=os.getenv("QUOTATION_LOGO_PATH") or Settings.logo_path,
        company_name=os.getenv("COMPANY_NAME") or DEFAULT_COMPANY_NAME,
        company_address=address or DEFAULT_COMPANY_ADDRESS,
        contact_line=os.getenv("COMPANY_CONTACT_LINE") or DEFAULT_CONTACT_LINE,
        default_contact_phone=os.getenv("DEFAULT_CONTACT_PHONE") or DEFAULT_CONTACT_PHONE,
        image_max_width_px=_int_env("IMAGE_MAX_WIDTH_PX", Settings.image_max_width_px),
        image_jpeg_quality=_int_env("IMAGE_JPEG_QUALITY", Settings.image_jpeg_quality),
        image_fetch_timeout=_float_env("IMAGE_FETCH_TIMEOUT", Settings.image_fetch_timeout),
        image_fetch_workers=_int_env("IMAGE_FETCH_WORKERS", Settings.image_fetch_workers),
        output_dir=Path(os.getenv("QUOTATION_OUTPUT_DIR") or "out"),
        log_level=os.getenv("LOG_LEVEL") or "INFO",
        log_json=_bool_env("LOG_JSON", True),
    )
