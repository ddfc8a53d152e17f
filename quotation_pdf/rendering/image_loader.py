# quotation_pdf/rendering/image_loader.py
from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, Optional

import requests
from PIL import Image, UnidentifiedImageError

from quotation_pdf.errors import ImageLoadError
from quotation_pdf.models import LineItem, LoadedImage


logger = logging.getLogger(__name__)


def _is_remote(source: str) -> bool:
    s = source.strip().lower()
    return s.startswith("http://") or s.startswith("https://")


class ImageLoader:
    """
    Fetches raster images (remote URL or local path), flattens them onto
    white, downsamples anything wider than ``max_width_px`` and re-encodes
    as JPEG so the bytes can be embedded directly.
    """

    def __init__(
        self,
        max_width_px: int = 800,
        jpeg_quality: int = 85,
        timeout: float = 10.0,
        max_workers: int = 8,
    ):
        self.max_width_px = int(max_width_px)
        self.jpeg_quality = int(jpeg_quality)
        self.timeout = float(timeout)
        self.max_workers = max(1, int(max_workers))

    def _read_bytes(self, source: str) -> bytes:
        if _is_remote(source):
            try:
                resp = requests.get(source, timeout=self.timeout)
                resp.raise_for_status()
            except requests.RequestException as e:
                raise ImageLoadError(source, f"{type(e).__name__}: {e}") from e
            if not resp.content:
                raise ImageLoadError(source, "empty response body")
            return resp.content

        try:
            return Path(source).read_bytes()
        except OSError as e:
            raise ImageLoadError(source, f"{type(e).__name__}: {e}") from e

    def _encode(self, source: str, raw: bytes) -> LoadedImage:
        try:
            with Image.open(io.BytesIO(raw)) as img:
                img.load()

                if img.mode in ("RGBA", "LA", "P"):
                    rgba = img.convert("RGBA")
                    flat = Image.new("RGB", rgba.size, (255, 255, 255))
                    flat.paste(rgba, mask=rgba.getchannel("A"))
                else:
                    flat = img.convert("RGB")

            w, h = flat.size
            if w > self.max_width_px:
                new_h = max(1, round(h * self.max_width_px / float(w)))
                flat = flat.resize((self.max_width_px, new_h), Image.Resampling.LANCZOS)
                w, h = flat.size

            out = io.BytesIO()
            flat.save(out, format="JPEG", quality=self.jpeg_quality)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageLoadError(source, f"{type(e).__name__}: {e}") from e

        if not w or not h:
            raise ImageLoadError(source, "image has no pixels")

        return LoadedImage(encoded_bytes=out.getvalue(), width=w, height=h)

    def load(self, source: str) -> LoadedImage:
        if not (source or "").strip():
            raise ImageLoadError(source or "", "no source given")
        return self._encode(source, self._read_bytes(source))

    def load_optional(self, source: Optional[str]) -> Optional[LoadedImage]:
        """Soft variant: a failed load is logged and returns None."""
        if not (source or "").strip():
            return None
        try:
            return self.load(source)
        except ImageLoadError as e:
            logger.warning("Image load failed, rendering without it: %s", e)
            return None

    def load_for_items(self, items: Iterable[LineItem]) -> Dict[str, LoadedImage]:
        """
        Fan out one load per item photo and join before returning.
        Items without a photo, or whose photo failed, are absent from the result.
        """
        wanted = [(it.id, it.image_url) for it in items if (it.image_url or "").strip()]
        if not wanted:
            return {}

        out: Dict[str, LoadedImage] = {}
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(wanted))) as pool:
            futures = {item_id: pool.submit(self.load_optional, url) for item_id, url in wanted}
            for item_id, fut in futures.items():
                img = fut.result()
                if img is not None:
                    out[item_id] = img

        logger.info("Loaded %d of %d item images", len(out), len(wanted))
        return out
