# vendors/__init__.py
from typing import Callable, List, NamedTuple, Optional, Tuple

from . import aliexpress
from . import banggood
from .base import ExtractionError, UnsupportedVendorError


class Vendor(NamedTuple):
    name: str
    marker: str
    extract: Callable[[str], Tuple[int, int]]


# Checked in order; the first marker found in the rendered page wins.
VENDORS: List[Vendor] = [
    Vendor("banggood", banggood.MARKER, banggood.extract_price_and_shipping),
    Vendor("aliexpress", aliexpress.MARKER, aliexpress.extract_price_and_shipping),
]


def detect_vendor(html: str) -> Optional[Vendor]:
    for vendor in VENDORS:
        if vendor.marker in html:
            return vendor
    return None


def get_price_and_shipping(html: str, url: str = "") -> Tuple[int, int]:
    """
    Identify the vendor from the rendered markup and extract (price, shipping)
    in cents. Raises ExtractionError when that fails.
    """
    vendor = detect_vendor(html)
    if vendor is None:
        raise UnsupportedVendorError(f"unsupported vendor: {url}" if url else "unsupported vendor")
    return vendor.extract(html)


__all__ = [
    "VENDORS",
    "Vendor",
    "ExtractionError",
    "detect_vendor",
    "get_price_and_shipping",
]
