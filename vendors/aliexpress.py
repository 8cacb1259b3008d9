# vendors/aliexpress.py
from typing import Tuple

from core.models import UNRESOLVED

MARKER = "https://www.aliexpress.com"


def extract_price_and_shipping(html: str) -> Tuple[int, int]:
    # TODO: AliExpress renders prices from a JSON blob in window.runParams; parse that.
    return UNRESOLVED, UNRESOLVED
