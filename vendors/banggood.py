# vendors/banggood.py
from typing import Tuple

from core.logger import get_logger

from .base import (
    EmptyPriceError,
    MissingElementError,
    StalePriceError,
    parse_cents,
    parse_html,
    text_or_empty,
)

logger = get_logger(__name__)

MARKER = "https://www.banggood.com"
CURRENCY_PREFIX = "US$"

PRICE_SELECTOR = "span.main-price"
SHIPPING_SELECTOR = "em.shipping-price-em"


def extract_price_and_shipping(html: str) -> Tuple[int, int]:
    """Return (price, shipping) in cents from a rendered Banggood product page."""
    soup = parse_html(html)

    price_el = soup.select_one(PRICE_SELECTOR)
    if price_el is None:
        raise MissingElementError(f"couldn't find <{PRICE_SELECTOR}>")

    price_str = text_or_empty(price_el)
    if not price_str:
        raise EmptyPriceError("price element was an empty string")

    price = parse_cents(price_str, CURRENCY_PREFIX)
    if price == 0:
        raise StalePriceError(
            f"found price of {price_str} - may not have waited long enough "
            "for the price to update in the browser"
        )

    # No shipping markup means shipping is included.
    shipping = 0
    shipping_str = text_or_empty(soup.select_one(SHIPPING_SELECTOR))
    if shipping_str and "free" not in shipping_str.lower():
        shipping = parse_cents(shipping_str, CURRENCY_PREFIX)

    logger.debug("Banggood price=%d shipping=%d", price, shipping)
    return price, shipping
