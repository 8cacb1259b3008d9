# vendors/base.py
import re
from decimal import Decimal

from bs4 import BeautifulSoup
from bs4.element import Tag

_MONEY_RE = re.compile(r"\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2}")


class ExtractionError(Exception):
    """Rendered markup did not yield a price."""


class UnsupportedVendorError(ExtractionError):
    pass


class MissingElementError(ExtractionError):
    pass


class EmptyPriceError(ExtractionError):
    pass


class StalePriceError(ExtractionError):
    """The page still shows its placeholder price; the settle delay was too short."""


class PriceParseError(ExtractionError):
    pass


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def text_or_empty(tag: Tag | None) -> str:
    return tag.get_text(strip=True) if tag is not None else ""


def parse_cents(text: str, prefix: str = "") -> int:
    """
    Convert a price string such as "US$1,234.56" to cents.

    Exactly two fractional digits are required. Parsing goes through
    Decimal so 0.29 stays 29 cents.
    """
    s = text.strip()
    if prefix and s.startswith(prefix):
        s = s[len(prefix):].strip()
    if not _MONEY_RE.fullmatch(s):
        raise PriceParseError(f"parsing {text!r}: not a price with two decimal places")
    return int(Decimal(s.replace(",", "")) * 100)
