# core/catalog.py
import re
from typing import Iterable, List, Optional, TextIO, Tuple

from .logger import get_logger
from .models import Item, VendorItem

logger = get_logger(__name__)

MIN_FIELDS = 3
_QTY_RE = re.compile(r"[+-]?[0-9]+")


class CatalogError(Exception):
    """Catalog could not be read."""


class CatalogFormatError(CatalogError):
    def __init__(self, line_num: int, message: str):
        super().__init__(f"line {line_num}: {message}")
        self.line_num = line_num


def _split(line: str) -> List[str]:
    return line.rstrip("\r\n").split("\t")


def parse_lines(lines: Iterable[str]) -> List[Item]:
    """
    Parse a tab-separated shopping list.

    The first line holds column headers: columns 0 and 1 are labels, the
    rest name vendors. Every following line is
    description, quantity, then one URL per vendor column.
    """
    vendor_names: List[str] = []
    items: List[Item] = []
    # blank lines are only allowed at the end of the file
    blank: Optional[Tuple[int, int]] = None

    for line_num, line in enumerate(lines, start=1):
        if line_num > 1 and not line.strip():
            if blank is None:
                blank = (line_num, len(_split(line)))
            continue
        if blank is not None:
            blank_num, found = blank
            raise CatalogFormatError(
                blank_num,
                f"need at least {MIN_FIELDS} columns, only found {found}",
            )

        vals = _split(line)
        if len(vals) < MIN_FIELDS:
            raise CatalogFormatError(
                line_num,
                f"need at least {MIN_FIELDS} columns, only found {len(vals)}",
            )

        if line_num == 1:
            vendor_names = [v.strip() for v in vals[2:]]
            continue

        desc = vals[0].strip()
        qty_str = vals[1].strip()
        if not _QTY_RE.fullmatch(qty_str):
            raise CatalogFormatError(line_num, f"cannot parse quantity: invalid integer {qty_str!r}")
        qty = int(qty_str)
        if qty < 1:
            raise CatalogFormatError(line_num, f"quantity must be positive, got {qty}")

        item = Item(description=desc, quantity=qty)
        for col, url in enumerate(vals[2:], start=2):
            idx = col - 2
            name = vendor_names[idx] if idx < len(vendor_names) else f"column {col + 1}"
            item.vendor_items.append(VendorItem(vendor_name=name, url=url.strip()))

        items.append(item)

    logger.debug(
        "Loaded %d items across %d vendor columns.", len(items), len(vendor_names)
    )
    return items


def load_items(fp: TextIO) -> List[Item]:
    return parse_lines(fp)


def load_items_from_path(path: str) -> List[Item]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return load_items(f)
    except OSError as e:
        raise CatalogError(f"opening {path}: {e}") from e
