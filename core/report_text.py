# core/report_text.py
import json
from typing import Dict, List, Tuple

from tabulate import tabulate

from .models import UNRESOLVED, Item

HEADERS = ["Description", "Quantity", "Vendor", "Price", "Shipping", "URL"]
UNKNOWN = "?.??"


def _cents_to_str(cents: int) -> str:
    if cents == UNRESOLVED:
        return UNKNOWN
    return f"{cents/100:.2f}"


def compute_totals(items: List[Item]) -> Tuple[int, int]:
    """
    Sum price*quantity and shipping*quantity in cents. Records without a
    price are left out entirely; unknown shipping is left out of the
    shipping sum.
    """
    total_price = 0
    total_shipping = 0
    for item in items:
        for vi in item.vendor_items:
            if vi.price == UNRESOLVED:
                continue
            total_price += vi.price * item.quantity
            if vi.shipping != UNRESOLVED:
                total_shipping += vi.shipping * item.quantity
    return total_price, total_shipping


def build_rows(items: List[Item]) -> List[List[str]]:
    rows = []
    for item in items:
        for vi in item.vendor_items:
            if vi.price == UNRESOLVED:
                price_str = shipping_str = UNKNOWN
            else:
                price_str = _cents_to_str(vi.price)
                shipping_str = _cents_to_str(vi.shipping)
            rows.append(
                [item.description, str(item.quantity), vi.vendor_name, price_str, shipping_str, vi.url]
            )

    total_price, total_shipping = compute_totals(items)
    rows.append(["Total", "", "", _cents_to_str(total_price), _cents_to_str(total_shipping), ""])
    rows.append(["Grand Total", "", "", _cents_to_str(total_price + total_shipping), "", ""])
    return rows


def build_plaintext_report(items: List[Item]) -> str:
    return tabulate(
        build_rows(items),
        headers=HEADERS,
        tablefmt="plain",
        disable_numparse=True,
        stralign="left",
    )


def build_vendor_reports(grouped: Dict[str, List[Item]]) -> str:
    sections = []
    for vendor_name, items in grouped.items():
        sections.append(f"== {vendor_name} ==\n{build_plaintext_report(items)}")
    return "\n\n".join(sections)


def build_json_report(items: List[Item]) -> str:
    return json.dumps([item.to_dict() for item in items], indent=2)
