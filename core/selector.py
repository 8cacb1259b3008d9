# core/selector.py
from typing import Dict, List

from .models import UNRESOLVED, Item, VendorItem


def _is_cheaper(candidate: VendorItem, best: VendorItem) -> bool:
    cand_total = candidate.total_cost()
    best_total = best.total_cost()
    if cand_total == UNRESOLVED:
        return False
    if best_total == UNRESOLVED:
        return True
    # strictly lower, so the earlier record wins a tie
    return cand_total < best_total


def lowest_cost_vendor(item: Item) -> VendorItem:
    """
    Cheapest known vendor record for an item. A resolved record always beats
    an unresolved one; if nothing resolved, the first record is returned.
    """
    best = item.vendor_items[0]
    for vi in item.vendor_items[1:]:
        if _is_cheaper(vi, best):
            best = vi
    return best


def items_by_lowest_cost_vendor(items: List[Item]) -> List[Item]:
    """
    Reduce each item to its single cheapest vendor record.
    The input items are left untouched.
    """
    return [
        Item(
            description=item.description,
            quantity=item.quantity,
            vendor_items=[lowest_cost_vendor(item)],
        )
        for item in items
    ]


def items_by_vendor(items: List[Item]) -> Dict[str, List[Item]]:
    """
    Group items under each vendor they carry a record for, keeping the
    vendor's first-appearance order. Each grouped Item holds only that
    vendor's record.
    """
    grouped: Dict[str, List[Item]] = {}
    for item in items:
        for vi in item.vendor_items:
            grouped.setdefault(vi.vendor_name, []).append(
                Item(
                    description=item.description,
                    quantity=item.quantity,
                    vendor_items=[vi],
                )
            )
    return grouped
