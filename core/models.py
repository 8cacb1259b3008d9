# core/models.py
import itertools
from dataclasses import dataclass, field
from typing import List, Optional

# Marks a price, shipping or total cost that has not been resolved.
UNRESOLVED = -1

_job_ids = itertools.count(1)


@dataclass
class VendorItem:
    """
    One vendor's offer for an item.
    Prices are stored in cents; UNRESOLVED until the page has been looked up.
    """
    vendor_name: str
    url: str
    price: int = UNRESOLVED
    shipping: int = UNRESOLVED

    def total_cost(self) -> int:
        if self.price == UNRESOLVED:
            return UNRESOLVED
        total = self.price
        if self.shipping != UNRESOLVED:
            total += self.shipping
        return total

    def is_resolved(self) -> bool:
        return self.price != UNRESOLVED

    def to_dict(self) -> dict:
        return {
            "vendor-name": self.vendor_name,
            "url": self.url,
            "price": self.price,
            "shipping": self.shipping,
        }


@dataclass
class Item:
    description: str
    quantity: int
    vendor_items: List[VendorItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "quantity": self.quantity,
            "vendor-items": [vi.to_dict() for vi in self.vendor_items],
        }


@dataclass(frozen=True)
class FetchJob:
    """A request to render one page. Identity is the job_id, not the URL."""
    url: str
    job_id: int = field(default_factory=lambda: next(_job_ids))


@dataclass(frozen=True)
class FetchResult:
    job: FetchJob
    html: str = ""
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None
