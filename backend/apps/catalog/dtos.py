from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass
class ProductSnapshotDTO:
    """The slice of a product that carts and orders expose alongside a line."""

    id: int
    name: str
    price: Decimal
    creator_id: int
    images: List[str] = field(default_factory=list)
