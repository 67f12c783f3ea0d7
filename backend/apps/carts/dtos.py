from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from apps.catalog.dtos import ProductSnapshotDTO


@dataclass
class CartItemDTO:
    id: int
    product_id: int
    seller_id: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    created_at: datetime
    updated_at: datetime
    product: Optional[ProductSnapshotDTO] = None


@dataclass
class CartDTO:
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime
    total_items: int
    total_amount: Decimal
    items: List[CartItemDTO] = field(default_factory=list)
