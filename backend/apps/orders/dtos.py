from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from apps.catalog.dtos import ProductSnapshotDTO


@dataclass
class OrderItemDTO:
    id: int
    product_id: Optional[int]
    seller_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    created_at: datetime
    updated_at: datetime
    product: Optional[ProductSnapshotDTO] = None


@dataclass
class OrderActivityDTO:
    id: int
    author_id: int
    kind: str
    message: str
    status: Optional[str]
    created_at: datetime


@dataclass
class OrderDTO:
    id: int
    buyer_id: int
    status: str
    total_amount: Decimal
    buyer_note: Optional[str]
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemDTO] = field(default_factory=list)
    activities: List[OrderActivityDTO] = field(default_factory=list)
    viewer_context: Optional[str] = None
    allowed_actions: List[str] = field(default_factory=list)
