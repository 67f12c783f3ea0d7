from decimal import Decimal
from typing import Iterable, List, Optional

from apps.catalog.mappers import ProductSnapshotMapper

from .dtos import CartDTO, CartItemDTO
from .models import Cart, CartItem


class CartItemMapper:
    def __init__(self, product_mapper: Optional[ProductSnapshotMapper] = None) -> None:
        self.product_mapper = product_mapper or ProductSnapshotMapper()

    def to_dto(self, item: CartItem) -> CartItemDTO:
        return CartItemDTO(
            id=item.id,
            product_id=item.product_id,
            seller_id=item.seller_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=item.unit_price * item.quantity,
            created_at=item.created_at,
            updated_at=item.updated_at,
            product=self.product_mapper.to_dto(getattr(item, "product", None)),
        )

    def many_to_dto(self, items: Iterable[CartItem]) -> List[CartItemDTO]:
        return [self.to_dto(i) for i in items]


class CartMapper:
    """Builds the cart view; totals are derived from the lines on every call."""

    def __init__(self, item_mapper: Optional[CartItemMapper] = None) -> None:
        self.item_mapper = item_mapper or CartItemMapper()

    def to_dto(self, cart: Cart, items: Iterable[CartItem]) -> CartDTO:
        lines = self.item_mapper.many_to_dto(items)
        return CartDTO(
            id=cart.id,
            user_id=cart.user_id,
            created_at=cart.created_at,
            updated_at=cart.updated_at,
            total_items=sum(line.quantity for line in lines),
            total_amount=sum((line.line_total for line in lines), Decimal("0.00")),
            items=lines,
        )
