from typing import Iterable, List, Optional

from apps.catalog.mappers import ProductSnapshotMapper

from .dtos import OrderActivityDTO, OrderDTO, OrderItemDTO
from .models import Order, OrderActivity, OrderItem


class OrderItemMapper:
    def __init__(self, product_mapper: Optional[ProductSnapshotMapper] = None) -> None:
        self.product_mapper = product_mapper or ProductSnapshotMapper()

    def to_dto(self, item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            id=item.id,
            product_id=item.product_id,
            seller_id=item.seller_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            subtotal=item.subtotal,
            created_at=item.created_at,
            updated_at=item.updated_at,
            product=self.product_mapper.to_dto(item.product),
        )

    def many_to_dto(self, items: Iterable[OrderItem]) -> List[OrderItemDTO]:
        return [self.to_dto(i) for i in items]


class OrderActivityMapper:
    @staticmethod
    def to_dto(activity: OrderActivity) -> OrderActivityDTO:
        return OrderActivityDTO(
            id=activity.id,
            author_id=activity.author_id,
            kind=activity.kind,
            message=activity.message,
            status=activity.status,
            created_at=activity.created_at,
        )

    @staticmethod
    def many_to_dto(activities: Iterable[OrderActivity]) -> List[OrderActivityDTO]:
        return [OrderActivityMapper.to_dto(a) for a in activities]


class OrderMapper:
    def __init__(
        self,
        item_mapper: Optional[OrderItemMapper] = None,
        activity_mapper: Optional[OrderActivityMapper] = None,
    ) -> None:
        self.item_mapper = item_mapper or OrderItemMapper()
        self.activity_mapper = activity_mapper or OrderActivityMapper()

    def to_dto(
        self,
        order: Order,
        *,
        viewer_context: Optional[str] = None,
        allowed_actions: Optional[List[str]] = None,
    ) -> OrderDTO:
        return OrderDTO(
            id=order.id,
            buyer_id=order.buyer_id,
            status=order.status,
            total_amount=order.total_amount,
            buyer_note=order.buyer_note,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=self.item_mapper.many_to_dto(order.items.all()),
            activities=self.activity_mapper.many_to_dto(order.activities.all()),
            viewer_context=viewer_context,
            allowed_actions=list(allowed_actions or []),
        )
