from typing import Iterable, List, Optional

from django.db.models import Prefetch

from apps.common.repository import GenericRepository
from .models import Order, OrderActivity, OrderItem


class OrderRepository(GenericRepository[Order]):
    def __init__(self):
        super().__init__(Order)

    def _hydrated(self):
        return self.model.objects.prefetch_related(
            Prefetch(
                "items",
                queryset=OrderItem.objects.select_related("product").order_by("created_at", "id"),
            ),
            Prefetch("activities", queryset=OrderActivity.objects.order_by("created_at", "id")),
        )

    def get(self, **filters) -> Optional[Order]:  # type: ignore[override]
        return self._hydrated().filter(**filters).first()

    def list_for_buyer(self, user_id: int) -> List[Order]:
        return list(self._hydrated().filter(buyer_id=user_id).order_by("-created_at", "-id"))

    def list_for_seller(self, user_id: int) -> List[Order]:
        # Subquery keeps one row per order however many of its items the seller owns
        order_ids = OrderItem.objects.filter(seller_id=user_id).values("order_id")
        return list(
            self._hydrated().filter(id__in=order_ids).order_by("-created_at", "-id")
        )

    def set_status(self, order_id: int, status: str) -> int:
        order = self.model.objects.filter(pk=order_id).first()
        if order is None:
            return 0
        self.update(order, status=status)
        return 1


class OrderItemRepository(GenericRepository[OrderItem]):
    def __init__(self):
        super().__init__(OrderItem)

    def create_many(self, rows: Iterable[dict]) -> List[OrderItem]:
        return [self.model.objects.create(**row) for row in rows]


class OrderActivityRepository(GenericRepository[OrderActivity]):
    def __init__(self):
        super().__init__(OrderActivity)
