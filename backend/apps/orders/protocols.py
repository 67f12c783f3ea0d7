from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, TYPE_CHECKING

from .models import Order, OrderActivity, OrderItem

if TYPE_CHECKING:
    from apps.orders.dtos import OrderDTO


class OrderRepositoryProtocol(Protocol):
    def create(self, **data) -> Order:
        ...

    def get(self, **filters) -> Optional[Order]:
        ...

    def lock(self, **filters) -> Optional[Order]:
        ...

    def list_for_buyer(self, user_id: int) -> List[Order]:
        ...

    def list_for_seller(self, user_id: int) -> List[Order]:
        ...

    def set_status(self, order_id: int, status: str) -> int:
        ...


class OrderItemRepositoryProtocol(Protocol):
    def create_many(self, rows: Iterable[dict]) -> List[OrderItem]:
        ...


class OrderActivityRepositoryProtocol(Protocol):
    def create(self, **data) -> OrderActivity:
        ...


class OrderMapperProtocol(Protocol):
    def to_dto(
        self,
        order: Order,
        *,
        viewer_context: Optional[str] = None,
        allowed_actions: Optional[List[str]] = None,
    ) -> "OrderDTO":
        ...
