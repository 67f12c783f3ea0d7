from __future__ import annotations

from typing import Iterable, Optional, Protocol, TYPE_CHECKING

from .models import Cart, CartItem

if TYPE_CHECKING:
    from apps.carts.dtos import CartDTO


class CartRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Cart]:
        ...

    def create_for_user(self, user_id: int) -> Cart:
        ...

    def lock(self, **filters) -> Optional[Cart]:
        ...

    def touch(self, cart_id: int) -> None:
        ...


class CartItemRepositoryProtocol(Protocol):
    def create(self, **data) -> CartItem:
        ...

    def list_for_cart(self, cart_id: int) -> Iterable[CartItem]:
        ...

    def list_selected(self, cart_id: int, item_ids: Iterable[int]) -> Iterable[CartItem]:
        ...

    def get_owned(self, item_id: int, user_id: int) -> Optional[CartItem]:
        ...

    def get_for_cart_product(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        ...

    def increment(self, item_id: int, quantity: int, *, unit_price, seller_id: int) -> int:
        ...

    def set_quantity(self, item_id: int, quantity: int) -> int:
        ...

    def delete_item(self, item_id: int) -> int:
        ...

    def delete_selected(self, cart_id: int, item_ids: Iterable[int]) -> int:
        ...


class CartMapperProtocol(Protocol):
    def to_dto(self, cart: Cart, items: Iterable[CartItem]) -> "CartDTO":
        ...
