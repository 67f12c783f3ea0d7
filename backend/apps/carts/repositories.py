from typing import Iterable, Optional

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from apps.common.repository import GenericRepository
from .models import Cart, CartItem


class CartAlreadyExistsError(Exception):
    """Raised when a second cart row would be created for the same user."""


class CartRepository(GenericRepository[Cart]):
    def __init__(self):
        super().__init__(Cart)

    def create_for_user(self, user_id: int) -> Cart:
        # Savepoint so a unique-violation does not poison an enclosing transaction
        try:
            with transaction.atomic():
                return self.model.objects.create(user_id=user_id)
        except IntegrityError as exc:
            raise CartAlreadyExistsError(f"User {user_id} already has a cart") from exc

    def touch(self, cart_id: int) -> None:
        self.model.objects.filter(pk=cart_id).update(updated_at=timezone.now())


class CartItemRepository(GenericRepository[CartItem]):
    def __init__(self):
        super().__init__(CartItem)

    def _with_product(self):
        return self.model.objects.select_related("product").order_by("created_at", "id")

    def list_for_cart(self, cart_id: int) -> Iterable[CartItem]:
        return list(self._with_product().filter(cart_id=cart_id))

    def list_selected(self, cart_id: int, item_ids: Iterable[int]) -> Iterable[CartItem]:
        return list(self._with_product().filter(cart_id=cart_id, id__in=list(item_ids)))

    def get_owned(self, item_id: int, user_id: int) -> Optional[CartItem]:
        return self.model.objects.filter(id=item_id, cart__user_id=user_id).first()

    def get_for_cart_product(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        return self.model.objects.filter(cart_id=cart_id, product_id=product_id).first()

    def increment(self, item_id: int, quantity: int, *, unit_price, seller_id: int) -> int:
        return self.model.objects.filter(pk=item_id).update(
            quantity=F("quantity") + quantity,
            unit_price=unit_price,
            seller_id=seller_id,
            updated_at=timezone.now(),
        )

    def set_quantity(self, item_id: int, quantity: int) -> int:
        return self.model.objects.filter(pk=item_id).update(
            quantity=quantity, updated_at=timezone.now()
        )

    def delete_item(self, item_id: int) -> int:
        return self.delete_where(pk=item_id)

    def delete_selected(self, cart_id: int, item_ids: Iterable[int]) -> int:
        return self.delete_where(cart_id=cart_id, id__in=list(item_ids))
