from __future__ import annotations

from typing import Optional

from apps.api.exceptions import InvalidOperationError, NotFoundError
from apps.catalog.protocols import ProductRepositoryProtocol
from apps.common import get_logger
from apps.common.unit_of_work import UnitOfWorkProtocol
from .dtos import CartDTO
from .models import Cart
from .protocols import (
    CartItemRepositoryProtocol,
    CartMapperProtocol,
    CartRepositoryProtocol,
)
from .repositories import CartAlreadyExistsError

logger = get_logger(__name__).bind(component="carts", layer="service")


class CartService:
    """Cart line mutations and the derived cart view for a single owner."""

    def __init__(
        self,
        carts: CartRepositoryProtocol,
        cart_items: CartItemRepositoryProtocol,
        products: ProductRepositoryProtocol,
        cart_mapper: CartMapperProtocol,
        unit_of_work: UnitOfWorkProtocol,
    ):
        self.carts = carts
        self.cart_items = cart_items
        self.products = products
        self.cart_mapper = cart_mapper
        self.unit_of_work = unit_of_work
        self.logger = logger.bind(service="CartService")

    def ensure_cart(self, user_id: int) -> Cart:
        """
        Return the user's cart, creating it on first access.

        A concurrent first access may win the insert; the unique constraint on
        the owner rejects ours and the winner's row is fetched instead.
        """
        existing = self.carts.get(user_id=user_id)
        if existing:
            return existing
        try:
            cart = self.carts.create_for_user(user_id)
        except CartAlreadyExistsError:
            existing = self.carts.get(user_id=user_id)
            if existing:
                self.logger.debug(
                    "Cart created by concurrent request",
                    user_id=user_id,
                    cart_id=existing.id,
                )
                return existing
            raise
        self.logger.info("Cart created", user_id=user_id, cart_id=cart.id)
        return cart

    def get_cart(self, user_id: int) -> CartDTO:
        self.logger.debug("Fetching cart", user_id=user_id)
        cart = self.ensure_cart(user_id)
        return self._to_view(cart.id)

    def add_item(self, user_id: int, product_id: int, quantity: Optional[int] = 1) -> CartDTO:
        quantity = 1 if quantity is None else quantity
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning("Add to cart failed: product not found", user_id=user_id, product_id=product_id)
            raise NotFoundError("Product not found", details={"productId": str(product_id)})
        if product.creator_id == user_id:
            self.logger.warning("Add to cart rejected: self-purchase", user_id=user_id, product_id=product_id)
            raise InvalidOperationError("You cannot purchase your own product")
        if not product.is_available_for_purchase:
            self.logger.warning(
                "Add to cart rejected: product unavailable",
                user_id=user_id,
                product_id=product_id,
                status=product.status,
            )
            raise InvalidOperationError("Product is not available for purchase")
        if quantity <= 0:
            raise InvalidOperationError("Quantity must be at least 1")

        cart = self.ensure_cart(user_id)

        def upsert_line():
            self.carts.lock(id=cart.id)
            existing = self.cart_items.get_for_cart_product(cart.id, product.id)
            if existing:
                self.cart_items.increment(
                    existing.id,
                    quantity,
                    unit_price=product.price,
                    seller_id=product.creator_id,
                )
            else:
                self.cart_items.create(
                    cart_id=cart.id,
                    product_id=product.id,
                    seller_id=product.creator_id,
                    quantity=quantity,
                    unit_price=product.price,
                )
            self.carts.touch(cart.id)
            return existing is not None

        merged = self.unit_of_work.run_in_transaction(upsert_line)
        self.logger.info(
            "Cart item added",
            user_id=user_id,
            cart_id=cart.id,
            product_id=product.id,
            quantity=quantity,
            unit_price=product.price,
            merged=merged,
        )
        return self._to_view(cart.id)

    def update_cart_item(self, user_id: int, item_id: int, quantity: int) -> CartDTO:
        """Set a line's quantity exactly; zero or less removes the line."""
        item = self._owned_item(user_id, item_id)

        def apply():
            self.carts.lock(id=item.cart_id)
            if quantity <= 0:
                changed = self.cart_items.delete_item(item.id)
            else:
                changed = self.cart_items.set_quantity(item.id, quantity)
            if not changed:
                raise NotFoundError("Cart item not found", details={"id": str(item_id)})
            self.carts.touch(item.cart_id)

        self.unit_of_work.run_in_transaction(apply)
        self.logger.info(
            "Cart item updated" if quantity > 0 else "Cart item removed by zero quantity",
            user_id=user_id,
            item_id=item_id,
            quantity=quantity,
        )
        return self._to_view(item.cart_id)

    def remove_cart_item(self, user_id: int, item_id: int) -> CartDTO:
        item = self._owned_item(user_id, item_id)

        def apply():
            self.carts.lock(id=item.cart_id)
            if not self.cart_items.delete_item(item.id):
                raise NotFoundError("Cart item not found", details={"id": str(item_id)})
            self.carts.touch(item.cart_id)

        self.unit_of_work.run_in_transaction(apply)
        self.logger.info("Cart item removed", user_id=user_id, item_id=item_id)
        return self._to_view(item.cart_id)

    def _owned_item(self, user_id: int, item_id: int):
        item = self.cart_items.get_owned(item_id, user_id)
        if not item:
            self.logger.warning("Cart item not found for user", user_id=user_id, item_id=item_id)
            raise NotFoundError("Cart item not found", details={"id": str(item_id)})
        return item

    def _to_view(self, cart_id: int) -> CartDTO:
        cart = self.carts.get(id=cart_id)
        return self.cart_mapper.to_dto(cart, self.cart_items.list_for_cart(cart_id))
