from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from apps.api.exceptions import (
    InvalidOperationError,
    NotFoundError,
    PermissionDeniedError,
)
from apps.carts.protocols import CartItemRepositoryProtocol, CartRepositoryProtocol
from apps.common import get_logger
from apps.common.unit_of_work import UnitOfWorkProtocol
from .commands import CheckoutCommand
from .dtos import OrderDTO
from .models import ActivityKind, Order, OrderStatus
from .policies import (
    ACTION_MESSAGE,
    TRANSITIONS,
    allowed_actions,
    resolve_viewer_context,
)
from .protocols import (
    OrderActivityRepositoryProtocol,
    OrderItemRepositoryProtocol,
    OrderMapperProtocol,
    OrderRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="orders", layer="service")


class StaleSelectionError(Exception):
    """Cart lines vanished between loading the cart and committing the order."""


def _viewer_context(order: Order, user_id: int) -> Optional[str]:
    return resolve_viewer_context(
        user_id, order.buyer_id, (item.seller_id for item in order.items.all())
    )


def present_order(mapper: OrderMapperProtocol, order: Order, user_id: int) -> OrderDTO:
    context = _viewer_context(order, user_id)
    return mapper.to_dto(
        order,
        viewer_context=context,
        allowed_actions=allowed_actions(context, order.status) if context else [],
    )


class CheckoutService:
    """Turns a selection of cart lines into a pending order in one transaction."""

    def __init__(
        self,
        carts: CartRepositoryProtocol,
        cart_items: CartItemRepositoryProtocol,
        orders: OrderRepositoryProtocol,
        order_items: OrderItemRepositoryProtocol,
        order_mapper: OrderMapperProtocol,
        unit_of_work: UnitOfWorkProtocol,
    ):
        self.carts = carts
        self.cart_items = cart_items
        self.orders = orders
        self.order_items = order_items
        self.order_mapper = order_mapper
        self.unit_of_work = unit_of_work
        self.logger = logger.bind(service="CheckoutService")

    def checkout(
        self,
        user_id: int,
        cart_item_ids: Optional[Iterable[int]] = None,
        buyer_note: Optional[str] = None,
    ) -> OrderDTO:
        try:
            selection = CheckoutCommand.normalize_ids(cart_item_ids)
        except ValueError as exc:
            raise InvalidOperationError(str(exc), details={"cartItemIds": None}) from None
        self.logger.debug(
            "Starting checkout",
            user_id=user_id,
            selection=list(selection) if selection is not None else None,
        )
        cart = self.carts.get(user_id=user_id)
        lines = list(self.cart_items.list_for_cart(cart.id)) if cart else []
        if not lines:
            self.logger.warning("Checkout rejected: cart is empty", user_id=user_id)
            raise InvalidOperationError("Cart is empty")

        eligible = self._select(lines, selection)
        selected_ids = [line.id for line in eligible]

        try:
            order_id = self.unit_of_work.run_in_transaction(
                lambda: self._place_order(user_id, cart.id, selected_ids, buyer_note)
            )
        except StaleSelectionError:
            self.logger.warning(
                "Checkout rolled back: selection stale",
                user_id=user_id,
                cart_id=cart.id,
                cart_item_ids=selected_ids,
            )
            raise InvalidOperationError(
                "Selected cart items are stale",
                details={"cartItemIds": [str(i) for i in selected_ids]},
                hint="Reload the cart and try again.",
            ) from None

        order = self.orders.get(id=order_id)
        self.logger.info(
            "Order placed",
            user_id=user_id,
            order_id=order.id,
            total_amount=order.total_amount,
            line_count=len(selected_ids),
        )
        return present_order(self.order_mapper, order, user_id)

    def _select(self, lines: List, selection: Optional[Sequence[int]]) -> List:
        if selection is None:
            return lines
        if not selection:
            raise InvalidOperationError("No cart items selected for checkout")
        wanted = set(selection)
        matched = [line for line in lines if line.id in wanted]
        if len(matched) != len(wanted):
            # Lines of other carts look exactly like lines that never existed
            found = {line.id for line in matched}
            missing = sorted(wanted - found)
            self.logger.warning("Checkout rejected: unknown cart items", missing=missing)
            raise InvalidOperationError(
                "Some cart items were not found",
                details={"cartItemIds": [str(i) for i in missing]},
            )
        return matched

    def _place_order(
        self,
        user_id: int,
        cart_id: int,
        selected_ids: List[int],
        buyer_note: Optional[str],
    ) -> int:
        self.carts.lock(id=cart_id)
        lines = list(self.cart_items.list_selected(cart_id, selected_ids))
        if len(lines) != len(selected_ids):
            raise StaleSelectionError()

        # Snapshot prices from the cart lines, not the live catalog price
        total = sum((line.unit_price * line.quantity for line in lines), Decimal("0.00"))
        order = self.orders.create(
            buyer_id=user_id,
            status=OrderStatus.PENDING,
            total_amount=total,
            buyer_note=buyer_note,
        )
        self.order_items.create_many(
            {
                "order_id": order.id,
                "product_id": line.product_id,
                "seller_id": line.seller_id,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "subtotal": line.unit_price * line.quantity,
            }
            for line in lines
        )
        if self.cart_items.delete_selected(cart_id, selected_ids) != len(selected_ids):
            raise StaleSelectionError()
        self.carts.touch(cart_id)
        return order.id


class OrderService:
    """Read access and participant actions on orders, gated by viewer context."""

    def __init__(
        self,
        orders: OrderRepositoryProtocol,
        activities: OrderActivityRepositoryProtocol,
        order_mapper: OrderMapperProtocol,
        unit_of_work: UnitOfWorkProtocol,
    ):
        self.orders = orders
        self.activities = activities
        self.order_mapper = order_mapper
        self.unit_of_work = unit_of_work
        self.logger = logger.bind(service="OrderService")

    def get_order(self, user_id: int, order_id: int) -> OrderDTO:
        order, _context = self._participant_order(user_id, order_id)
        return present_order(self.order_mapper, order, user_id)

    def list_buyer_orders(self, user_id: int) -> List[OrderDTO]:
        self.logger.debug("Listing buyer orders", user_id=user_id)
        return [
            present_order(self.order_mapper, order, user_id)
            for order in self.orders.list_for_buyer(user_id)
        ]

    def list_sales(self, user_id: int) -> List[OrderDTO]:
        self.logger.debug("Listing sales", user_id=user_id)
        return [
            present_order(self.order_mapper, order, user_id)
            for order in self.orders.list_for_seller(user_id)
        ]

    def add_message(self, user_id: int, order_id: int, message: str) -> OrderDTO:
        message = (message or "").strip()
        if not message:
            raise InvalidOperationError("Message must not be empty")
        _order, context = self._participant_order(user_id, order_id)

        def append():
            locked = self.orders.lock(id=order_id)
            if ACTION_MESSAGE not in allowed_actions(context, locked.status):
                raise InvalidOperationError(
                    "Messages are closed for this order",
                    details={"status": locked.status},
                )
            self.activities.create(
                order_id=order_id,
                author_id=user_id,
                kind=ActivityKind.MESSAGE,
                message=message,
            )

        self.unit_of_work.run_in_transaction(append)
        self.logger.info("Order message added", user_id=user_id, order_id=order_id, viewer=context)
        return self.get_order(user_id, order_id)

    def apply_action(self, user_id: int, order_id: int, action: str) -> OrderDTO:
        if action not in TRANSITIONS:
            raise InvalidOperationError(
                "Unknown order action", details={"action": action}
            )
        _order, context = self._participant_order(user_id, order_id)

        def transition():
            locked = self.orders.lock(id=order_id)
            if action not in allowed_actions(context, locked.status):
                raise InvalidOperationError(
                    f"Action '{action}' is not allowed for this order",
                    details={"status": locked.status, "viewerContext": context},
                )
            new_status = TRANSITIONS[action]
            self.orders.set_status(order_id, new_status)
            self.activities.create(
                order_id=order_id,
                author_id=user_id,
                kind=ActivityKind.STATUS_CHANGE,
                message=action,
                status=new_status,
            )
            return locked.status, new_status

        previous, current = self.unit_of_work.run_in_transaction(transition)
        self.logger.info(
            "Order status changed",
            user_id=user_id,
            order_id=order_id,
            action=action,
            previous=previous,
            current=current,
        )
        return self.get_order(user_id, order_id)

    def _participant_order(self, user_id: int, order_id: int):
        order = self.orders.get(id=order_id)
        if not order:
            self.logger.info("Order not found", order_id=order_id)
            raise NotFoundError("Order not found", details={"id": str(order_id)})
        context = _viewer_context(order, user_id)
        if context is None:
            self.logger.warning("Order access denied", user_id=user_id, order_id=order_id)
            raise PermissionDeniedError("You do not have access to this order")
        return order, context
