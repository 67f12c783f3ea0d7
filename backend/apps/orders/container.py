from __future__ import annotations

from apps.carts.repositories import CartItemRepository, CartRepository
from apps.common.unit_of_work import DjangoUnitOfWork

from .mappers import OrderMapper
from .repositories import (
    OrderActivityRepository,
    OrderItemRepository,
    OrderRepository,
)
from .services import CheckoutService, OrderService


def build_checkout_service() -> CheckoutService:
    return CheckoutService(
        carts=CartRepository(),
        cart_items=CartItemRepository(),
        orders=OrderRepository(),
        order_items=OrderItemRepository(),
        order_mapper=OrderMapper(),
        unit_of_work=DjangoUnitOfWork(),
    )


def build_order_service() -> OrderService:
    return OrderService(
        orders=OrderRepository(),
        activities=OrderActivityRepository(),
        order_mapper=OrderMapper(),
        unit_of_work=DjangoUnitOfWork(),
    )
