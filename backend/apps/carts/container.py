from __future__ import annotations

from apps.catalog.mappers import ProductSnapshotMapper
from apps.catalog.repositories import ProductRepository
from apps.common.unit_of_work import DjangoUnitOfWork

from .mappers import CartItemMapper, CartMapper
from .repositories import CartItemRepository, CartRepository
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(
        carts=CartRepository(),
        cart_items=CartItemRepository(),
        products=ProductRepository(),
        cart_mapper=CartMapper(CartItemMapper(ProductSnapshotMapper())),
        unit_of_work=DjangoUnitOfWork(),
    )
