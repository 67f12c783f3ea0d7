import unittest
from datetime import datetime, timezone
from decimal import Decimal

from apps.carts.mappers import CartItemMapper, CartMapper

STAMP = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class StubProduct:
    def __init__(self, product_id, name, price, creator_id, images=None):
        self.id = product_id
        self.name = name
        self.price = price
        self.creator_id = creator_id
        self.images = images


class StubCartItem:
    def __init__(self, item_id, product, quantity, unit_price):
        self.id = item_id
        self.product = product
        self.product_id = product.id if product else None
        self.seller_id = product.creator_id if product else 0
        self.quantity = quantity
        self.unit_price = unit_price
        self.created_at = STAMP
        self.updated_at = STAMP


class StubCart:
    def __init__(self, cart_id, user_id):
        self.id = cart_id
        self.user_id = user_id
        self.created_at = STAMP
        self.updated_at = STAMP


class CartMapperTests(unittest.TestCase):
    def test_item_mapper_computes_line_total_from_snapshot(self):
        product = StubProduct(4, "Lamp", Decimal("11.00"), 9, images=["a.png"])
        dto = CartItemMapper().to_dto(StubCartItem(1, product, 3, Decimal("10.00")))
        self.assertEqual(dto.line_total, Decimal("30.00"))
        self.assertEqual(dto.unit_price, Decimal("10.00"))
        self.assertEqual(dto.product.price, Decimal("11.00"))
        self.assertEqual(dto.product.images, ["a.png"])
        self.assertEqual(dto.seller_id, 9)

    def test_item_mapper_tolerates_missing_product(self):
        dto = CartItemMapper().to_dto(StubCartItem(1, None, 1, Decimal("2.00")))
        self.assertIsNone(dto.product)

    def test_cart_mapper_derives_totals(self):
        lamp = StubProduct(4, "Lamp", Decimal("10.00"), 9)
        mug = StubProduct(5, "Mug", Decimal("5.00"), 8)
        items = [
            StubCartItem(1, lamp, 2, Decimal("10.00")),
            StubCartItem(2, mug, 1, Decimal("5.00")),
        ]
        dto = CartMapper().to_dto(StubCart(1, 3), items)
        self.assertEqual(dto.total_items, 3)
        self.assertEqual(dto.total_amount, Decimal("25.00"))
        self.assertEqual([i.id for i in dto.items], [1, 2])

    def test_empty_cart_totals_are_zero(self):
        dto = CartMapper().to_dto(StubCart(1, 3), [])
        self.assertEqual(dto.total_items, 0)
        self.assertEqual(dto.total_amount, Decimal("0.00"))
        self.assertIsInstance(dto.total_amount, Decimal)


if __name__ == "__main__":
    unittest.main()
