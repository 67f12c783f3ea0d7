import unittest
from decimal import Decimal

from apps.api.exceptions import InvalidOperationError
from apps.carts.mappers import CartMapper
from apps.carts.services import CartService
from apps.carts.tests.fakes import (
    FakeCartItemRepository,
    FakeCartRepository,
    FakeProductRepository,
    FakeUnitOfWork,
    InMemoryStore,
)
from apps.orders.mappers import OrderMapper
from apps.orders.services import CheckoutService

from .fakes import FakeOrderItemRepository, FakeOrderRepository

BUYER = 3
SELLER = 7


class ShortDeleteCartItemRepository(FakeCartItemRepository):
    """Reports one row fewer than it deletes, as if a line vanished mid-commit."""

    def delete_selected(self, cart_id, item_ids):
        return super().delete_selected(cart_id, item_ids) - 1


class CheckoutTestCase(unittest.TestCase):
    cart_items_class = FakeCartItemRepository

    def setUp(self):
        self.store = InMemoryStore()
        self.carts = FakeCartRepository(self.store)
        self.items = self.cart_items_class(self.store)
        self.orders = FakeOrderRepository(self.store)
        self.uow = FakeUnitOfWork(self.store)
        self.cart_service = CartService(
            carts=self.carts,
            cart_items=self.items,
            products=FakeProductRepository(self.store),
            cart_mapper=CartMapper(),
            unit_of_work=self.uow,
        )
        self.service = CheckoutService(
            carts=self.carts,
            cart_items=self.items,
            orders=self.orders,
            order_items=FakeOrderItemRepository(self.store),
            order_mapper=OrderMapper(),
            unit_of_work=self.uow,
        )
        self.lamp = self.store.add_product(creator_id=SELLER, name="Lamp", price="10.00")
        self.mug = self.store.add_product(creator_id=SELLER, name="Mug", price="5.00")

    def fill_cart(self):
        self.cart_service.add_item(BUYER, self.lamp.id, 2)
        view = self.cart_service.add_item(BUYER, self.mug.id, 1)
        return {line.product_id: line.id for line in view.items}

    def cart_line_ids(self):
        return sorted(r.id for r in self.store.rows("cart_items"))


class CheckoutTests(CheckoutTestCase):
    def test_whole_cart_checkout_totals_and_empties_cart(self):
        self.fill_cart()
        order = self.service.checkout(BUYER, buyer_note="Leave at door")
        self.assertEqual(order.total_amount, Decimal("25.00"))
        self.assertEqual(sorted(i.subtotal for i in order.items), [Decimal("5.00"), Decimal("20.00")])
        self.assertEqual(order.status, "pending")
        self.assertEqual(order.buyer_id, BUYER)
        self.assertEqual(order.buyer_note, "Leave at door")
        self.assertEqual(self.cart_line_ids(), [])

    def test_returned_view_is_for_the_buyer(self):
        self.fill_cart()
        order = self.service.checkout(BUYER)
        self.assertEqual(order.viewer_context, "buyer")
        self.assertEqual(order.allowed_actions, ["cancel", "message"])
        self.assertEqual(order.activities, [])

    def test_total_equals_sum_of_subtotals(self):
        self.fill_cart()
        order = self.service.checkout(BUYER)
        self.assertEqual(order.total_amount, sum(i.subtotal for i in order.items))

    def test_order_uses_cart_snapshot_price(self):
        self.fill_cart()
        self.lamp.price = Decimal("99.00")
        order = self.service.checkout(BUYER)
        lamp_item = next(i for i in order.items if i.product_id == self.lamp.id)
        self.assertEqual(lamp_item.unit_price, Decimal("10.00"))
        self.assertEqual(order.total_amount, Decimal("25.00"))

    def test_items_carry_seller_snapshot(self):
        self.fill_cart()
        order = self.service.checkout(BUYER)
        self.assertEqual({i.seller_id for i in order.items}, {SELLER})

    def test_partial_selection_leaves_other_lines(self):
        lines = self.fill_cart()
        order = self.service.checkout(BUYER, cart_item_ids=[lines[self.mug.id]])
        self.assertEqual([i.product_id for i in order.items], [self.mug.id])
        self.assertEqual(order.total_amount, Decimal("5.00"))
        self.assertEqual(self.cart_line_ids(), [lines[self.lamp.id]])

    def test_duplicate_ids_are_collapsed(self):
        lines = self.fill_cart()
        mug_line = lines[self.mug.id]
        order = self.service.checkout(BUYER, cart_item_ids=[mug_line, mug_line])
        self.assertEqual(len(order.items), 1)

    def test_unknown_id_fails_and_changes_nothing(self):
        self.fill_cart()
        before = self.cart_line_ids()
        with self.assertRaises(InvalidOperationError) as ctx:
            self.service.checkout(BUYER, cart_item_ids=[before[0], 987654])
        self.assertEqual(ctx.exception.message, "Some cart items were not found")
        self.assertEqual(self.cart_line_ids(), before)
        self.assertEqual(self.store.rows("orders"), [])

    def test_other_users_line_does_not_match(self):
        self.fill_cart()
        other = self.cart_service.add_item(11, self.lamp.id, 1).items[0].id
        with self.assertRaises(InvalidOperationError):
            self.service.checkout(BUYER, cart_item_ids=[other])
        self.assertIn(other, self.cart_line_ids())

    def test_explicit_empty_selection_is_rejected(self):
        self.fill_cart()
        with self.assertRaises(InvalidOperationError):
            self.service.checkout(BUYER, cart_item_ids=[])
        self.assertEqual(len(self.cart_line_ids()), 2)

    def test_malformed_ids_are_invalid_operation(self):
        self.fill_cart()
        for raw in ("1,2", [1, "x"], [True]):
            with self.assertRaises(InvalidOperationError):
                self.service.checkout(BUYER, cart_item_ids=raw)
        self.assertEqual(len(self.cart_line_ids()), 2)
        self.assertEqual(self.uow.calls, 2)

    def test_empty_cart_is_rejected(self):
        self.cart_service.get_cart(BUYER)
        with self.assertRaises(InvalidOperationError) as ctx:
            self.service.checkout(BUYER)
        self.assertEqual(ctx.exception.message, "Cart is empty")

    def test_user_without_cart_is_rejected(self):
        with self.assertRaises(InvalidOperationError):
            self.service.checkout(BUYER)
        self.assertEqual(self.store.rows("carts"), [])

    def test_second_checkout_of_same_lines_fails(self):
        self.cart_service.add_item(BUYER, self.lamp.id, 1)
        self.service.checkout(BUYER)
        with self.assertRaises(InvalidOperationError):
            self.service.checkout(BUYER)
        self.assertEqual(len(self.store.rows("orders")), 1)

    def test_line_removed_before_lock_is_stale(self):
        lines = self.fill_cart()
        # A concurrent checkout commits between loading the cart and taking the lock
        self.carts.on_lock = lambda: self.items.delete_item(lines[self.lamp.id])
        with self.assertRaises(InvalidOperationError) as ctx:
            self.service.checkout(BUYER)
        self.assertEqual(ctx.exception.message, "Selected cart items are stale")
        self.assertEqual(self.store.rows("orders"), [])
        self.assertEqual(self.store.rows("order_items"), [])
        self.assertEqual(self.uow.rollbacks, 1)

    def test_checkout_locks_cart(self):
        self.fill_cart()
        locks_before = self.carts.locks
        self.service.checkout(BUYER)
        self.assertEqual(self.carts.locks, locks_before + 1)


class CheckoutDeleteMismatchTests(CheckoutTestCase):
    cart_items_class = ShortDeleteCartItemRepository

    def test_delete_count_mismatch_rolls_back_everything(self):
        self.fill_cart()
        before = self.cart_line_ids()
        with self.assertRaises(InvalidOperationError) as ctx:
            self.service.checkout(BUYER)
        self.assertEqual(ctx.exception.message, "Selected cart items are stale")
        self.assertEqual(self.store.rows("orders"), [])
        self.assertEqual(self.store.rows("order_items"), [])
        self.assertEqual(self.cart_line_ids(), before)


if __name__ == "__main__":
    unittest.main()
