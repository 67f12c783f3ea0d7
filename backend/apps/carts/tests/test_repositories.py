from decimal import Decimal
from unittest import mock

from django.test import TestCase

from apps.carts.container import build_cart_service
from apps.carts.models import Cart, CartItem
from apps.carts.repositories import (
    CartAlreadyExistsError,
    CartItemRepository,
    CartRepository,
)
from apps.catalog.models import Product
from apps.users.models import User


class CartRepositoryTests(TestCase):
    def setUp(self):
        self.buyer = User.objects.create_user(username="buyer", email="buyer@example.com", password="pw")
        self.seller = User.objects.create_user(username="seller", email="seller@example.com", password="pw")
        self.lamp = Product.objects.create(creator=self.seller, name="Lamp", price=Decimal("10.00"))
        self.mug = Product.objects.create(creator=self.seller, name="Mug", price=Decimal("5.00"))
        self.carts = CartRepository()
        self.items = CartItemRepository()

    def _line(self, cart, product, quantity=1):
        return CartItem.objects.create(
            cart=cart, product=product, seller=self.seller, quantity=quantity, unit_price=product.price
        )

    def test_second_cart_for_user_is_rejected_and_transaction_survives(self):
        self.carts.create_for_user(self.buyer.id)
        with self.assertRaises(CartAlreadyExistsError):
            self.carts.create_for_user(self.buyer.id)
        # Savepoint rollback leaves the outer transaction usable
        self.assertEqual(Cart.objects.filter(user=self.buyer).count(), 1)

    def test_ensure_cart_recovers_from_concurrent_insert(self):
        winner = Cart.objects.create(user=self.buyer)
        service = build_cart_service()
        with mock.patch.object(CartRepository, "get", side_effect=[None, winner]):
            cart = service.ensure_cart(self.buyer.id)
        self.assertEqual(cart.id, winner.id)
        self.assertEqual(Cart.objects.filter(user=self.buyer).count(), 1)

    def test_increment_adds_quantity_and_refreshes_snapshot(self):
        cart = self.carts.create_for_user(self.buyer.id)
        line = self._line(cart, self.lamp, 2)
        changed = self.items.increment(line.id, 3, unit_price=Decimal("12.00"), seller_id=self.seller.id)
        line.refresh_from_db()
        self.assertEqual(changed, 1)
        self.assertEqual(line.quantity, 5)
        self.assertEqual(line.unit_price, Decimal("12.00"))

    def test_get_owned_is_scoped_to_cart_owner(self):
        cart = self.carts.create_for_user(self.buyer.id)
        line = self._line(cart, self.lamp)
        self.assertEqual(self.items.get_owned(line.id, self.buyer.id), line)
        self.assertIsNone(self.items.get_owned(line.id, self.seller.id))

    def test_delete_selected_counts_only_matching_rows(self):
        cart = self.carts.create_for_user(self.buyer.id)
        other_cart = self.carts.create_for_user(self.seller.id)
        keep = self._line(cart, self.lamp)
        drop = self._line(cart, self.mug)
        foreign = self._line(other_cart, self.lamp)
        deleted = self.items.delete_selected(cart.id, [drop.id, foreign.id])
        self.assertEqual(deleted, 1)
        self.assertTrue(CartItem.objects.filter(pk=keep.id).exists())
        self.assertTrue(CartItem.objects.filter(pk=foreign.id).exists())

    def test_list_for_cart_is_oldest_first_with_product(self):
        cart = self.carts.create_for_user(self.buyer.id)
        first = self._line(cart, self.lamp)
        second = self._line(cart, self.mug)
        lines = self.items.list_for_cart(cart.id)
        self.assertEqual([l.id for l in lines], [first.id, second.id])
        self.assertEqual(lines[0].product.name, "Lamp")

    def test_unique_product_per_cart(self):
        from django.db import IntegrityError, transaction

        cart = self.carts.create_for_user(self.buyer.id)
        self._line(cart, self.lamp)
        with self.assertRaises(IntegrityError), transaction.atomic():
            self._line(cart, self.lamp)
