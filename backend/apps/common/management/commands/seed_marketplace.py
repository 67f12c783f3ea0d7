from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.carts.models import Cart, CartItem
from apps.catalog.models import Product, ProductStatus
from apps.orders.models import Order
from apps.users.models import User

USERS = [
    {"username": "ada", "email": "ada@example.com", "name": "Ada Seller", "password": "Seller123!"},
    {"username": "grace", "email": "grace@example.com", "name": "Grace Seller", "password": "Seller123!"},
    {"username": "linus", "email": "linus@example.com", "name": "Linus Buyer", "password": "Buyer123!"},
]

# (creator username, name, price, status, images)
PRODUCTS = [
    ("ada", "Brass desk lamp", "42.50", ProductStatus.ACTIVE, ["lamp-front.jpg", "lamp-side.jpg"]),
    ("ada", "Walnut bookend pair", "18.00", ProductStatus.ACTIVE, ["bookends.jpg"]),
    ("ada", "Vintage typewriter", "210.00", ProductStatus.SOLD_OUT, []),
    ("grace", "Stoneware mug", "12.75", ProductStatus.ACTIVE, ["mug.jpg"]),
    ("grace", "Linen tea towel", "9.90", ProductStatus.ACTIVE, []),
    ("grace", "Prototype kettle", "65.00", ProductStatus.DRAFT, []),
]


class Command(BaseCommand):
    help = "Seed demo sellers, a buyer and a small catalog for local development."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true", help="Delete existing data before seeding"
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            # Orders protect their users and must go first
            Order.objects.all().delete()
            CartItem.objects.all().delete()
            Cart.objects.all().delete()
            Product.objects.all().delete()
            User.objects.filter(username__in=[u["username"] for u in USERS]).delete()

        self.stdout.write("Seeding users...")
        users = {}
        for payload in USERS:
            attrs = dict(payload)
            raw_password = attrs.pop("password")
            user, _ = User.objects.get_or_create(
                username=attrs["username"],
                defaults={"email": attrs["email"], "name": attrs["name"]},
            )
            user.set_password(raw_password)
            user.save()
            users[user.username] = user

        self.stdout.write("Seeding products...")
        for creator, name, price, status, images in PRODUCTS:
            Product.objects.update_or_create(
                creator=users[creator],
                name=name,
                defaults={"price": Decimal(price), "status": status, "images": images},
            )

        self.stdout.write(self.style.SUCCESS("Marketplace seed completed."))
