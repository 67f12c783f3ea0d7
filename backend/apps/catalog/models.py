from django.conf import settings
from django.db import models


class ProductStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    ACTIVE = "active", "Active"
    SOLD_OUT = "sold_out", "Sold out"
    ARCHIVED = "archived", "Archived"


class Product(models.Model):
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="products"
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=12, decimal_places=2)
    images = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20, choices=ProductStatus.choices, default=ProductStatus.ACTIVE
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["creator"], name="product_creator_idx"),
            models.Index(fields=["status"], name="product_status_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def is_available_for_purchase(self) -> bool:
        return self.status == ProductStatus.ACTIVE
