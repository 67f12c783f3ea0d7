from rest_framework import serializers

from apps.catalog.serializers import ProductSnapshotSerializer


class CartItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    productId = serializers.IntegerField(source="product_id")
    sellerId = serializers.IntegerField(source="seller_id")
    quantity = serializers.IntegerField()
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=12, decimal_places=2)
    lineTotal = serializers.DecimalField(source="line_total", max_digits=14, decimal_places=2)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    product = ProductSnapshotSerializer(allow_null=True)


class CartReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    userId = serializers.IntegerField(source="user_id")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    totalItems = serializers.IntegerField(source="total_items")
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=14, decimal_places=2)
    items = CartItemReadSerializer(many=True)


class CartItemAddSerializer(serializers.Serializer):
    productId = serializers.IntegerField()
    # Range is a domain rule enforced by the service
    quantity = serializers.IntegerField(required=False)


class CartItemUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()
