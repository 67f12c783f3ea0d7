from rest_framework import serializers

from apps.catalog.serializers import ProductSnapshotSerializer

from .policies import TRANSITIONS, VIEWER_CONTEXTS


class OrderItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    productId = serializers.IntegerField(source="product_id", allow_null=True)
    sellerId = serializers.IntegerField(source="seller_id")
    quantity = serializers.IntegerField()
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=12, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    product = ProductSnapshotSerializer(allow_null=True)


class OrderActivityReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    authorId = serializers.IntegerField(source="author_id")
    kind = serializers.CharField()
    message = serializers.CharField()
    status = serializers.CharField(allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")


class OrderReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    buyerId = serializers.IntegerField(source="buyer_id")
    status = serializers.CharField()
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=14, decimal_places=2)
    buyerNote = serializers.CharField(source="buyer_note", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    items = OrderItemReadSerializer(many=True)
    activities = OrderActivityReadSerializer(many=True)
    viewerContext = serializers.ChoiceField(source="viewer_context", choices=VIEWER_CONTEXTS)
    allowedActions = serializers.ListField(source="allowed_actions", child=serializers.CharField())


class CheckoutSerializer(serializers.Serializer):
    cartItemIds = serializers.ListField(child=serializers.IntegerField(), required=False)
    buyerNote = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)


class OrderMessageSerializer(serializers.Serializer):
    message = serializers.CharField(allow_blank=True, trim_whitespace=False, max_length=2000)


class OrderActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=sorted(TRANSITIONS))
