from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.common import get_logger
from .commands import AddCartItemCommand, UpdateCartItemCommand
from .container import build_cart_service
from .serializers import (
    CartItemAddSerializer,
    CartItemUpdateSerializer,
    CartReadSerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")

_ERRORS = {
    400: OpenApiResponse(response=ErrorResponseSerializer),
    401: OpenApiResponse(response=ErrorResponseSerializer),
    404: OpenApiResponse(response=ErrorResponseSerializer),
}


class CartView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartView")

    @extend_schema(
        summary="Get my cart",
        description="Returns the caller's cart, creating an empty one on first access.",
        responses={200: CartReadSerializer, 401: _ERRORS[401]},
    )
    def get(self, request):
        self.log.debug("Fetching cart via API", user_id=request.user.id)
        dto = self.service.get_cart(request.user.id)
        return Response(CartReadSerializer(dto).data)


class CartItemListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemListView")

    @extend_schema(
        summary="Add product to cart",
        description=(
            "Adds a product to the caller's cart. Adding a product already in the cart "
            "increments its quantity and refreshes the price snapshot. Sellers cannot add "
            "their own products and only active products can be added."
        ),
        request=CartItemAddSerializer,
        responses={200: CartReadSerializer, **_ERRORS},
    )
    def post(self, request):
        serializer = CartItemAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = AddCartItemCommand.from_raw(serializer.validated_data)
        self.log.debug(
            "Add to cart requested",
            user_id=request.user.id,
            product_id=command.product_id,
            quantity=command.quantity,
        )
        dto = self.service.add_item(request.user.id, command.product_id, command.quantity)
        return Response(CartReadSerializer(dto).data)


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemDetailView")

    @extend_schema(
        summary="Set cart item quantity",
        description="Sets the quantity of a line in the caller's cart; zero or less removes it.",
        parameters=[OpenApiParameter("item_id", int, OpenApiParameter.PATH)],
        request=CartItemUpdateSerializer,
        responses={200: CartReadSerializer, **_ERRORS},
    )
    def patch(self, request, item_id: int):
        serializer = CartItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = UpdateCartItemCommand.from_raw(item_id, serializer.validated_data)
        dto = self.service.update_cart_item(request.user.id, command.item_id, command.quantity)
        return Response(CartReadSerializer(dto).data)

    @extend_schema(
        summary="Remove cart item",
        parameters=[OpenApiParameter("item_id", int, OpenApiParameter.PATH)],
        responses={200: CartReadSerializer, 401: _ERRORS[401], 404: _ERRORS[404]},
    )
    def delete(self, request, item_id: int):
        dto = self.service.remove_cart_item(request.user.id, int(item_id))
        return Response(CartReadSerializer(dto).data)
