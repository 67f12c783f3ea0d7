from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response
from apps.common import get_logger
from .commands import CheckoutCommand, OrderActionCommand, OrderMessageCommand
from .container import build_checkout_service, build_order_service
from .serializers import (
    CheckoutSerializer,
    OrderActionSerializer,
    OrderMessageSerializer,
    OrderReadSerializer,
)

logger = get_logger(__name__).bind(component="orders", layer="view")

_ERROR = OpenApiResponse(response=ErrorResponseSerializer)
_ORDER_ID = OpenApiParameter("order_id", int, OpenApiParameter.PATH)


class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_checkout_service()
    log = logger.bind(view="CheckoutView")

    @extend_schema(
        summary="Checkout cart",
        description=(
            "Converts the selected cart lines (all lines when cartItemIds is omitted) into a "
            "pending order. The order and the removal of the selected lines commit together; "
            "unselected lines stay in the cart."
        ),
        request=CheckoutSerializer,
        responses={201: OrderReadSerializer, 400: _ERROR, 401: _ERROR},
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            command = CheckoutCommand.from_raw(serializer.validated_data)
        except ValueError as exc:
            return error_response("VALIDATION_ERROR", str(exc), {"cartItemIds": None})
        dto = self.service.checkout(
            request.user.id,
            cart_item_ids=command.cart_item_ids,
            buyer_note=command.buyer_note,
        )
        self.log.info("Checkout completed via API", user_id=request.user.id, order_id=dto.id)
        return Response(OrderReadSerializer(dto).data, status=status.HTTP_201_CREATED)


class OrderListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="List my orders",
        description="Orders placed by the caller, newest first.",
        responses={200: OrderReadSerializer(many=True), 401: _ERROR},
    )
    def get(self, request):
        dtos = self.service.list_buyer_orders(request.user.id)
        return Response(OrderReadSerializer(dtos, many=True).data)


class SalesListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="List my sales",
        description="Orders containing at least one item sold by the caller, newest first.",
        responses={200: OrderReadSerializer(many=True), 401: _ERROR},
    )
    def get(self, request):
        dtos = self.service.list_sales(request.user.id)
        return Response(OrderReadSerializer(dtos, many=True).data)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="OrderDetailView")

    @extend_schema(
        summary="Get order",
        description="Visible to the buyer and to sellers of any of its items.",
        parameters=[_ORDER_ID],
        responses={200: OrderReadSerializer, 401: _ERROR, 403: _ERROR, 404: _ERROR},
    )
    def get(self, request, order_id: int):
        self.log.debug("Fetching order", user_id=request.user.id, order_id=order_id)
        dto = self.service.get_order(request.user.id, int(order_id))
        return Response(OrderReadSerializer(dto).data)


class OrderMessageView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="Post order message",
        parameters=[_ORDER_ID],
        request=OrderMessageSerializer,
        responses={201: OrderReadSerializer, 400: _ERROR, 401: _ERROR, 403: _ERROR, 404: _ERROR},
    )
    def post(self, request, order_id: int):
        serializer = OrderMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = OrderMessageCommand.from_raw(serializer.validated_data)
        dto = self.service.add_message(request.user.id, int(order_id), command.message)
        return Response(OrderReadSerializer(dto).data, status=status.HTTP_201_CREATED)


class OrderActionView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="Apply order action",
        description="Moves the order to a new status when the caller's role allows the action.",
        parameters=[_ORDER_ID],
        request=OrderActionSerializer,
        responses={200: OrderReadSerializer, 400: _ERROR, 401: _ERROR, 403: _ERROR, 404: _ERROR},
    )
    def post(self, request, order_id: int):
        serializer = OrderActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = OrderActionCommand.from_raw(serializer.validated_data)
        dto = self.service.apply_action(request.user.id, int(order_id), command.action)
        return Response(OrderReadSerializer(dto).data)
