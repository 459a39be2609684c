from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from orders.serializers import (
    AddDiscountSerializer,
    ChangeBillingStatusSerializer,
    ChangeOrderStatusSerializer,
    OrderSerializer,
)
from orders.services import OrderDiscountService, OrderService, OrderStatusService

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request: Request, pk=None) -> Response:
        """
        Cancels an order the kitchen has not started and returns its
        ingredients to the inventory. The order is deleted.
        """
        OrderService.cancel_order(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"], url_path="discount")
    def discount(self, request: Request) -> Response:
        serializer = AddDiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        orders = OrderDiscountService.add_discount(
            data["orders"], data["discount_percentage"], data["comments"]
        )
        return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="billing-status")
    def billing_status(self, request: Request) -> Response:
        """Void or invite orders. Paid and Cancel are never accepted here."""
        serializer = ChangeBillingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        orders = OrderStatusService.change_billing_status(
            data["orders"], data["billing_status"], data["comments"]
        )
        return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="order-status")
    def order_status(self, request: Request) -> Response:
        serializer = ChangeOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        orders = OrderStatusService.change_order_status(data["orders"], data["order_status"])
        return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)
