from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from core_backend.base import BaseViewSet
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import CloseOrdersSerializer, OrderCreateSerializer, OrderSerializer
from orders.services import OrderService

from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(StatusActionsMixin, BaseViewSet):
    """
    ViewSet for orders.

    Orders are never edited directly: they are created in batches on a sales
    instance, closed with payments, cancelled, discounted or moved between
    statuses through the actions of this viewset and StatusActionsMixin.
    """
    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering = ["-created_at", "-id"]
    http_method_names = ["get", "post", "head", "options"]

    def get_serializer_class(self):
        if self.action == "create":
            return OrderCreateSerializer
        if self.action == "close":
            return CloseOrdersSerializer
        return OrderSerializer

    def create(self, request, *args, **kwargs):
        """
        Creates a batch of orders as one sales group and removes their
        ingredients from the open inventory.
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        orders = OrderService.create_orders(
            data.get("created_by"),
            data["sales_instance"],
            [dict(order) for order in data["orders"]],
            customer=data.get("customer"),
        )
        return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="close")
    def close(self, request: Request) -> Response:
        """
        Pays a set of open orders. The payment surplus is booked as tips on the
        first order; sales instances left without open orders close.
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        orders = OrderService.close_orders(
            serializer.validated_data["orders"],
            serializer.validated_data["payment_methods"],
        )
        return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)
