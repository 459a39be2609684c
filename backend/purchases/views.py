from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from .models import Purchase, PurchaseItem
from .serializers import (
    PurchaseCreateSerializer,
    PurchaseItemInputSerializer,
    PurchaseItemSerializer,
    PurchaseItemUpdateSerializer,
    PurchaseSerializer,
)
from .services import PurchaseService


class PurchaseViewSet(BaseViewSet):
    """
    Supplier purchases. Items are created with the purchase and then edited
    under ``purchases/{purchase_pk}/items/``.
    """
    queryset = Purchase.objects.all()
    serializer_class = PurchaseSerializer
    filterset_fields = ["business", "supplier", "purchased_by", "one_time_purchase", "purchase_date"]
    search_fields = ["title", "receipt_id", "supplier__trade_name"]
    ordering_fields = ["purchase_date", "total_amount", "created_at"]
    ordering = ["-purchase_date", "-id"]

    def create(self, request, *args, **kwargs):
        serializer = PurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        items = data.pop("items")
        purchase = PurchaseService.create_purchase(data, items)
        return Response(self.get_serializer(purchase).data, status=status.HTTP_201_CREATED)

    def perform_update(self, serializer):
        serializer.instance = PurchaseService.update_purchase(serializer.instance, serializer.validated_data)

    def perform_destroy(self, instance):
        PurchaseService.delete_purchase(instance)


class PurchaseItemViewSet(BaseViewSet):
    queryset = PurchaseItem.objects.all()
    serializer_class = PurchaseItemSerializer
    ordering = ["id"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return super().get_queryset().filter(purchase__pk=self.kwargs["purchase_pk"])

    def create(self, request, *args, **kwargs):
        purchase = get_object_or_404(Purchase, pk=self.kwargs["purchase_pk"])
        serializer = PurchaseItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        purchase_item = PurchaseService.add_item(purchase, serializer.validated_data)
        return Response(self.get_serializer(purchase_item).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = PurchaseItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        purchase_item = PurchaseService.update_item(self.get_object(), **serializer.validated_data)
        return Response(self.get_serializer(purchase_item).data, status=status.HTTP_200_OK)

    def perform_destroy(self, instance):
        PurchaseService.delete_item(instance)
