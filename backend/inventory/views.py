from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet, ReadOnlyBaseViewSet
from core_backend.exceptions import ValidationError
from .models import Inventory, InventoryCount, InventoryGood
from .serializers import (
    AddCountSerializer,
    AddInventoryGoodSerializer,
    InventoryCountSerializer,
    InventoryGoodSerializer,
    InventorySerializer,
    ReeditCountSerializer,
)
from .services import InventoryService


class InventoryViewSet(BaseViewSet):
    """
    Monthly inventories. Creating one opens the current month and freezes
    the previous month.
    """
    queryset = Inventory.objects.all()
    serializer_class = InventorySerializer
    filterset_fields = ["business", "set_final_count", "period"]
    ordering = ["-period"]
    http_method_names = ["get", "post", "delete", "head", "options"]

    def perform_create(self, serializer):
        serializer.instance = InventoryService.create_inventory(serializer.validated_data["business"])

    @action(detail=True, methods=["post"])
    def close(self, request, pk=None):
        inventory = InventoryService.close_inventory(self.get_object())
        return Response(self.get_serializer(inventory).data, status=status.HTTP_200_OK)


class InventoryGoodViewSet(BaseViewSet):
    """
    Supplier goods of one inventory, nested under ``inventories/{inventory_pk}/goods/``.
    """
    queryset = InventoryGood.objects.all()
    serializer_class = InventoryGoodSerializer
    filterset_fields = ["supplier_good"]
    ordering = ["supplier_good__name"]
    http_method_names = ["get", "post", "delete", "head", "options"]

    def get_queryset(self):
        return super().get_queryset().filter(inventory__pk=self.kwargs["inventory_pk"])

    def get_inventory(self):
        return get_object_or_404(Inventory, pk=self.kwargs["inventory_pk"])

    def create(self, request, *args, **kwargs):
        """Add a supplier good to the (open) inventory."""
        inventory = self.get_inventory()
        serializer = AddInventoryGoodSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        supplier_good = serializer.validated_data["supplier_good"]
        if supplier_good.business_id != inventory.business_id:
            raise ValidationError("Supplier good does not belong to this business!")
        if inventory.set_final_count:
            raise ValidationError("Inventory already set as final count! Cannot update!")

        inventory_good = InventoryService.add_supplier_good_to_current_inventory(supplier_good)
        return Response(self.get_serializer(inventory_good).data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        InventoryService.remove_supplier_good_from_current_inventory(instance.supplier_good)

    @action(detail=True, methods=["post"])
    def counts(self, request, inventory_pk=None, pk=None):
        """Record a physical count of this supplier good."""
        serializer = AddCountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        count = InventoryService.add_count(self.get_object(), **serializer.validated_data)
        return Response(InventoryCountSerializer(count).data, status=status.HTTP_201_CREATED)


class InventoryCountViewSet(ReadOnlyBaseViewSet):
    """
    Counts of one inventory good. ``PATCH`` re-edits a count and keeps its
    original values.
    """
    queryset = InventoryCount.objects.all()
    serializer_class = InventoryCountSerializer
    ordering = ["-counted_date", "-id"]

    def get_queryset(self):
        return super().get_queryset().filter(
            inventory_good__pk=self.kwargs["good_pk"],
            inventory_good__inventory__pk=self.kwargs["inventory_pk"],
        )

    def partial_update(self, request, *args, **kwargs):
        count = self.get_object()
        serializer = ReeditCountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        count = InventoryService.reedit_count(
            count,
            data["current_count_quantity"],
            reason=data["reason"],
            reedited_by=data.get("counted_by"),
            comments=data.get("comments"),
        )
        return Response(self.get_serializer(count).data, status=status.HTTP_200_OK)
