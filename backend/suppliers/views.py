from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from .models import Supplier, SupplierGood
from .serializers import SupplierSerializer, SupplierGoodSerializer
from .services import SupplierService, SupplierGoodService


class SupplierViewSet(BaseViewSet):
    queryset = Supplier.objects.all()
    serializer_class = SupplierSerializer
    filterset_fields = ["business", "currently_in_use"]
    search_fields = ["trade_name", "legal_name"]
    ordering = ["trade_name"]

    def perform_destroy(self, instance):
        SupplierService.delete_supplier(instance)

    @action(detail=False, methods=["post"], url_path="one-time-purchase")
    def one_time_purchase(self, request):
        """Get (or create) the one time purchase supplier of a business."""
        from business.models import Business

        business = Business.objects.get(pk=request.data.get("business"))
        supplier = SupplierService.get_one_time_purchase_supplier(business)
        return Response(self.get_serializer(supplier).data, status=status.HTTP_200_OK)


class SupplierGoodViewSet(BaseViewSet):
    queryset = SupplierGood.objects.all()
    serializer_class = SupplierGoodSerializer
    filterset_fields = ["business", "supplier", "main_category", "currently_in_use", "budget_impact"]
    search_fields = ["name", "keyword"]
    ordering = ["name"]

    def perform_create(self, serializer):
        serializer.instance = SupplierGoodService.create_supplier_good(serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = SupplierGoodService.update_supplier_good(
            serializer.instance, dict(serializer.validated_data)
        )

    def perform_destroy(self, instance):
        SupplierGoodService.delete_supplier_good(instance)
