from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from .filters import SalesInstanceFilter
from .models import SalesInstance
from .serializers import (
    CloseSalesInstanceSerializer,
    SalesInstanceCreateSerializer,
    SalesInstanceSerializer,
    SalesInstanceUpdateSerializer,
    TransferOrdersSerializer,
)
from .services import SalesInstanceService


class SalesInstanceViewSet(BaseViewSet):
    """
    Sales instances (tables in use). Opening one starts the business day when
    needed; an occupied instance left without orders is removed.
    """
    queryset = SalesInstance.objects.all()
    serializer_class = SalesInstanceSerializer
    filterset_class = SalesInstanceFilter
    search_fields = ["client_name", "sales_point__sales_point_name"]
    ordering = ["-created_at"]

    def get_serializer_class(self):
        if self.action == "create":
            return SalesInstanceCreateSerializer
        if self.action in ("update", "partial_update"):
            return SalesInstanceUpdateSerializer
        if self.action == "close":
            return CloseSalesInstanceSerializer
        if self.action == "transfer_orders":
            return TransferOrdersSerializer
        return SalesInstanceSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        sales_instance = SalesInstanceService.open_sales_instance(
            data["business"],
            data["sales_point"],
            data["guests"],
            data["opened_by"],
            status=data["status"],
            client_name=data.get("client_name", ""),
        )
        return Response(SalesInstanceSerializer(sales_instance).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = SalesInstanceUpdateSerializer(data=request.data, partial=kwargs.get("partial", False))
        serializer.is_valid(raise_exception=True)
        sales_instance = SalesInstanceService.update_sales_instance(self.get_object(), serializer.validated_data)
        if sales_instance is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(SalesInstanceSerializer(sales_instance).data, status=status.HTTP_200_OK)

    def perform_destroy(self, instance):
        SalesInstanceService.delete_sales_instance(instance)

    @action(detail=True, methods=["post"])
    def close(self, request, pk=None):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sales_instance = SalesInstanceService.close_sales_instance(
            self.get_object(), serializer.validated_data["closed_by"]
        )
        if sales_instance is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(SalesInstanceSerializer(sales_instance).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="transfer-orders")
    def transfer_orders(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        target = SalesInstanceService.transfer_orders(
            data["orders"],
            data["from_sales_instance"],
            to_instance=data.get("to_sales_instance"),
            sales_point=data.get("sales_point"),
            employee=data.get("employee"),
        )
        return Response(SalesInstanceSerializer(target).data, status=status.HTTP_200_OK)
