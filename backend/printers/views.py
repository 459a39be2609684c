from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from orders.models import Order
from .models import PrintConfiguration, Printer
from .serializers import (
    PrintConfigurationInputSerializer,
    PrintConfigurationSerializer,
    PrinterSerializer,
    RouteOrderSerializer,
)
from .services import PrintConfigurationService, PrintRoutingService


class PrinterViewSet(BaseViewSet):
    queryset = Printer.objects.all()
    serializer_class = PrinterSerializer
    filterset_fields = ["business", "connected"]
    search_fields = ["printer_alias", "ip_address"]
    ordering = ["printer_alias"]

    @action(detail=False, methods=["post"], url_path="route-order")
    def route_order(self, request):
        """Printers an order's goods are sent to."""
        serializer = RouteOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = get_object_or_404(
            Order.objects.select_related("sales_instance"), pk=serializer.validated_data["order"]
        )
        return Response(PrintRoutingService.route_order(order))


class PrintConfigurationViewSet(BaseViewSet):
    """Print configurations under ``printers/{printer_pk}/configurations/``."""
    queryset = PrintConfiguration.objects.all()
    serializer_class = PrintConfigurationSerializer
    ordering = ["main_category", "id"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_printer(self):
        return get_object_or_404(Printer, pk=self.kwargs["printer_pk"])

    def get_queryset(self):
        return super().get_queryset().filter(printer__pk=self.kwargs["printer_pk"])

    def create(self, request, *args, **kwargs):
        serializer = PrintConfigurationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        configuration = PrintConfigurationService.add_configuration(self.get_printer(), serializer.validated_data)
        return Response(self.get_serializer(configuration).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = PrintConfigurationInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        configuration = PrintConfigurationService.update_configuration(self.get_object(), serializer.validated_data)
        return Response(self.get_serializer(configuration).data, status=status.HTTP_200_OK)
