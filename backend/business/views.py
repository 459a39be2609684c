import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.infrastructure.blob_storage import get_blob_storage
from core_backend.infrastructure.qr_codes import get_qr_renderer
from .models import Business, SalesPoint
from .serializers import BusinessSerializer, SalesPointSerializer
from .services import BusinessService, SalesPointService

logger = logging.getLogger(__name__)


class BusinessViewSet(BaseViewSet):
    """
    CRUD for businesses. Deleting a business removes everything it owns.
    """
    queryset = Business.objects.all()
    serializer_class = BusinessSerializer
    search_fields = ["trade_name", "legal_name", "email"]
    filterset_fields = ["subscription", "currency_trade"]
    ordering = ["trade_name"]

    def perform_create(self, serializer):
        serializer.instance = BusinessService.create_business(serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = BusinessService.update_business(
            serializer.instance, serializer.validated_data
        )

    def destroy(self, request, *args, **kwargs):
        business = self.get_object()
        deleted = BusinessService.delete_business(business)
        return Response(
            {"message": "Business deleted successfully", "deleted": deleted},
            status=status.HTTP_200_OK,
        )


class SalesPointViewSet(BaseViewSet):
    queryset = SalesPoint.objects.all()
    serializer_class = SalesPointSerializer
    filterset_fields = ["business", "sales_point_type", "self_ordering"]
    search_fields = ["sales_point_name"]
    ordering = ["sales_point_name"]

    def perform_create(self, serializer):
        serializer.instance = SalesPointService.create_sales_point(
            serializer.validated_data,
            storage=get_blob_storage(),
            render_qr=get_qr_renderer(),
        )

    def destroy(self, request, *args, **kwargs):
        SalesPointService.delete_sales_point(self.get_object(), storage=get_blob_storage())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="scan")
    def scan(self, request, pk=None):
        """Record a self-ordering QR scan."""
        sales_point = self.get_object()
        sales_point.qr_last_scanned = timezone.now()
        sales_point.save(update_fields=["qr_last_scanned", "updated_at"])
        return Response(self.get_serializer(sales_point).data)
