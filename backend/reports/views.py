import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet, ReadOnlyBaseViewSet
from core_backend.exceptions import PartialFailure, ValidationError
from .models import DailySalesReport, MonthlyBusinessReport
from .serializers import (
    DailySalesReportSerializer,
    EmployeeDailySalesReportSerializer,
    MonthlyBusinessReportSerializer,
    MonthlyCostsSerializer,
    ReportActionSerializer,
)
from .services import DailySalesReportService, MonthlyBusinessReportService

logger = logging.getLogger(__name__)


class DailySalesReportViewSet(ReadOnlyBaseViewSet):
    """
    Daily sales reports. They are opened with the first sales instance of the
    day and only change through the calculation and close actions.
    """
    queryset = DailySalesReport.objects.all()
    serializer_class = DailySalesReportSerializer
    filterset_fields = ["business", "is_daily_report_open", "daily_reference_number"]
    ordering = ["-daily_reference_number"]

    def _employee_from_request(self, request):
        serializer = ReportActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data["employee"]

    @action(detail=True, methods=["patch"], url_path="calculate-business-report")
    def calculate_business_report(self, request, pk=None):
        """
        Recalculates every employee report and the business totals.
        Returns 207 with the failures when some employee reports failed.
        """
        report, errors = DailySalesReportService.calculate_business_report(
            self.get_object(), self._employee_from_request(request)
        )
        if errors:
            raise PartialFailure("Daily sales report calculated with errors!", errors)
        return Response(self.get_serializer(report).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["patch"], url_path="calculate-employee-report")
    def calculate_employee_report(self, request, pk=None):
        report = self.get_object()
        employee = self._employee_from_request(request)
        if employee.business_id != report.business_id:
            raise ValidationError("Employee does not belong to this business!")
        employee_report = DailySalesReportService.calculate_employee_report(report, employee)
        return Response(EmployeeDailySalesReportSerializer(employee_report).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["patch"], url_path="close")
    def close(self, request, pk=None):
        report = DailySalesReportService.close_daily_report(self.get_object(), self._employee_from_request(request))
        return Response(self.get_serializer(report).data, status=status.HTTP_200_OK)


class MonthlyBusinessReportViewSet(BaseViewSet):
    """
    Monthly business reports. Creating one for a month that already has a
    report returns the existing report.
    """
    queryset = MonthlyBusinessReport.objects.all()
    serializer_class = MonthlyBusinessReportSerializer
    filterset_fields = ["business", "is_report_open", "month"]
    ordering = ["-month"]
    http_method_names = ["get", "post", "patch", "head", "options"]

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = MonthlyBusinessReportService.get_or_create_report(data["business"], data["month"])

    def partial_update(self, request, *args, **kwargs):
        """Only the costs entered by the business can be edited."""
        serializer = MonthlyCostsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = MonthlyBusinessReportService.update_costs(self.get_object(), **serializer.validated_data)
        return Response(self.get_serializer(report).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["patch"])
    def calculate(self, request, pk=None):
        report = MonthlyBusinessReportService.calculate_monthly_report(self.get_object())
        return Response(self.get_serializer(report).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["patch"])
    def close(self, request, pk=None):
        report = MonthlyBusinessReportService.close_monthly_report(self.get_object())
        return Response(self.get_serializer(report).data, status=status.HTTP_200_OK)
