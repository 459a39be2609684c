from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from employees.models import Employee
from .models import DailySalesReport, EmployeeDailySalesReport, MonthlyBusinessReport


class EmployeeDailySalesReportSerializer(BaseModelSerializer):
    employee_name = serializers.CharField(source="employee.employee_name", read_only=True)

    class Meta:
        model = EmployeeDailySalesReport
        fields = [
            "id",
            "employee",
            "employee_name",
            "has_open_sales_instances",
            "employee_payment_methods",
            "total_sales_before_adjustments",
            "total_net_paid_amount",
            "total_tips_received",
            "total_cost_of_goods_sold",
            "total_customers_served",
            "average_customer_expenditure",
            "sold_goods",
            "voided_goods",
            "invited_goods",
            "total_void_value",
            "total_invited_value",
            "updated_at",
        ]
        read_only_fields = fields


class DailySalesReportSerializer(BaseModelSerializer):
    employee_reports = EmployeeDailySalesReportSerializer(many=True, read_only=True)

    class Meta:
        model = DailySalesReport
        fields = [
            "id",
            "business",
            "daily_reference_number",
            "is_daily_report_open",
            "time_countdown_to_close",
            "employee_reports",
            "business_payment_methods",
            "daily_total_sales_before_adjustments",
            "daily_net_paid_amount",
            "daily_tips_received",
            "daily_cost_of_goods_sold",
            "daily_profit",
            "daily_customers_served",
            "daily_average_customer_expenditure",
            "daily_sold_goods",
            "daily_voided_goods",
            "daily_invited_goods",
            "daily_total_void_value",
            "daily_total_invited_value",
            "daily_pos_system_commission",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
        select_related_fields = ["business"]
        prefetch_related_fields = ["employee_reports__employee"]


class ReportActionSerializer(serializers.Serializer):
    """The employee asking for a calculation or a close."""

    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())


class MonthlyBusinessReportSerializer(BaseModelSerializer):

    class Meta:
        model = MonthlyBusinessReport
        fields = [
            "id",
            "business",
            "month",
            "is_report_open",
            "financial_summary",
            "cost_breakdown",
            "goods_sold",
            "goods_voided",
            "goods_complimentary",
            "supplier_waste_analysis",
            "total_customers_served",
            "average_spending_per_customer",
            "payment_methods",
            "pos_system_commission",
            "fixed_operating_cost",
            "extra_cost",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [field for field in fields if field not in ("business", "month")]
        # get_or_create in the service handles an existing month
        validators = []


class MonthlyCostsSerializer(serializers.Serializer):
    fixed_operating_cost = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    extra_cost = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
