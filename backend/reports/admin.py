from django.contrib import admin
from .models import DailySalesReport, EmployeeDailySalesReport, MonthlyBusinessReport


class EmployeeDailySalesReportInline(admin.TabularInline):
    model = EmployeeDailySalesReport
    extra = 0
    fields = ("employee", "has_open_sales_instances", "total_net_paid_amount", "total_tips_received")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(DailySalesReport)
class DailySalesReportAdmin(admin.ModelAdmin):
    list_display = (
        "business",
        "daily_reference_number",
        "is_daily_report_open",
        "daily_net_paid_amount",
        "daily_pos_system_commission",
    )
    list_filter = ("is_daily_report_open", "business")
    ordering = ("-daily_reference_number",)
    inlines = [EmployeeDailySalesReportInline]


@admin.register(MonthlyBusinessReport)
class MonthlyBusinessReportAdmin(admin.ModelAdmin):
    list_display = ("business", "month", "is_report_open", "total_customers_served", "pos_system_commission")
    list_filter = ("is_report_open", "business")
    ordering = ("-month",)
