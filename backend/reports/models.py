from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils.translation import gettext_lazy as _


def money_field(**kwargs):
    return models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"), **kwargs)


class DailySalesReport(models.Model):
    """
    Sales of one business day.

    A business day is identified by ``daily_reference_number`` (the epoch in
    milliseconds when its first sales instance opened), not by a calendar
    date, since service may run past midnight. The ``daily_*`` fields are
    recomputed as a whole from the employee reports.
    """
    business = models.ForeignKey(
        "business.Business", on_delete=models.CASCADE, related_name="daily_sales_reports"
    )
    daily_reference_number = models.BigIntegerField()
    is_daily_report_open = models.BooleanField(default=True)
    time_countdown_to_close = models.DateTimeField(help_text="When the day is due to be closed")

    business_payment_methods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    daily_total_sales_before_adjustments = money_field()
    daily_net_paid_amount = money_field()
    daily_tips_received = money_field()
    daily_cost_of_goods_sold = money_field()
    daily_profit = money_field()
    daily_customers_served = models.PositiveIntegerField(default=0)
    daily_average_customer_expenditure = money_field()
    daily_sold_goods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    daily_voided_goods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    daily_invited_goods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    daily_total_void_value = money_field()
    daily_total_invited_value = money_field()
    daily_pos_system_commission = money_field()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Daily Sales Report")
        verbose_name_plural = _("Daily Sales Reports")
        ordering = ["-daily_reference_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "daily_reference_number"],
                name="unique_daily_report_per_business",
            ),
        ]
        indexes = [
            models.Index(fields=["business", "is_daily_report_open"]),
        ]

    def __str__(self):
        return f"{self.business} - {self.daily_reference_number}"


class EmployeeDailySalesReport(models.Model):
    """Sales of the sales instances an employee was responsible for on one day."""

    daily_report = models.ForeignKey(
        DailySalesReport, on_delete=models.CASCADE, related_name="employee_reports"
    )
    employee = models.ForeignKey(
        "employees.Employee", on_delete=models.CASCADE, related_name="daily_sales_reports"
    )
    has_open_sales_instances = models.BooleanField(default=False)
    employee_payment_methods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    total_sales_before_adjustments = money_field()
    total_net_paid_amount = money_field()
    total_tips_received = money_field()
    total_cost_of_goods_sold = money_field()
    total_customers_served = models.PositiveIntegerField(default=0)
    average_customer_expenditure = money_field()
    sold_goods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    voided_goods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    invited_goods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    total_void_value = money_field()
    total_invited_value = money_field()

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["daily_report", "employee__employee_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["daily_report", "employee"],
                name="unique_employee_per_daily_report",
            ),
        ]

    def __str__(self):
        return f"{self.employee} - {self.daily_report.daily_reference_number}"


class MonthlyBusinessReport(models.Model):
    """
    Month summary folded from the daily sales reports, purchases, schedules
    and inventory counts of the month.

    Fixed and extra costs are entered by the business; everything else is
    computed. A closed report (``is_report_open`` false) is final.
    """
    business = models.ForeignKey(
        "business.Business", on_delete=models.CASCADE, related_name="monthly_reports"
    )
    month = models.DateField(help_text="First day of the reported month")
    is_report_open = models.BooleanField(default=True)

    financial_summary = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    cost_breakdown = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    goods_sold = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    goods_voided = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    goods_complimentary = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    supplier_waste_analysis = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    total_customers_served = models.PositiveIntegerField(default=0)
    average_spending_per_customer = money_field()
    payment_methods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    pos_system_commission = money_field()

    fixed_operating_cost = money_field()
    extra_cost = money_field()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Monthly Business Report")
        verbose_name_plural = _("Monthly Business Reports")
        ordering = ["-month"]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "month"],
                name="unique_monthly_report_per_business",
            ),
        ]

    def __str__(self):
        return f"{self.business} - {self.month:%Y-%m}"
