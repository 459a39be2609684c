"""
Daily sales report aggregation.

Orders of the day are reduced per responsible employee, then the employee
reports are merged into the business totals. Both levels use the keyed
accumulators from ``core_backend.utils.accumulators`` so payments merge by
(type, branch) and goods by business-good id in the same way everywhere.
"""
import logging
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import ConflictError, ValidationError
from core_backend.utils.accumulators import goods_accumulator, payment_accumulator, to_decimal
from employees.models import MANAGEMENT_ROLES
from orders.models import Order
from sales_instances.models import SalesInstance, SalesInstanceStatus
from ..models import DailySalesReport, EmployeeDailySalesReport

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

# Billing status -> goods bucket of the report. Open and Cancel orders sell nothing.
GOODS_BUCKETS = {
    Order.BillingStatus.PAID: "sold_goods",
    Order.BillingStatus.VOID: "voided_goods",
    Order.BillingStatus.INVITATION: "invited_goods",
}


def money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def safe_ratio(numerator, denominator) -> Decimal:
    """numerator / denominator, 0 when there is nothing to divide by."""
    denominator = to_decimal(denominator)
    if not denominator:
        return ZERO
    return money(to_decimal(numerator) / denominator)


def reference_number_now() -> int:
    return int(timezone.now().timestamp() * 1000)


def _goods_row(line) -> Dict[str, Any]:
    good = line.business_good
    return {
        "businessGoodId": good.pk,
        "quantity": line.quantity,
        "totalPrice": good.selling_price * line.quantity,
        "totalCostPrice": good.cost_price * line.quantity,
    }


def round_money_fields(rows, fields) -> List[Dict[str, Any]]:
    for row in rows:
        for field in fields:
            row[field] = money(row[field])
    return rows


class DailySalesReportService:
    """Opening, calculating and closing the daily sales report of a business."""

    COUNTDOWN_TO_CLOSE = timedelta(hours=24)

    @staticmethod
    def get_open_report(business, lock=False) -> Optional[DailySalesReport]:
        queryset = DailySalesReport.objects.filter(business=business, is_daily_report_open=True)
        if lock:
            queryset = queryset.select_for_update()
        return queryset.order_by("-daily_reference_number").first()

    @staticmethod
    @transaction.atomic
    def get_or_create_open_report(business) -> DailySalesReport:
        """
        Return the open report of the business, creating it when this is the
        first sales instance of the business day.
        """
        report = DailySalesReportService.get_open_report(business, lock=True)
        if report is not None:
            return report

        report = DailySalesReport.objects.create(
            business=business,
            daily_reference_number=reference_number_now(),
            time_countdown_to_close=timezone.now() + DailySalesReportService.COUNTDOWN_TO_CLOSE,
        )
        logger.info(f"Daily sales report {report.daily_reference_number} opened for {business}")
        return report

    @staticmethod
    def add_employee(report, employee) -> EmployeeDailySalesReport:
        """Register ``employee`` on the report; idempotent."""
        if employee.business_id != report.business_id:
            raise ValidationError("Employee does not belong to this business!")
        employee_report, created = EmployeeDailySalesReport.objects.get_or_create(
            daily_report=report, employee=employee
        )
        if created:
            logger.info(f"Employee {employee.pk} added to daily report {report.daily_reference_number}")
        return employee_report

    @staticmethod
    def require_manager_on_duty(employee):
        if employee is None or not employee.on_duty or employee.current_shift_role not in MANAGEMENT_ROLES:
            logger.warning(f"Daily report action rejected for employee {getattr(employee, 'pk', None)}")
            raise ValidationError("You are not allowed to calculate or close the daily sales report!")

    # ------------------------------------------------------------------
    # Employee level
    # ------------------------------------------------------------------

    @staticmethod
    def summarize_employee_sales(employee, report) -> Dict[str, Any]:
        """
        Reduce the sales instances ``employee`` was responsible for on the
        report's day into the employee totals. Nothing is written.
        """
        sales_instances = (
            SalesInstance.objects.filter(
                business_id=report.business_id,
                responsible_by=employee,
                daily_reference_number=report.daily_reference_number,
            )
            .prefetch_related("orders__lines__business_good")
        )

        payments = payment_accumulator()
        goods = {bucket: goods_accumulator() for bucket in GOODS_BUCKETS.values()}
        totals = {
            "total_sales_before_adjustments": ZERO,
            "total_net_paid_amount": ZERO,
            "total_tips_received": ZERO,
            "total_cost_of_goods_sold": ZERO,
        }
        customers = 0
        has_open = False

        for sales_instance in sales_instances:
            if sales_instance.status != SalesInstanceStatus.CLOSED:
                has_open = True
            customers += sales_instance.guests or 0
            for order in sales_instance.orders.all():
                payments.extend(order.payment_methods)
                totals["total_sales_before_adjustments"] += order.order_gross_price
                totals["total_net_paid_amount"] += order.order_net_price
                totals["total_tips_received"] += order.order_tips
                totals["total_cost_of_goods_sold"] += order.order_cost_price
                bucket = GOODS_BUCKETS.get(order.billing_status)
                if bucket:
                    goods[bucket].extend(_goods_row(line) for line in order.lines.all())

        summary = {field: money(value) for field, value in totals.items()}
        summary.update({
            "has_open_sales_instances": has_open,
            "employee_payment_methods": round_money_fields(payments.rows(), ("methodSalesTotal",)),
            "total_customers_served": customers,
            "average_customer_expenditure": safe_ratio(summary["total_net_paid_amount"], customers),
            "total_void_value": money(goods["voided_goods"].total("totalPrice")),
            "total_invited_value": money(goods["invited_goods"].total("totalPrice")),
        })
        for bucket, accumulator in goods.items():
            summary[bucket] = round_money_fields(accumulator.rows(), ("totalPrice", "totalCostPrice"))
        return summary

    @staticmethod
    def calculate_employee_report(report, employee) -> EmployeeDailySalesReport:
        """Recompute and store one employee's report (full replace)."""
        summary = DailySalesReportService.summarize_employee_sales(employee, report)
        employee_report, _ = EmployeeDailySalesReport.objects.update_or_create(
            daily_report=report, employee=employee, defaults=summary
        )
        return employee_report

    @staticmethod
    def report_employees(report):
        """
        Employees registered on the report plus everyone responsible for a
        sales instance of that day.
        """
        from employees.models import Employee

        registered = report.employee_reports.values_list("employee_id", flat=True)
        responsible = SalesInstance.objects.filter(
            business_id=report.business_id,
            daily_reference_number=report.daily_reference_number,
            responsible_by__isnull=False,
        ).values_list("responsible_by_id", flat=True)
        ids = set(registered) | set(responsible)
        return list(Employee.objects.filter(pk__in=ids).order_by("pk"))

    @staticmethod
    def calculate_employee_reports(report) -> Tuple[List[EmployeeDailySalesReport], List[str]]:
        """
        Recompute every employee report of the day.

        A failing employee does not stop the run: its error is collected and
        the other reports are still stored.
        """
        employee_reports = []
        errors = []
        for employee in DailySalesReportService.report_employees(report):
            try:
                with transaction.atomic():
                    employee_reports.append(DailySalesReportService.calculate_employee_report(report, employee))
            except Exception as exc:
                logger.error(f"Daily report {report.daily_reference_number}: employee {employee.pk} failed: {exc}")
                errors.append(f"Error updating employee {employee.pk}: {exc}")
        return employee_reports, errors

    # ------------------------------------------------------------------
    # Business level
    # ------------------------------------------------------------------

    @staticmethod
    def merge_employee_reports(employee_reports, commission_rate) -> Dict[str, Any]:
        """Fold employee reports into the business ``daily_*`` totals."""
        payments = payment_accumulator()
        sold = goods_accumulator()
        voided = goods_accumulator()
        invited = goods_accumulator()
        gross = net = tips = cost = void_value = invited_value = ZERO
        customers = 0

        for employee_report in employee_reports:
            payments.extend(employee_report.employee_payment_methods)
            sold.extend(employee_report.sold_goods)
            voided.extend(employee_report.voided_goods)
            invited.extend(employee_report.invited_goods)
            gross += employee_report.total_sales_before_adjustments
            net += employee_report.total_net_paid_amount
            tips += employee_report.total_tips_received
            cost += employee_report.total_cost_of_goods_sold
            void_value += employee_report.total_void_value
            invited_value += employee_report.total_invited_value
            customers += employee_report.total_customers_served

        goods_fields = ("totalPrice", "totalCostPrice")
        return {
            "business_payment_methods": round_money_fields(payments.rows(), ("methodSalesTotal",)),
            "daily_total_sales_before_adjustments": money(gross),
            "daily_net_paid_amount": money(net),
            "daily_tips_received": money(tips),
            "daily_cost_of_goods_sold": money(cost),
            "daily_profit": money(net - cost),
            "daily_customers_served": customers,
            "daily_average_customer_expenditure": safe_ratio(net, customers),
            "daily_sold_goods": round_money_fields(sold.rows(), goods_fields),
            "daily_voided_goods": round_money_fields(voided.rows(), goods_fields),
            "daily_invited_goods": round_money_fields(invited.rows(), goods_fields),
            "daily_total_void_value": money(void_value),
            "daily_total_invited_value": money(invited_value),
            "daily_pos_system_commission": money(gross * commission_rate),
        }

    @staticmethod
    def calculate_business_report(report, requested_by) -> Tuple[DailySalesReport, List[str]]:
        """
        Recompute all employee reports and the business totals of the day.

        Requires a manager on duty. Employee failures are returned as a list
        of messages next to the report; the successful part is stored.
        """
        DailySalesReportService.require_manager_on_duty(requested_by)
        if requested_by.business_id != report.business_id:
            raise ValidationError("Employee does not belong to this business!")

        employee_reports, errors = DailySalesReportService.calculate_employee_reports(report)
        totals = DailySalesReportService.merge_employee_reports(
            employee_reports, report.business.commission_rate
        )
        for field, value in totals.items():
            setattr(report, field, value)
        report.save(update_fields=list(totals) + ["updated_at"])

        if errors:
            logger.warning(
                f"Daily report {report.daily_reference_number} calculated with {len(errors)} employee error(s)"
            )
        else:
            logger.info(f"Daily report {report.daily_reference_number} calculated")
        return report, errors

    @staticmethod
    @transaction.atomic
    def close_daily_report(report, requested_by) -> DailySalesReport:
        """
        Recalculate and close the day.

        Raises:
            ConflictError: An employee still has open sales instances, or an
                employee report could not be calculated.
        """
        report = DailySalesReport.objects.select_for_update().get(pk=report.pk)
        if not report.is_daily_report_open:
            raise ConflictError("Daily sales report is already closed!")

        report, errors = DailySalesReportService.calculate_business_report(report, requested_by)
        if errors:
            raise ConflictError("Daily sales report cannot be closed, some employee reports failed!", details=errors)

        open_tables = report.employee_reports.filter(has_open_sales_instances=True).select_related("employee")
        if open_tables:
            names = ", ".join(str(employee_report.employee) for employee_report in open_tables)
            logger.warning(f"Close rejected for daily report {report.daily_reference_number}: open tables")
            raise ConflictError(f"You cant close the daily sales because {names} has open tables!")

        report.is_daily_report_open = False
        report.save(update_fields=["is_daily_report_open", "updated_at"])
        logger.info(f"Daily report {report.daily_reference_number} closed")
        return report
