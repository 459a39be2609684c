"""
Monthly business report aggregation.

Folds the daily sales reports of a calendar month into the financial summary,
and adds the cost side: food and beverage purchases, labor from the
schedules, and the fixed and extra costs entered on the report. Every ratio
with a zero denominator is 0.
"""
import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict

from django.db import transaction
from django.db.models import Avg, Sum
from django.utils import timezone

from core_backend.exceptions import ConflictError, ValidationError
from core_backend.utils.accumulators import goods_accumulator, payment_accumulator, to_decimal
from suppliers.models import BudgetImpact, MainCategory
from ..models import DailySalesReport, MonthlyBusinessReport
from .daily_service import ZERO, money, round_money_fields, safe_ratio

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")

WASTE_KEYS = {
    BudgetImpact.VERY_LOW: "veryLowImpactWastePercentage",
    BudgetImpact.LOW: "lowImpactWastePercentage",
    BudgetImpact.MEDIUM: "mediumImpactWastePercentage",
    BudgetImpact.HIGH: "highImpactWastePercentage",
    BudgetImpact.VERY_HIGH: "veryHighImpactWastePercentage",
}


def percent(part, whole) -> Decimal:
    return safe_ratio(to_decimal(part) * HUNDRED, whole)


def month_start(day) -> date:
    return day.replace(day=1)


def next_month(day) -> date:
    return date(day.year + 1, 1, 1) if day.month == 12 else date(day.year, day.month + 1, 1)


def month_reference_bounds(month):
    """Daily reference numbers (epoch ms) that fall inside ``month``."""
    start = timezone.make_aware(datetime.combine(month, time.min))
    end = timezone.make_aware(datetime.combine(next_month(month), time.min))
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)


class MonthlyBusinessReportService:

    @staticmethod
    def get_or_create_report(business, month=None) -> MonthlyBusinessReport:
        month = month_start(month or timezone.localdate())
        report, created = MonthlyBusinessReport.objects.get_or_create(business=business, month=month)
        if created:
            logger.info(f"Monthly report {month:%Y-%m} created for {business}")
        return report

    @staticmethod
    def daily_reports_for(report):
        start, end = month_reference_bounds(report.month)
        return DailySalesReport.objects.filter(
            business_id=report.business_id,
            daily_reference_number__gte=start,
            daily_reference_number__lt=end,
        ).order_by("daily_reference_number")

    @staticmethod
    def purchase_costs(report) -> Dict[str, Decimal]:
        from purchases.models import PurchaseItem

        items = PurchaseItem.objects.filter(
            purchase__business_id=report.business_id,
            purchase__purchase_date__gte=report.month,
            purchase__purchase_date__lt=next_month(report.month),
        )
        food = items.filter(supplier_good__main_category=MainCategory.FOOD).aggregate(total=Sum("purchase_price"))
        beverage = items.filter(supplier_good__main_category=MainCategory.BEVERAGE).aggregate(
            total=Sum("purchase_price")
        )
        return {"food": money(food["total"]), "beverage": money(beverage["total"])}

    @staticmethod
    def labor_cost(report) -> Decimal:
        from schedules.models import Schedule

        total = Schedule.objects.filter(
            business_id=report.business_id,
            date__gte=report.month,
            date__lt=next_month(report.month),
        ).aggregate(total=Sum("total_day_employees_cost"))["total"]
        return money(total)

    @staticmethod
    def supplier_waste_analysis(report) -> Dict[str, Decimal]:
        """Average count deviation of the month's inventory per budget impact level."""
        from inventory.models import InventoryGood

        rows = (
            InventoryGood.objects.filter(inventory__business_id=report.business_id, inventory__period=report.month)
            .values("supplier_good__budget_impact")
            .annotate(waste=Avg("average_deviation_percent"))
        )
        by_level = {row["supplier_good__budget_impact"]: row["waste"] for row in rows}
        return {key: money(by_level.get(level)) for level, key in WASTE_KEYS.items()}

    @staticmethod
    def summarize_month(report) -> Dict[str, Any]:
        """Compute every derived field of ``report``. Nothing is written."""
        payments = payment_accumulator()
        sold = goods_accumulator()
        voided = goods_accumulator()
        invited = goods_accumulator()
        sales = net = cost = tips = void_value = invited_value = commission = ZERO
        customers = 0

        for daily in MonthlyBusinessReportService.daily_reports_for(report):
            payments.extend(daily.business_payment_methods)
            sold.extend(daily.daily_sold_goods)
            voided.extend(daily.daily_voided_goods)
            invited.extend(daily.daily_invited_goods)
            sales += daily.daily_total_sales_before_adjustments
            net += daily.daily_net_paid_amount
            cost += daily.daily_cost_of_goods_sold
            tips += daily.daily_tips_received
            void_value += daily.daily_total_void_value
            invited_value += daily.daily_total_invited_value
            commission += daily.daily_pos_system_commission
            customers += daily.daily_customers_served

        gross_profit = net - cost
        financial_summary = {
            "totalSalesForMonth": money(sales),
            "totalCostOfGoodsSold": money(cost),
            "totalNetRevenue": money(net),
            "totalGrossProfit": money(gross_profit),
            "totalVoidSales": money(void_value),
            "totalInvitedSales": money(invited_value),
            "totalTips": money(tips),
            "financialPercentages": {
                "salesPaymentCompletionPercentage": percent(net, sales),
                "profitMarginPercentage": percent(gross_profit, net),
                "voidSalesPercentage": percent(void_value, sales),
                "invitedSalesPercentage": percent(invited_value, sales),
                "tipsToCostOfGoodsPercentage": percent(tips, cost),
            },
        }

        purchases = MonthlyBusinessReportService.purchase_costs(report)
        labor = MonthlyBusinessReportService.labor_cost(report)
        fixed = money(report.fixed_operating_cost)
        extra = money(report.extra_cost)
        operating = purchases["food"] + purchases["beverage"] + labor + fixed + extra
        cost_breakdown = {
            "totalFoodCost": purchases["food"],
            "totalBeverageCost": purchases["beverage"],
            "totalLaborCost": labor,
            "totalFixedOperatingCost": fixed,
            "totalExtraCost": extra,
            "totalOperatingCost": money(operating),
            "costPercentages": {
                "foodCostRatio": percent(purchases["food"], operating),
                "beverageCostRatio": percent(purchases["beverage"], operating),
                "laborCostRatio": percent(labor, operating),
                "fixedCostRatio": percent(fixed, operating),
            },
        }

        goods_fields = ("totalPrice", "totalCostPrice")
        return {
            "financial_summary": financial_summary,
            "cost_breakdown": cost_breakdown,
            "goods_sold": round_money_fields(sold.rows(), goods_fields),
            "goods_voided": round_money_fields(voided.rows(), goods_fields),
            "goods_complimentary": round_money_fields(invited.rows(), goods_fields),
            "supplier_waste_analysis": MonthlyBusinessReportService.supplier_waste_analysis(report),
            "total_customers_served": customers,
            "average_spending_per_customer": safe_ratio(net, customers),
            "payment_methods": round_money_fields(payments.rows(), ("methodSalesTotal",)),
            "pos_system_commission": money(commission),
        }

    @staticmethod
    @transaction.atomic
    def calculate_monthly_report(report) -> MonthlyBusinessReport:
        report = MonthlyBusinessReport.objects.select_for_update().get(pk=report.pk)
        if not report.is_report_open:
            raise ConflictError("Monthly report is closed and cannot be recalculated!")

        summary = MonthlyBusinessReportService.summarize_month(report)
        for field, value in summary.items():
            setattr(report, field, value)
        report.save(update_fields=list(summary) + ["updated_at"])
        logger.info(f"Monthly report {report.month:%Y-%m} calculated for business {report.business_id}")
        return report

    @staticmethod
    @transaction.atomic
    def update_costs(report, fixed_operating_cost=None, extra_cost=None) -> MonthlyBusinessReport:
        """Set the costs entered by the business and recalculate."""
        if not report.is_report_open:
            raise ConflictError("Monthly report is closed and cannot be updated!")
        for field, value in (("fixed_operating_cost", fixed_operating_cost), ("extra_cost", extra_cost)):
            if value is None:
                continue
            if to_decimal(value) < 0:
                raise ValidationError(f"{field} must be a positive number!")
            setattr(report, field, money(value))
        report.save(update_fields=["fixed_operating_cost", "extra_cost", "updated_at"])
        return MonthlyBusinessReportService.calculate_monthly_report(report)

    @staticmethod
    @transaction.atomic
    def close_monthly_report(report) -> MonthlyBusinessReport:
        report = MonthlyBusinessReportService.calculate_monthly_report(report)
        report.is_report_open = False
        report.save(update_fields=["is_report_open", "updated_at"])
        logger.info(f"Monthly report {report.month:%Y-%m} closed for business {report.business_id}")
        return report
