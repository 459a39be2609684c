import pytest
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from rest_framework import status

from core_backend.exceptions import ConflictError, ValidationError
from purchases.models import Purchase, PurchaseItem
from reports.models import DailySalesReport, MonthlyBusinessReport
from reports.services import MonthlyBusinessReportService
from schedules.models import Schedule


def reference_number(*args):
    return int(datetime(*args, tzinfo=dt_timezone.utc).timestamp() * 1000)


@pytest.fixture
def july_daily_reports(business):
    """Two closed days in July 2024 and one in August."""
    days = []
    for day, net, tips in ((10, "900.00", "20.00"), (11, "500.00", "10.00")):
        days.append(DailySalesReport.objects.create(
            business=business,
            daily_reference_number=reference_number(2024, 7, day, 12),
            time_countdown_to_close=datetime(2024, 7, day + 1, 12, tzinfo=dt_timezone.utc),
            is_daily_report_open=False,
            business_payment_methods=[
                {"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": net},
            ],
            daily_total_sales_before_adjustments=Decimal("1000.00"),
            daily_net_paid_amount=Decimal(net),
            daily_tips_received=Decimal(tips),
            daily_cost_of_goods_sold=Decimal("250.00"),
            daily_customers_served=20,
            daily_sold_goods=[{"businessGoodId": 7, "quantity": 3, "totalPrice": "36.00", "totalCostPrice": "4.50"}],
            daily_pos_system_commission=Decimal("50.00"),
        ))
    DailySalesReport.objects.create(
        business=business,
        daily_reference_number=reference_number(2024, 8, 1, 12),
        time_countdown_to_close=datetime(2024, 8, 2, 12, tzinfo=dt_timezone.utc),
        daily_net_paid_amount=Decimal("999.00"),
    )
    return days


@pytest.fixture
def july_costs(business, supplier, flour, supplier_good_factory):
    wine = supplier_good_factory("Rioja", measurement_unit="unit", price="6.00", main_category="Beverage")
    purchase = Purchase.objects.create(
        business=business, supplier=supplier, receipt_id="R-1", purchase_date=date(2024, 7, 5)
    )
    PurchaseItem.objects.create(
        purchase=purchase, supplier_good=flour, quantity_purchased=Decimal("20"), purchase_price=Decimal("40.00")
    )
    PurchaseItem.objects.create(
        purchase=purchase, supplier_good=wine, quantity_purchased=Decimal("10"), purchase_price=Decimal("60.00")
    )
    Schedule.objects.create(
        business=business, date=date(2024, 7, 10), week_number=28, total_day_employees_cost=Decimal("300.00")
    )
    Schedule.objects.create(
        business=business, date=date(2024, 8, 1), week_number=31, total_day_employees_cost=Decimal("999.00")
    )


@pytest.mark.django_db
class TestMonthlyBusinessReportService:

    def test_get_or_create_normalizes_month(self, business):
        report = MonthlyBusinessReportService.get_or_create_report(business, date(2024, 7, 18))
        again = MonthlyBusinessReportService.get_or_create_report(business, date(2024, 7, 1))

        assert report.month == date(2024, 7, 1)
        assert again.pk == report.pk

    def test_folds_daily_reports_of_the_month(self, business, july_daily_reports):
        report = MonthlyBusinessReportService.get_or_create_report(business, date(2024, 7, 1))

        report = MonthlyBusinessReportService.calculate_monthly_report(report)

        summary = report.financial_summary
        assert summary["totalSalesForMonth"] == Decimal("2000.00")
        assert summary["totalNetRevenue"] == Decimal("1400.00")
        assert summary["totalCostOfGoodsSold"] == Decimal("500.00")
        assert summary["totalGrossProfit"] == Decimal("900.00")
        assert summary["totalTips"] == Decimal("30.00")
        assert summary["financialPercentages"]["salesPaymentCompletionPercentage"] == Decimal("70.00")
        assert report.total_customers_served == 40
        assert report.average_spending_per_customer == Decimal("35.00")
        assert report.pos_system_commission == Decimal("100.00")
        assert report.payment_methods == [
            {"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": Decimal("1400.00")}
        ]
        assert report.goods_sold == [
            {"businessGoodId": 7, "quantity": Decimal("6"), "totalPrice": Decimal("72.00"),
             "totalCostPrice": Decimal("9.00")}
        ]

    def test_cost_breakdown(self, business, july_costs):
        report = MonthlyBusinessReportService.get_or_create_report(business, date(2024, 7, 1))

        report = MonthlyBusinessReportService.update_costs(
            report, fixed_operating_cost=Decimal("500"), extra_cost=Decimal("100")
        )

        costs = report.cost_breakdown
        assert costs["totalFoodCost"] == Decimal("40.00")
        assert costs["totalBeverageCost"] == Decimal("60.00")
        assert costs["totalLaborCost"] == Decimal("300.00")
        assert costs["totalFixedOperatingCost"] == Decimal("500.00")
        assert costs["totalOperatingCost"] == Decimal("1000.00")
        assert costs["costPercentages"]["laborCostRatio"] == Decimal("30.00")

    def test_empty_month_has_zero_ratios(self, business):
        report = MonthlyBusinessReportService.get_or_create_report(business, date(2024, 7, 1))

        report = MonthlyBusinessReportService.calculate_monthly_report(report)

        assert report.average_spending_per_customer == Decimal("0.00")
        assert report.financial_summary["financialPercentages"]["profitMarginPercentage"] == Decimal("0.00")
        assert report.cost_breakdown["costPercentages"]["foodCostRatio"] == Decimal("0.00")

    def test_negative_cost_rejected(self, business):
        report = MonthlyBusinessReportService.get_or_create_report(business, date(2024, 7, 1))

        with pytest.raises(ValidationError):
            MonthlyBusinessReportService.update_costs(report, extra_cost=Decimal("-1"))

    def test_closed_report_is_final(self, business):
        report = MonthlyBusinessReportService.get_or_create_report(business, date(2024, 7, 1))
        report = MonthlyBusinessReportService.close_monthly_report(report)

        assert not report.is_report_open
        with pytest.raises(ConflictError):
            MonthlyBusinessReportService.calculate_monthly_report(report)
        with pytest.raises(ConflictError):
            MonthlyBusinessReportService.update_costs(report, extra_cost=Decimal("10"))


@pytest.mark.django_db
class TestMonthlyReportAPI:

    def test_create_returns_existing_month(self, api_client, business):
        payload = {"business": str(business.pk), "month": "2024-07-01"}

        first = api_client.post("/api/monthly-business-reports/", payload, format="json")
        second = api_client.post("/api/monthly-business-reports/", payload, format="json")

        assert first.status_code == status.HTTP_201_CREATED
        assert second.data["id"] == first.data["id"]
        assert MonthlyBusinessReport.objects.filter(business=business).count() == 1

    def test_update_costs_recalculates(self, api_client, business, july_costs):
        report = MonthlyBusinessReportService.get_or_create_report(business, date(2024, 7, 1))

        response = api_client.patch(
            f"/api/monthly-business-reports/{report.pk}/",
            {"fixed_operating_cost": "600.00"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data["fixed_operating_cost"]) == Decimal("600.00")
        assert Decimal(str(response.data["cost_breakdown"]["totalOperatingCost"])) == Decimal("1000.00")

    def test_close_then_calculate_conflicts(self, api_client, business):
        report = MonthlyBusinessReportService.get_or_create_report(business, date(2024, 7, 1))

        response = api_client.patch(f"/api/monthly-business-reports/{report.pk}/close/")
        assert response.status_code == status.HTTP_200_OK
        assert response.data["is_report_open"] is False

        response = api_client.patch(f"/api/monthly-business-reports/{report.pk}/calculate/")
        assert response.status_code == status.HTTP_409_CONFLICT
