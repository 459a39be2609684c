import pytest
from decimal import Decimal
from rest_framework import status

from core_backend.exceptions import ConflictError, ValidationError
from orders.services import OrderService
from reports.models import DailySalesReport
from reports.services import DailySalesReportService


def cash(amount):
    return [{"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": amount}]


@pytest.fixture
def report(sales_instance):
    return DailySalesReport.objects.get(
        business=sales_instance.business, daily_reference_number=sales_instance.daily_reference_number
    )


@pytest.fixture
def banquet(business_good_factory, flour):
    return business_good_factory(
        "Banquet",
        selling_price="1000.00",
        ingredients=[{"supplier_good": flour, "measurement_unit": "g", "required_quantity": Decimal("100")}],
    )


@pytest.mark.django_db
class TestCalculateBusinessReport:

    def test_commission_follows_subscription(self, business, sales_instance, order_factory, banquet, report, manager):
        business.subscription = "Premium"
        business.save(update_fields=["subscription"])
        order, = order_factory(sales_instance, [banquet])
        OrderService.close_orders([order.pk], cash(1000))

        report.refresh_from_db()
        report, errors = DailySalesReportService.calculate_business_report(report, manager)

        assert errors == []
        assert report.daily_total_sales_before_adjustments == Decimal("1000.00")
        assert report.daily_net_paid_amount == Decimal("1000.00")
        assert report.daily_pos_system_commission == Decimal("80.00")

    def test_totals_and_goods(self, sales_instance, order_factory, pizza, bread, report, manager):
        first, second = order_factory(sales_instance, [pizza], [bread])
        OrderService.close_orders([first.pk, second.pk], cash(20))

        report, errors = DailySalesReportService.calculate_business_report(report, manager)

        assert errors == []
        assert report.daily_total_sales_before_adjustments == Decimal("15.00")
        assert report.daily_tips_received == Decimal("5.00")
        assert report.daily_cost_of_goods_sold == Decimal("2.50")
        assert report.daily_profit == Decimal("12.50")
        assert report.daily_customers_served == 2
        assert report.daily_average_customer_expenditure == Decimal("7.50")
        assert report.business_payment_methods == [
            {"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": Decimal("20.00")}
        ]
        sold = {row["businessGoodId"]: row["quantity"] for row in report.daily_sold_goods}
        assert sold == {pizza.pk: 1, bread.pk: 1}

    def test_repeated_good_counts_every_unit(self, sales_instance, order_factory, pizza, report, waiter):
        order, = order_factory(sales_instance, [pizza, pizza])
        OrderService.close_orders([order.pk], cash(24))

        summary = DailySalesReportService.summarize_employee_sales(waiter, report)

        row, = summary["sold_goods"]
        assert row["businessGoodId"] == pizza.pk
        assert row["quantity"] == 2
        assert row["totalPrice"] == summary["total_sales_before_adjustments"] == Decimal("24.00")
        assert row["totalCostPrice"] == Decimal("3.00")

    def test_recalculation_is_idempotent(self, sales_instance, order_factory, pizza, report, manager):
        order, = order_factory(sales_instance, [pizza])
        OrderService.close_orders([order.pk], cash(12))

        first, _ = DailySalesReportService.calculate_business_report(report, manager)
        first_totals = (first.daily_net_paid_amount, first.daily_cost_of_goods_sold, first.daily_customers_served)
        second, _ = DailySalesReportService.calculate_business_report(report, manager)

        assert (second.daily_net_paid_amount, second.daily_cost_of_goods_sold,
                second.daily_customers_served) == first_totals
        assert second.employee_reports.count() == 1

    def test_employee_not_on_management_shift_rejected(self, report, waiter):
        with pytest.raises(ValidationError):
            DailySalesReportService.calculate_business_report(report, waiter)

    def test_manager_off_duty_rejected(self, report, employee_factory):
        off_duty = employee_factory(roles=["Manager"], current_shift_role="Manager", on_duty=False)

        with pytest.raises(ValidationError):
            DailySalesReportService.calculate_business_report(report, off_duty)


@pytest.mark.django_db
class TestCloseDailyReport:

    def test_open_tables_block_close(self, sales_instance, order_factory, pizza, report, manager):
        order_factory(sales_instance, [pizza])

        with pytest.raises(ConflictError):
            DailySalesReportService.close_daily_report(report, manager)

        report.refresh_from_db()
        assert report.is_daily_report_open

    def test_close_settled_day(self, sales_instance, order_factory, pizza, report, manager):
        order, = order_factory(sales_instance, [pizza])
        OrderService.close_orders([order.pk], cash(12))

        closed = DailySalesReportService.close_daily_report(report, manager)

        assert not closed.is_daily_report_open
        assert closed.daily_net_paid_amount == Decimal("12.00")
        with pytest.raises(ConflictError):
            DailySalesReportService.close_daily_report(closed, manager)


@pytest.mark.django_db
class TestDailyReportAPI:

    def test_calculate_business_report(self, api_client, sales_instance, order_factory, pizza, report, manager):
        order, = order_factory(sales_instance, [pizza])
        OrderService.close_orders([order.pk], cash(12))

        response = api_client.patch(
            f"/api/daily-sales-reports/{report.pk}/calculate-business-report/",
            {"employee": manager.pk},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data["daily_net_paid_amount"]) == Decimal("12.00")
        assert len(response.data["employee_reports"]) == 1

    def test_failed_employee_report_is_multi_status(self, api_client, monkeypatch, sales_instance, report,
                                                     manager, waiter):
        DailySalesReportService.add_employee(report, manager)
        original = DailySalesReportService.calculate_employee_report

        def failing_for_waiter(daily_report, employee):
            if employee.pk == waiter.pk:
                raise RuntimeError("broken sales instance")
            return original(daily_report, employee)

        monkeypatch.setattr(DailySalesReportService, "calculate_employee_report", staticmethod(failing_for_waiter))

        response = api_client.patch(
            f"/api/daily-sales-reports/{report.pk}/calculate-business-report/",
            {"employee": manager.pk},
            format="json",
        )

        assert response.status_code == status.HTTP_207_MULTI_STATUS
        assert len(response.data["errors"]) == 1
        assert f"employee {waiter.pk}" in response.data["errors"][0]

    def test_calculate_employee_report(self, api_client, sales_instance, report, waiter):
        response = api_client.patch(
            f"/api/daily-sales-reports/{report.pk}/calculate-employee-report/",
            {"employee": waiter.pk},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["has_open_sales_instances"] is True
        assert response.data["total_customers_served"] == 2

    def test_close_with_open_tables_conflicts(self, api_client, sales_instance, report, manager):
        response = api_client.patch(
            f"/api/daily-sales-reports/{report.pk}/close/", {"employee": manager.pk}, format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert "has open tables" in response.data["message"]

    def test_waiter_cannot_close(self, api_client, sales_instance, report, waiter):
        response = api_client.patch(
            f"/api/daily-sales-reports/{report.pk}/close/", {"employee": waiter.pk}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
