import pytest
from decimal import Decimal
from rest_framework import status

from orders.models import Order


@pytest.mark.django_db
class TestOrdersAPI:

    def _create(self, api_client, sales_instance, waiter, *goods_lists):
        return api_client.post(
            "/api/orders/",
            {
                "sales_instance": sales_instance.pk,
                "created_by": waiter.pk,
                "orders": [{"business_goods": [good.pk for good in goods]} for goods in goods_lists],
            },
            format="json",
        )

    def test_create_orders(self, api_client, sales_instance, waiter, pizza, bread):
        response = self._create(api_client, sales_instance, waiter, [pizza], [bread])

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data) == 2
        assert response.data[0]["order_code"] == response.data[1]["order_code"]

    def test_create_requires_employee_or_customer(self, api_client, sales_instance, pizza):
        response = api_client.post(
            "/api/orders/",
            {"sales_instance": sales_instance.pk, "orders": [{"business_goods": [pizza.pk]}]},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "message" in response.data

    def test_close_orders(self, api_client, sales_instance, waiter, pizza):
        order_id = self._create(api_client, sales_instance, waiter, [pizza]).data[0]["id"]

        response = api_client.post(
            "/api/orders/close/",
            {
                "orders": [order_id],
                "payment_methods": [{"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": 15}],
            },
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]["billing_status"] == "Paid"
        assert Decimal(response.data[0]["order_tips"]) == Decimal("3.00")

    def test_close_with_underpayment_is_bad_request(self, api_client, sales_instance, waiter, pizza):
        order_id = self._create(api_client, sales_instance, waiter, [pizza]).data[0]["id"]

        response = api_client.post(
            "/api/orders/close/",
            {
                "orders": [order_id],
                "payment_methods": [{"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": 5}],
            },
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "lower than the total price" in response.data["message"]

    def test_cancel_started_order_conflicts(self, api_client, sales_instance, waiter, pizza):
        order_id = self._create(api_client, sales_instance, waiter, [pizza]).data[0]["id"]
        Order.objects.filter(pk=order_id).update(order_status=Order.OrderStatus.STARTED)

        response = api_client.post(f"/api/orders/{order_id}/cancel/")

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_cancel_sent_order(self, api_client, sales_instance, waiter, pizza):
        order_id = self._create(api_client, sales_instance, waiter, [pizza]).data[0]["id"]

        response = api_client.post(f"/api/orders/{order_id}/cancel/")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Order.objects.filter(pk=order_id).exists()

    def test_discount_and_statuses(self, api_client, sales_instance, waiter, pizza, bread):
        ids = [order["id"] for order in self._create(api_client, sales_instance, waiter, [pizza], [bread]).data]

        response = api_client.post(
            "/api/orders/discount/",
            {"orders": ids[:1], "discount_percentage": "50", "comments": "Staff meal"},
            format="json",
        )
        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data[0]["order_net_price"]) == Decimal("6.00")

        response = api_client.post(
            "/api/orders/billing-status/",
            {"orders": ids[1:], "billing_status": "Invitation", "comments": "Birthday"},
            format="json",
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]["billing_status"] == "Invitation"

        response = api_client.post(
            "/api/orders/order-status/", {"orders": ids, "order_status": "Done"}, format="json"
        )
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2

    def test_list_open_orders(self, api_client, business, sales_instance, waiter, pizza, bread):
        ids = [order["id"] for order in self._create(api_client, sales_instance, waiter, [pizza], [bread]).data]
        Order.objects.filter(pk=ids[0]).update(billing_status=Order.BillingStatus.PAID)

        response = api_client.get(f"/api/orders/?business={business.pk}&open_only=true")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
