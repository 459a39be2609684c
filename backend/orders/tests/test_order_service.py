import pytest
from decimal import Decimal

from core_backend.exceptions import ConflictError, ValidationError
from orders.models import Order
from orders.services import OrderDiscountService, OrderService, OrderStatusService
from sales_instances.models import SalesInstance, SalesInstanceStatus


@pytest.fixture
def menu(business_good_factory, flour):
    """Menu of the day at 50.00 using 100 g flour."""
    return business_good_factory(
        "Menu of the day",
        selling_price="50.00",
        ingredients=[{"supplier_good": flour, "measurement_unit": "g", "required_quantity": Decimal("100")}],
    )


def payment(method_type, branch, amount):
    return {"paymentMethodType": method_type, "methodBranch": branch, "methodSalesTotal": amount}


@pytest.mark.django_db
class TestCreateOrders:

    def test_prices_come_from_goods(self, sales_instance, order_factory, pizza, bread):
        order, = order_factory(sales_instance, [pizza, bread])

        assert order.order_gross_price == Decimal("15.00")
        assert order.order_net_price == Decimal("15.00")
        assert order.order_cost_price == pizza.cost_price + bread.cost_price
        assert order.billing_status == Order.BillingStatus.OPEN
        assert order.daily_reference_number == sales_instance.daily_reference_number

    def test_repeated_good_is_one_line_with_quantity(self, sales_instance, order_factory, pizza, open_inventory,
                                                     flour, inventory_count):
        order, = order_factory(sales_instance, [pizza, pizza])

        line = order.lines.get()
        assert (line.business_good, line.quantity) == (pizza, 2)
        assert order.order_gross_price == Decimal("24.00")
        assert inventory_count(open_inventory, flour) == Decimal("-0.5")

    def test_batch_shares_one_sales_group(self, sales_instance, order_factory, pizza, bread):
        first, second = order_factory(sales_instance, [pizza], [bread])

        assert first.sales_group_id == second.sales_group_id
        assert len(first.sales_group.order_code) == 11

    def test_ingredients_leave_inventory(self, sales_instance, order_factory, pizza, open_inventory, flour, cheese,
                                         inventory_count):
        order_factory(sales_instance, [pizza])

        assert inventory_count(open_inventory, flour) == Decimal("-0.25")
        assert inventory_count(open_inventory, cheese) == Decimal("-0.1")

    def test_promotion_price_is_kept(self, sales_instance, waiter, pizza):
        order, = OrderService.create_orders(
            waiter,
            sales_instance,
            [{"business_goods": [pizza], "promotion_applied": "Happy hour", "order_net_price": Decimal("6.00")}],
        )

        assert order.order_gross_price == Decimal("12.00")
        assert order.order_net_price == Decimal("6.00")

    def test_closed_sales_instance_rejected(self, sales_instance, order_factory, pizza):
        SalesInstance.objects.filter(pk=sales_instance.pk).update(status=SalesInstanceStatus.CLOSED)

        with pytest.raises(ConflictError):
            order_factory(sales_instance, [pizza])

    def test_goods_of_other_business_rejected(self, sales_instance, order_factory, other_business):
        from goods.models import BusinessGood

        foreign = BusinessGood.objects.create(
            business=other_business, name="Tapas", main_category="Food", selling_price=Decimal("5.00")
        )

        with pytest.raises(ValidationError):
            order_factory(sales_instance, [foreign])


@pytest.mark.django_db
class TestCloseOrders:

    def test_surplus_becomes_tips_and_instance_closes(self, sales_instance, order_factory, menu, waiter):
        order, = order_factory(sales_instance, [menu])

        closed = OrderService.close_orders(
            [order.pk], [payment("Cash", "Cash", 30), payment("Card", "Visa", 25)]
        )

        order = closed[0]
        assert order.billing_status == Order.BillingStatus.PAID
        assert order.order_tips == Decimal("5")
        assert sum(p["methodSalesTotal"] for p in order.payment_methods) == Decimal("55")
        sales_instance.refresh_from_db()
        assert sales_instance.status == SalesInstanceStatus.CLOSED
        assert sales_instance.closed_by == waiter

    def test_payments_are_split_in_order(self, sales_instance, order_factory, pizza, bread):
        first, second = order_factory(sales_instance, [pizza], [bread])

        OrderService.close_orders(
            [first.pk, second.pk], [payment("Cash", "Cash", 10), payment("Card", "Visa", 10)]
        )

        first.refresh_from_db()
        second.refresh_from_db()
        first_payments = {p["methodBranch"]: Decimal(p["methodSalesTotal"]) for p in first.payment_methods}
        second_payments = {p["methodBranch"]: Decimal(p["methodSalesTotal"]) for p in second.payment_methods}
        assert first_payments == {"Cash": Decimal("10"), "Visa": Decimal("7")}
        assert second_payments == {"Visa": Decimal("3")}
        assert first.order_tips == Decimal("5")
        assert second.order_tips == Decimal("0")

    def test_underpayment_rejected(self, sales_instance, order_factory, menu):
        order, = order_factory(sales_instance, [menu])

        with pytest.raises(ValidationError):
            OrderService.close_orders([order.pk], [payment("Cash", "Cash", 49.99)])

        order.refresh_from_db()
        assert order.billing_status == Order.BillingStatus.OPEN
        sales_instance.refresh_from_db()
        assert sales_instance.status == SalesInstanceStatus.OCCUPIED

    def test_instance_with_open_orders_stays_open(self, sales_instance, order_factory, pizza, bread):
        first, _second = order_factory(sales_instance, [pizza], [bread])

        OrderService.close_orders([first.pk], [payment("Cash", "Cash", 12)])

        sales_instance.refresh_from_db()
        assert sales_instance.status == SalesInstanceStatus.OCCUPIED

    def test_paid_order_cannot_be_closed_again(self, sales_instance, order_factory, pizza, bread):
        first, _second = order_factory(sales_instance, [pizza], [bread])
        OrderService.close_orders([first.pk], [payment("Cash", "Cash", 12)])

        with pytest.raises(ConflictError):
            OrderService.close_orders([first.pk], [payment("Cash", "Cash", 12)])


@pytest.mark.django_db
class TestCancelOrder:

    def test_cancel_returns_ingredients(self, sales_instance, order_factory, pizza, open_inventory, flour,
                                        inventory_count):
        order, = order_factory(sales_instance, [pizza])

        OrderService.cancel_order(order)

        assert not Order.objects.filter(pk=order.pk).exists()
        assert inventory_count(open_inventory, flour) == Decimal("0")

    def test_cancel_returns_every_unit_of_a_repeated_good(self, sales_instance, order_factory, pizza,
                                                          open_inventory, flour, inventory_count):
        order, = order_factory(sales_instance, [pizza, pizza, pizza])

        OrderService.cancel_order(order)

        assert inventory_count(open_inventory, flour) == Decimal("0")

    @pytest.mark.parametrize("order_status", [Order.OrderStatus.STARTED, Order.OrderStatus.DONE])
    def test_started_or_done_order_cannot_be_cancelled(self, sales_instance, order_factory, pizza, open_inventory,
                                                       flour, inventory_count, order_status):
        order, = order_factory(sales_instance, [pizza])
        Order.objects.filter(pk=order.pk).update(order_status=order_status)

        with pytest.raises(ConflictError):
            OrderService.cancel_order(order)

        assert Order.objects.filter(pk=order.pk).exists()
        assert inventory_count(open_inventory, flour) == Decimal("-0.25")


@pytest.mark.django_db
class TestDiscountsAndStatuses:

    def test_discount_reduces_net(self, sales_instance, order_factory, pizza):
        order, = order_factory(sales_instance, [pizza])

        order, = OrderDiscountService.add_discount([order.pk], Decimal("10"), "Regular customer")

        assert order.order_net_price == Decimal("10.80")
        assert order.discount_percentage == Decimal("10")

    @pytest.mark.parametrize("percentage, comments", [(Decimal("101"), "too much"), (Decimal("-1"), "negative"),
                                                      (Decimal("10"), "")])
    def test_invalid_discount_rejected(self, sales_instance, order_factory, pizza, percentage, comments):
        order, = order_factory(sales_instance, [pizza])

        with pytest.raises(ValidationError):
            OrderDiscountService.add_discount([order.pk], percentage, comments)

    def test_discount_on_promotion_rejected(self, sales_instance, waiter, pizza):
        order, = OrderService.create_orders(
            waiter, sales_instance, [{"business_goods": [pizza], "promotion_applied": "Happy hour"}]
        )

        with pytest.raises(ValidationError):
            OrderDiscountService.add_discount([order.pk], Decimal("10"), "double dip")

    def test_void_sets_net_to_zero(self, sales_instance, order_factory, pizza):
        order, = order_factory(sales_instance, [pizza])

        changed = OrderStatusService.change_billing_status([order.pk], Order.BillingStatus.VOID, "Burnt")

        assert changed[0].order_net_price == Decimal("0.00")
        assert changed[0].billing_status == Order.BillingStatus.VOID

    def test_voiding_last_open_order_closes_instance(self, sales_instance, order_factory, pizza, waiter):
        order, = order_factory(sales_instance, [pizza])

        OrderStatusService.change_billing_status([order.pk], Order.BillingStatus.VOID, "Burnt")

        sales_instance.refresh_from_db()
        assert sales_instance.status == SalesInstanceStatus.CLOSED
        assert sales_instance.closed_by == waiter

    def test_invitation_keeps_instance_with_open_orders(self, sales_instance, order_factory, pizza, bread):
        first, _second = order_factory(sales_instance, [pizza], [bread])

        OrderStatusService.change_billing_status([first.pk], Order.BillingStatus.INVITATION, "Birthday")

        sales_instance.refresh_from_db()
        assert sales_instance.status == SalesInstanceStatus.OCCUPIED

    def test_batch_with_settled_order_is_rejected(self, sales_instance, order_factory, pizza, bread):
        paid, still_open = order_factory(sales_instance, [pizza], [bread])
        OrderService.close_orders([paid.pk], [payment("Cash", "Cash", 12)])

        with pytest.raises(ConflictError):
            OrderStatusService.change_billing_status([paid.pk, still_open.pk], Order.BillingStatus.VOID, "Oops")

        still_open.refresh_from_db()
        assert still_open.billing_status == Order.BillingStatus.OPEN
        assert still_open.order_net_price == Decimal("3.00")

    def test_paid_cannot_be_set_by_hand(self, sales_instance, order_factory, pizza):
        order, = order_factory(sales_instance, [pizza])

        with pytest.raises(ValidationError):
            OrderStatusService.change_billing_status([order.pk], Order.BillingStatus.PAID, "sneaky")

    @pytest.mark.parametrize(
        "current, target, allowed",
        [
            (Order.OrderStatus.SENT, Order.OrderStatus.DONE, True),
            (Order.OrderStatus.HOLD, Order.OrderStatus.DONE, False),
            (Order.OrderStatus.DONE, Order.OrderStatus.SENT, False),
            (Order.OrderStatus.DONE, Order.OrderStatus.DELIVERED, True),
            (Order.OrderStatus.SENT, Order.OrderStatus.DELIVERED, False),
            (Order.OrderStatus.DELIVERED, Order.OrderStatus.DONE, False),
            (Order.OrderStatus.DONT_MAKE, Order.OrderStatus.SENT, False),
            (Order.OrderStatus.STARTED, Order.OrderStatus.HOLD, True),
        ],
    )
    def test_order_status_transitions(self, current, target, allowed):
        assert OrderStatusService.can_change_order_status(current, target) is allowed

    def test_change_order_status_skips_blocked_orders(self, sales_instance, order_factory, pizza, bread):
        first, second = order_factory(sales_instance, [pizza], [bread])
        Order.objects.filter(pk=second.pk).update(order_status=Order.OrderStatus.HOLD)

        changed = OrderStatusService.change_order_status([first.pk, second.pk], Order.OrderStatus.DONE)

        assert [order.pk for order in changed] == [first.pk]
