from collections import Counter
from decimal import Decimal
from django.db import transaction
import logging

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from core_backend.utils.accumulators import payment_accumulator
from inventory.services import Direction, InventoryService
from orders.models import Order, OrderGood
from sales_instances.models import SalesGroup, SalesInstance, SalesInstanceStatus
from .payment_validation import validate_payment_methods

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class OrderService:
    """Core service for order lifecycle management - creating, cancelling and closing orders."""

    # Kitchen states in which an order can no longer be cancelled
    NOT_CANCELLABLE_STATUSES = (
        Order.OrderStatus.STARTED,
        Order.OrderStatus.DONE,
        Order.OrderStatus.DONT_MAKE,
        Order.OrderStatus.STARTED_HOLD,
    )

    @staticmethod
    def _lock_orders(order_ids):
        """Lock and return the orders with ``order_ids``; all of them must exist."""
        order_ids = list(dict.fromkeys(order_ids))
        if not order_ids:
            raise ValidationError("At least one order is required!")
        orders = list(Order.objects.select_for_update().filter(pk__in=order_ids).order_by("created_at", "id"))
        if len(orders) != len(order_ids):
            found = {order.pk for order in orders}
            missing = [str(pk) for pk in order_ids if pk not in found]
            raise NotFoundError(f"Order(s) not found: {', '.join(missing)}")
        return orders

    @staticmethod
    def _add_lines(order, goods):
        """Store ``goods`` on ``order``, one line per distinct good with its quantity."""
        by_id = {good.pk: good for good in goods}
        quantities = Counter(good.pk for good in goods)
        OrderGood.objects.bulk_create(
            OrderGood(order=order, business_good=by_id[pk], quantity=quantity)
            for pk, quantity in quantities.items()
        )

    @staticmethod
    @transaction.atomic
    def create_orders(employee, sales_instance, orders_data, customer=None):
        """
        Create a batch of orders on a sales instance.

        Each entry of ``orders_data`` holds ``business_goods`` (BusinessGood
        instances) and optionally ``promotion_applied`` with a promotion
        ``order_net_price``, ``allergens`` and ``comments``. The batch becomes
        one sales group, and the goods' ingredients are removed from the open
        inventory.

        Raises:
            ConflictError: The sales instance is closed.
            ValidationError: An order has no goods or goods of another business.
            NotFoundError: The business has no open inventory.
        """
        from sales_instances.services import generate_order_code

        if not orders_data:
            raise ValidationError("Orders array is required!")

        sales_instance = SalesInstance.objects.select_for_update().get(pk=sales_instance.pk)
        if sales_instance.is_closed:
            raise ConflictError("SalesInstance is closed!")
        business = sales_instance.business
        if employee is not None and employee.business_id != business.pk:
            raise ValidationError("Employee does not belong to this business!")

        group = SalesGroup.objects.create(sales_instance=sales_instance, order_code=generate_order_code())

        created = []
        consumed_goods = []
        for data in orders_data:
            goods = list(data.get("business_goods") or [])
            if not goods:
                raise ValidationError("Each order needs at least one business good!")
            if any(good.business_id != business.pk for good in goods):
                raise ValidationError("Business goods must belong to the sales instance business!")

            gross = sum((good.selling_price for good in goods), ZERO)
            cost = sum((good.cost_price for good in goods), ZERO)
            promotion = data.get("promotion_applied") or ""
            net = gross
            if promotion and data.get("order_net_price") is not None:
                net = Decimal(data["order_net_price"])

            order = Order.objects.create(
                business=business,
                daily_reference_number=sales_instance.daily_reference_number,
                created_by=employee,
                customer=customer,
                sales_instance=sales_instance,
                sales_group=group,
                order_gross_price=gross,
                order_net_price=net,
                order_cost_price=cost,
                promotion_applied=promotion,
                allergens=data.get("allergens") or [],
                comments=data.get("comments") or "",
            )
            OrderService._add_lines(order, goods)
            created.append(order)
            consumed_goods.extend(goods)

        InventoryService.update_dynamic_count(business, consumed_goods, Direction.REMOVE)

        if sales_instance.status != SalesInstanceStatus.OCCUPIED:
            sales_instance.status = SalesInstanceStatus.OCCUPIED
            sales_instance.save(update_fields=["status", "updated_at"])

        logger.info(
            f"Created {len(created)} order(s) in group {group.order_code} on sales instance {sales_instance.pk}"
        )
        return created

    @staticmethod
    @transaction.atomic
    def cancel_order(order):
        """
        Cancel an order that the kitchen has not started.

        Its ingredients go back to the inventory, it leaves its sales group
        (an emptied group is dropped) and it is deleted.

        Raises:
            ConflictError: The order is started, done or marked dont make, or
                is no longer open.
        """
        order = Order.objects.select_for_update().get(pk=order.pk)
        if order.order_status in OrderService.NOT_CANCELLABLE_STATUSES:
            logger.warning(f"Cancel rejected for order {order.pk} in status {order.order_status}")
            raise ConflictError(f"Order cannot be cancelled because it is {order.order_status}!")
        if not order.is_open:
            raise ConflictError(f"Only open orders can be cancelled, order is {order.billing_status}!")

        goods = order.sold_goods()
        InventoryService.update_dynamic_count(order.business, goods, Direction.ADD)

        group = order.sales_group
        order_id = order.pk
        order.delete()
        if group is not None and not group.orders.exists():
            group.delete()

        logger.info(f"Order {order_id} cancelled and {len(goods)} good(s) returned to inventory")

    @staticmethod
    def allocate_payments(orders, payments):
        """
        Split validated payments across orders.

        Orders are served in sequence; each takes ``min(remaining payment,
        remaining net)`` from the payments in order. What is left over after
        every order is covered is the tip, booked on the first order together
        with the payment entries it came from.

        Returns:
            (allocations, tips) where ``allocations`` holds one payment list
            per order.

        Raises:
            ValidationError: The payments do not cover the orders' net total.
        """
        total_net = sum((order.order_net_price for order in orders), ZERO)
        total_paid = sum((payment["methodSalesTotal"] for payment in payments), ZERO)
        if total_paid < total_net:
            raise ValidationError("Total amount paid is lower than the total price of the orders!")

        remaining = [dict(payment) for payment in payments]
        allocations = []
        for order in orders:
            due = order.order_net_price
            used = payment_accumulator()
            for payment in remaining:
                if due <= 0:
                    break
                amount = min(payment["methodSalesTotal"], due)
                if amount <= 0:
                    continue
                used.add({**payment, "methodSalesTotal": amount})
                payment["methodSalesTotal"] -= amount
                due -= amount
            allocations.append(used)

        tips = total_paid - total_net
        if tips > 0:
            allocations[0].extend(p for p in remaining if p["methodSalesTotal"] > 0)
        return [accumulator.rows() for accumulator in allocations], tips

    @staticmethod
    @transaction.atomic
    def close_orders(order_ids, payments):
        """
        Pay a set of open orders.

        Every order becomes Paid with its share of the payments; the tip is
        assigned to the first order. Sales instances left without open orders
        close automatically.

        Returns:
            The updated orders.
        """
        from sales_instances.services import SalesInstanceService

        payments = validate_payment_methods(payments)
        orders = OrderService._lock_orders(order_ids)
        not_open = [str(order.pk) for order in orders if not order.is_open]
        if not_open:
            raise ConflictError(f"Only open orders can be closed: {', '.join(not_open)}")

        allocations, tips = OrderService.allocate_payments(orders, payments)
        for index, (order, order_payments) in enumerate(zip(orders, allocations)):
            order.payment_methods = order_payments
            order.billing_status = Order.BillingStatus.PAID
            if index == 0:
                order.order_tips = tips
            order.save(update_fields=["payment_methods", "billing_status", "order_tips", "updated_at"])

        for sales_instance_id in dict.fromkeys(order.sales_instance_id for order in orders):
            SalesInstanceService.close_if_settled(sales_instance_id)

        logger.info(f"Closed {len(orders)} order(s), tips {tips}")
        return orders

