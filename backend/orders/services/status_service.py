from decimal import Decimal
from django.db import transaction
import logging

from core_backend.exceptions import ConflictError, ValidationError
from orders.models import Order

logger = logging.getLogger(__name__)

BillingStatus = Order.BillingStatus
OrderStatus = Order.OrderStatus


class OrderStatusService:
    """
    Billing and kitchen status changes for batches of orders.

    Billing changes only apply to open orders and reject the whole batch
    otherwise. Kitchen changes follow ``BLOCKED_ORDER_TRANSITIONS``; orders
    that cannot move are left untouched.
    """

    # Only these billing statuses may be set by hand; Paid comes from closing
    # orders and Cancel from cancelling them.
    MANUAL_BILLING_STATUSES = (BillingStatus.VOID, BillingStatus.INVITATION)

    # target status -> current statuses that cannot move to it
    BLOCKED_ORDER_TRANSITIONS = {
        OrderStatus.DONE: {OrderStatus.DONE, OrderStatus.HOLD},
        OrderStatus.SENT: {OrderStatus.DONE, OrderStatus.SENT},
        OrderStatus.DELIVERED: {OrderStatus.SENT, OrderStatus.HOLD},
    }

    @staticmethod
    @transaction.atomic
    def change_billing_status(order_ids, billing_status, comments):
        """
        Mark open orders as Void or Invitation. Their net price drops to zero
        and sales instances left without open orders close.

        Returns:
            The orders that changed.

        Raises:
            ConflictError: Any of the orders is not open.
        """
        from sales_instances.services import SalesInstanceService
        from .order_service import OrderService

        if billing_status not in OrderStatusService.MANUAL_BILLING_STATUSES:
            raise ValidationError("Billing status can only be changed to Void or Invitation!")
        if not comments:
            raise ValidationError("Comments are required to change the billing status!")

        orders = OrderService._lock_orders(order_ids)
        not_open = [str(order.pk) for order in orders if not order.is_open]
        if not_open:
            raise ConflictError(
                f"Only open orders can have the billing status changed manually: {', '.join(not_open)}"
            )

        changed = []
        for order in orders:
            order.billing_status = billing_status
            order.order_net_price = Decimal("0.00")
            order.comments = comments
            order.save(update_fields=["billing_status", "order_net_price", "comments", "updated_at"])
            changed.append(order)

        for sales_instance_id in dict.fromkeys(order.sales_instance_id for order in changed):
            SalesInstanceService.close_if_settled(sales_instance_id)

        logger.info(f"Billing status {billing_status} set on {len(changed)} order(s)")
        return changed

    @staticmethod
    def can_change_order_status(current, target):
        if current in (OrderStatus.DONT_MAKE, OrderStatus.DELIVERED):
            return False
        return current not in OrderStatusService.BLOCKED_ORDER_TRANSITIONS.get(target, ())

    @staticmethod
    @transaction.atomic
    def change_order_status(order_ids, order_status):
        """
        Move orders to a new kitchen status.

        Returns:
            The orders that changed.
        """
        from .order_service import OrderService

        if order_status not in OrderStatus.values:
            raise ValidationError(f"Invalid order status: {order_status}")

        changed = []
        for order in OrderService._lock_orders(order_ids):
            if not OrderStatusService.can_change_order_status(order.order_status, order_status):
                logger.debug(f"Order {order.pk} stays {order.order_status}, cannot become {order_status}")
                continue
            order.order_status = order_status
            order.save(update_fields=["order_status", "updated_at"])
            changed.append(order)

        logger.info(f"Order status {order_status} set on {len(changed)} order(s)")
        return changed
