from decimal import Decimal, ROUND_HALF_UP
from django.db import transaction
import logging

from core_backend.exceptions import ConflictError, ValidationError
from core_backend.utils.accumulators import to_decimal
from orders.models import Order

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


class OrderDiscountService:
    """Service for applying manual percentage discounts to orders."""

    @staticmethod
    def discounted_net(gross, percentage):
        return (gross - gross * percentage / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)

    @staticmethod
    @transaction.atomic
    def add_discount(order_ids, percentage, comments):
        """
        Apply a percentage discount to a set of orders.

        The net price of every order becomes its gross price reduced by
        ``percentage``. Orders carrying a promotion cannot be discounted.

        Raises:
            ValidationError: Missing comments, a percentage outside 0-100, or
                an order with a promotion applied.
            ConflictError: An order is no longer open.
        """
        from .order_service import OrderService

        if percentage in (None, ""):
            raise ValidationError("Discount percentage is required!")
        try:
            percentage = to_decimal(percentage)
        except (ArithmeticError, TypeError, ValueError):
            raise ValidationError("Discount percentage must be a number!")
        if not percentage.is_finite() or percentage < 0 or percentage > HUNDRED:
            raise ValidationError("Discount percentage must be between 0 and 100!")
        if not comments:
            raise ValidationError("Comments are required for a discount!")

        orders = OrderService._lock_orders(order_ids)
        promoted = [str(order.pk) for order in orders if order.promotion_applied]
        if promoted:
            raise ValidationError(f"Cannot apply discount to orders with a promotion: {', '.join(promoted)}")
        not_open = [str(order.pk) for order in orders if not order.is_open]
        if not_open:
            raise ConflictError(f"Only open orders can be discounted: {', '.join(not_open)}")

        for order in orders:
            order.order_net_price = OrderDiscountService.discounted_net(order.order_gross_price, percentage)
            order.discount_percentage = percentage
            order.comments = comments
            order.save(update_fields=["order_net_price", "discount_percentage", "comments", "updated_at"])

        logger.info(f"Applied {percentage}% discount to {len(orders)} order(s)")
        return orders
