"""
Orders services package.

- OrderService: order lifecycle (create, cancel, close with payments)
- OrderDiscountService: manual percentage discounts
- OrderStatusService: billing (Void/Invitation) and kitchen status changes
- validate_payment_methods: payment entry validation used when closing orders
"""

from .order_service import OrderService
from .discount_service import OrderDiscountService
from .status_service import OrderStatusService
from .payment_validation import validate_payment_methods

__all__ = [
    'OrderService',
    'OrderDiscountService',
    'OrderStatusService',
    'validate_payment_methods',
]
