"""
Orders serializers package.
"""

from .order_serializers import (
    OrderSerializer,
    OrderInputSerializer,
    OrderCreateSerializer,
    CloseOrdersSerializer,
)
from .discount_serializers import AddDiscountSerializer
from .status_serializers import ChangeBillingStatusSerializer, ChangeOrderStatusSerializer

__all__ = [
    # Orders
    'OrderSerializer',
    'OrderInputSerializer',
    'OrderCreateSerializer',
    'CloseOrdersSerializer',
    # Discounts
    'AddDiscountSerializer',
    # Status
    'ChangeBillingStatusSerializer',
    'ChangeOrderStatusSerializer',
]
