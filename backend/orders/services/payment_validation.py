"""
Validation of tendered payments.

A payment is ``{"paymentMethodType", "methodBranch", "methodSalesTotal"}``.
The branch must belong to the method type and the amount must be a
non-negative number.
"""
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Tuple

from core_backend.exceptions import ValidationError

PAYMENT_METHOD_BRANCHES: Dict[str, Tuple[str, ...]] = {
    "Cash": ("Cash",),
    "Card": ("Visa", "MasterCard", "Dinners", "American Express", "Others"),
    "Crypto": ("Bitcoin", "Ethereum"),
    "Other": ("Voucher", "Paypal", "Bank Transfer", "Others"),
}

REQUIRED_PAYMENT_FIELDS = ("paymentMethodType", "methodBranch", "methodSalesTotal")


def _to_amount(value):
    # bool is an int subclass, it is not an amount
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationError(f"Invalid sales total: {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid sales total: {value!r}")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Invalid sales total: {value!r}")
    return amount


def validate_payment_methods(payments) -> List[dict]:
    """
    Validate a list of payments.

    Returns:
        A new list of payments with ``methodSalesTotal`` as Decimal.

    Raises:
        ValidationError: With a message naming the first invalid entry.
    """
    if not isinstance(payments, (list, tuple)) or not payments:
        raise ValidationError("Invalid payment method array!")

    validated = []
    for payment in payments:
        if not isinstance(payment, dict) or any(
            payment.get(field) in (None, "") for field in REQUIRED_PAYMENT_FIELDS
        ):
            raise ValidationError("Payment is missing method type, branch, or sales total!")

        method_type = payment["paymentMethodType"]
        branch = payment["methodBranch"]
        if method_type not in PAYMENT_METHOD_BRANCHES:
            raise ValidationError(f"Invalid payment method type: {method_type}")
        if branch not in PAYMENT_METHOD_BRANCHES[method_type]:
            raise ValidationError(f"Invalid {method_type.lower()} branch: {branch}")

        validated.append({
            "paymentMethodType": method_type,
            "methodBranch": branch,
            "methodSalesTotal": _to_amount(payment["methodSalesTotal"]),
        })
    return validated
