import pytest
from decimal import Decimal

from core_backend.exceptions import ValidationError
from orders.services import validate_payment_methods


class TestValidatePaymentMethods:

    def test_amounts_become_decimal(self):
        payments = validate_payment_methods([
            {"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": 30},
            {"paymentMethodType": "Card", "methodBranch": "Visa", "methodSalesTotal": 25.5},
        ])

        assert [p["methodSalesTotal"] for p in payments] == [Decimal("30"), Decimal("25.5")]

    @pytest.mark.parametrize(
        "payments",
        [
            [],
            None,
            [{"paymentMethodType": "Cash", "methodBranch": "Cash"}],
            [{"paymentMethodType": "Cheque", "methodBranch": "Cash", "methodSalesTotal": 10}],
            [{"paymentMethodType": "Card", "methodBranch": "Bitcoin", "methodSalesTotal": 10}],
            [{"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": -1}],
            [{"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": "10"}],
            [{"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": True}],
        ],
    )
    def test_invalid_payments_rejected(self, payments):
        with pytest.raises(ValidationError):
            validate_payment_methods(payments)
