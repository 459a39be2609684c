"""
Merge-by-key accumulation used by the sales aggregators.

Daily reports merge payments by (type, branch) and goods by business-good id;
monthly reports merge the same lists again across days. All of them go
through ``KeyedAccumulator`` so the reduction rules live in one place.
"""
from decimal import Decimal


def to_decimal(value) -> Decimal:
    """Coerce JSON-stored numbers (str, int, float, Decimal, None) to Decimal."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class KeyedAccumulator:
    """
    Accumulates dict rows, summing numeric fields of rows that share a key.

    Args:
        key_fields: names of the fields that identify a row
        sum_fields: names of the fields summed when rows share a key

    Rows come out in first-seen key order, with summed fields as Decimal.

    Example:
        payments = KeyedAccumulator(
            key_fields=("paymentMethodType", "methodBranch"),
            sum_fields=("methodSalesTotal",),
        )
        payments.add({"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": 10})
        payments.add({"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": 5})
        payments.rows()  # [{"paymentMethodType": "Cash", "methodBranch": "Cash", "methodSalesTotal": Decimal("15")}]
    """

    def __init__(self, key_fields, sum_fields):
        self.key_fields = tuple(key_fields)
        self.sum_fields = tuple(sum_fields)
        self._rows = {}

    def key_for(self, row):
        return tuple(str(row[field]) for field in self.key_fields)

    def add(self, row):
        key = self.key_for(row)
        current = self._rows.get(key)
        if current is None:
            current = {field: row[field] for field in self.key_fields}
            for field in self.sum_fields:
                current[field] = Decimal("0")
            self._rows[key] = current
        for field in self.sum_fields:
            current[field] += to_decimal(row.get(field))
        return current

    def extend(self, rows):
        for row in rows or ():
            self.add(row)
        return self

    def rows(self):
        return [dict(row) for row in self._rows.values()]

    def total(self, field) -> Decimal:
        return sum((row[field] for row in self._rows.values()), Decimal("0"))

    def __len__(self):
        return len(self._rows)


def payment_accumulator():
    """Payments keyed by (type, branch), summing the tendered amount."""
    return KeyedAccumulator(
        key_fields=("paymentMethodType", "methodBranch"),
        sum_fields=("methodSalesTotal",),
    )


def goods_accumulator():
    """Goods keyed by business-good id, summing quantity, price and cost."""
    return KeyedAccumulator(
        key_fields=("businessGoodId",),
        sum_fields=("quantity", "totalPrice", "totalCostPrice"),
    )
