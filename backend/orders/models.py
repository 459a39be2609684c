from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils.translation import gettext_lazy as _


class Order(models.Model):
    """
    One or more business goods sold together.

    ``billing_status`` follows the payment lifecycle and ``order_status`` the
    kitchen progress. Paid and Cancel are reached only through closing and
    cancellation, never set directly.
    """

    class BillingStatus(models.TextChoices):
        OPEN = "Open", _("Open")
        PAID = "Paid", _("Paid")
        VOID = "Void", _("Void")
        CANCEL = "Cancel", _("Cancel")
        INVITATION = "Invitation", _("Invitation")

    class OrderStatus(models.TextChoices):
        SENT = "Sent", _("Sent")
        STARTED = "Started", _("Started")
        DONE = "Done", _("Done")
        DELIVERED = "Delivered", _("Delivered")
        DONT_MAKE = "Dont Make", _("Dont Make")
        HOLD = "Hold", _("Hold")
        STARTED_HOLD = "Started Hold", _("Started Hold")

    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="orders")
    daily_reference_number = models.BigIntegerField()
    billing_status = models.CharField(max_length=12, choices=BillingStatus.choices, default=BillingStatus.OPEN)
    order_status = models.CharField(max_length=12, choices=OrderStatus.choices, default=OrderStatus.SENT)

    order_gross_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    order_net_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    order_cost_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    order_tips = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    business_goods = models.ManyToManyField("goods.BusinessGood", through="OrderGood", related_name="orders")
    created_by = models.ForeignKey(
        "employees.Employee", on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )
    customer = models.ForeignKey(
        "customers.Customer", on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )
    sales_instance = models.ForeignKey(
        "sales_instances.SalesInstance", on_delete=models.PROTECT, related_name="orders"
    )
    sales_group = models.ForeignKey(
        "sales_instances.SalesGroup", on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )

    payment_methods = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    allergens = models.JSONField(default=list, blank=True)
    promotion_applied = models.CharField(max_length=150, blank=True)
    discount_percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    comments = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["business", "daily_reference_number"]),
            models.Index(fields=["sales_instance", "billing_status"]),
        ]

    def __str__(self):
        return f"Order {self.pk} ({self.billing_status})"

    @property
    def is_open(self):
        return self.billing_status == self.BillingStatus.OPEN

    def sold_goods(self):
        """Goods of the order, a good repeated once per unit ordered."""
        return [line.business_good for line in self.lines.all() for _ in range(line.quantity)]


class OrderGood(models.Model):
    """A business good on an order and how many units of it were ordered."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="lines")
    business_good = models.ForeignKey("goods.BusinessGood", on_delete=models.PROTECT, related_name="order_lines")
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        verbose_name = _("Order good")
        verbose_name_plural = _("Order goods")
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["order", "business_good"], name="unique_good_per_order"),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.business_good_id} on order {self.order_id}"
