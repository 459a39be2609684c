from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class SalesInstanceStatus(models.TextChoices):
    OCCUPIED = "Occupied", _("Occupied")
    RESERVED = "Reserved", _("Reserved")
    CLOSED = "Closed", _("Closed")


class SalesInstance(models.Model):
    """
    One visit at a sales point (a table, the bar, a self-ordering QR) within
    a business day. Orders hang off it in sales groups.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="sales_instances")
    daily_reference_number = models.BigIntegerField(
        help_text=_("Business day this instance belongs to (epoch ms of the daily report).")
    )
    sales_point = models.ForeignKey(
        "business.SalesPoint", on_delete=models.SET_NULL, null=True, blank=True, related_name="sales_instances"
    )
    guests = models.PositiveIntegerField(default=1)
    status = models.CharField(
        max_length=10, choices=SalesInstanceStatus.choices, default=SalesInstanceStatus.OCCUPIED
    )
    opened_by = models.ForeignKey(
        "employees.Employee", on_delete=models.SET_NULL, null=True, blank=True, related_name="opened_sales_instances"
    )
    opened_by_customer = models.ForeignKey(
        "customers.Customer", on_delete=models.SET_NULL, null=True, blank=True, related_name="sales_instances"
    )
    responsible_by = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="responsible_sales_instances",
    )
    closed_by = models.ForeignKey(
        "employees.Employee", on_delete=models.SET_NULL, null=True, blank=True, related_name="closed_sales_instances"
    )
    closed_at = models.DateTimeField(null=True, blank=True)
    client_name = models.CharField(max_length=150, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["business", "daily_reference_number"]),
            models.Index(fields=["responsible_by", "daily_reference_number"]),
            models.Index(fields=["sales_point", "status"]),
        ]

    def __str__(self):
        return f"{self.sales_point or 'Sales instance'} ({self.status})"

    @property
    def is_closed(self):
        return self.status == SalesInstanceStatus.CLOSED


class SalesGroup(models.Model):
    """A batch of orders sent together, identified by its order code."""
    sales_instance = models.ForeignKey(SalesInstance, on_delete=models.CASCADE, related_name="sales_groups")
    order_code = models.CharField(max_length=20)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["sales_instance", "order_code"], name="unique_order_code_per_instance"),
        ]

    def __str__(self):
        return self.order_code
