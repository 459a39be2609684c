from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils.translation import gettext_lazy as _


class Inventory(models.Model):
    """
    Monthly inventory of a business.

    Only the latest inventory is open; creating the next month's inventory
    freezes the previous one (``set_final_count``).
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="inventories")
    period = models.DateField(help_text=_("First day of the month this inventory covers."))
    set_final_count = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Inventory")
        verbose_name_plural = _("Inventories")
        ordering = ["-period"]
        constraints = [
            models.UniqueConstraint(fields=["business", "period"], name="unique_inventory_per_month"),
        ]
        indexes = [
            models.Index(fields=["business", "set_final_count"]),
        ]

    def __str__(self):
        return f"Inventory {self.period:%Y-%m} ({self.business_id})"


class InventoryGood(models.Model):
    """System count of one supplier good within an inventory."""
    inventory = models.ForeignKey(Inventory, on_delete=models.CASCADE, related_name="inventory_goods")
    supplier_good = models.ForeignKey(
        "suppliers.SupplierGood", on_delete=models.CASCADE, related_name="inventory_entries"
    )
    dynamic_system_count = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal("0"))
    average_deviation_percent = models.DecimalField(max_digits=10, decimal_places=4, default=Decimal("0"))

    class Meta:
        ordering = ["supplier_good__name"]
        constraints = [
            models.UniqueConstraint(fields=["inventory", "supplier_good"], name="unique_supplier_good_per_inventory"),
        ]

    def __str__(self):
        return f"{self.supplier_good_id} in inventory {self.inventory_id}: {self.dynamic_system_count}"


class InventoryCount(models.Model):
    """A physical count of an inventory good."""
    inventory_good = models.ForeignKey(InventoryGood, on_delete=models.CASCADE, related_name="monthly_counts")
    counted_date = models.DateTimeField()
    current_count_quantity = models.DecimalField(max_digits=14, decimal_places=4)
    system_count_at_count = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        help_text=_("Dynamic system count when the count was taken."),
    )
    quantity_needed = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal("0"))
    counted_by = models.ForeignKey(
        "employees.Employee", on_delete=models.SET_NULL, null=True, blank=True, related_name="inventory_counts"
    )
    deviation_percent = models.DecimalField(max_digits=10, decimal_places=4, default=Decimal("0"))
    comments = models.TextField(blank=True)
    reedited = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)

    class Meta:
        ordering = ["-counted_date", "-id"]

    def __str__(self):
        return f"Count {self.current_count_quantity} on {self.counted_date:%Y-%m-%d}"
