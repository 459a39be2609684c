from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Purchase(models.Model):
    """
    A supplier receipt. Each item adds its quantity, in the supplier good's
    measurement unit, to the open inventory.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="purchases")
    supplier = models.ForeignKey("suppliers.Supplier", on_delete=models.PROTECT, related_name="purchases")
    title = models.CharField(max_length=255, blank=True)
    purchase_date = models.DateField(default=timezone.localdate)
    purchased_by = models.ForeignKey(
        "employees.Employee", on_delete=models.SET_NULL, null=True, blank=True, related_name="purchases"
    )
    one_time_purchase = models.BooleanField(default=False)
    receipt_id = models.CharField(max_length=100)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    document_image_url = models.URLField(blank=True)
    comments = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Purchase")
        verbose_name_plural = _("Purchases")
        ordering = ["-purchase_date", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["business", "receipt_id"], name="unique_receipt_per_business"),
        ]

    def __str__(self):
        return f"{self.receipt_id} ({self.supplier})"


class PurchaseItem(models.Model):
    purchase = models.ForeignKey(Purchase, on_delete=models.CASCADE, related_name="items")
    supplier_good = models.ForeignKey(
        "suppliers.SupplierGood", on_delete=models.PROTECT, related_name="purchase_items"
    )
    quantity_purchased = models.DecimalField(
        max_digits=14, decimal_places=4, help_text=_("In the supplier good's measurement unit")
    )
    purchase_price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.supplier_good} x {self.quantity_purchased}"
