import uuid
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Subscription(models.TextChoices):
    FREE = "Free", _("Free")
    BASIC = "Basic", _("Basic")
    PREMIUM = "Premium", _("Premium")
    ENTERPRISE = "Enterprise", _("Enterprise")


# Share of the day's gross sales charged by the POS, per subscription tier
POS_COMMISSION_RATES = {
    Subscription.FREE.value: Decimal("0"),
    Subscription.BASIC.value: Decimal("0.05"),
    Subscription.PREMIUM.value: Decimal("0.08"),
    Subscription.ENTERPRISE.value: Decimal("0.10"),
}


class Business(models.Model):
    """
    Root entity of the POS: every other record belongs to one business.

    Legal name, email and tax number are unique across all businesses.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    trade_name = models.CharField(max_length=255)
    legal_name = models.CharField(max_length=255, unique=True)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128, help_text="Hashed with Django's password hasher")
    phone_number = models.CharField(max_length=50)
    tax_number = models.CharField(max_length=100, unique=True)
    currency_trade = models.CharField(max_length=3, default="EUR")
    subscription = models.CharField(
        max_length=20, choices=Subscription.choices, default=Subscription.FREE
    )
    address = models.JSONField(
        default=dict,
        help_text="country, state, city, street, buildingNumber, postCode, region, additionalDetails, coordinates",
    )
    contact_person = models.CharField(max_length=255, blank=True)
    image_url = models.URLField(blank=True)
    metrics = models.JSONField(
        default=dict,
        blank=True,
        help_text="Target cost percentages (food, beverage, labor, fixed) and supplier waste limits",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "businesses"
        ordering = ["trade_name"]
        verbose_name_plural = "businesses"

    def __str__(self):
        return self.trade_name

    @property
    def commission_rate(self) -> Decimal:
        return POS_COMMISSION_RATES.get(self.subscription, Decimal("0"))


class SalesPoint(models.Model):
    """
    A physical or virtual place where sales happen: a table, a bar seat,
    a delivery counter, or a self-ordering QR spot.
    """
    business = models.ForeignKey(Business, on_delete=models.CASCADE, related_name="sales_points")
    sales_point_name = models.CharField(max_length=100)
    sales_point_type = models.CharField(max_length=50, blank=True, help_text="e.g. table, bar, room, delivery")
    self_ordering = models.BooleanField(default=False)
    qr_code = models.URLField(blank=True, help_text="URL of the stored QR code image")
    qr_enabled = models.BooleanField(default=True)
    qr_last_scanned = models.DateTimeField(null=True, blank=True)
    printer = models.ForeignKey(
        "printers.Printer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales_points",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sales_point_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "sales_point_name"],
                name="unique_sales_point_name_per_business",
            ),
        ]

    def __str__(self):
        return f"{self.sales_point_name} ({self.business})"
