from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from measurements.units import MeasurementUnit


class MainCategory(models.TextChoices):
    FOOD = "Food", _("Food")
    SET_MENU = "Set Menu", _("Set Menu")
    BEVERAGE = "Beverage", _("Beverage")
    MERCHANDISE = "Merchandise", _("Merchandise")
    CLEANING = "Cleaning", _("Cleaning")
    OFFICE = "Office", _("Office")
    FURNITURE = "Furniture", _("Furniture")
    DISPOSABLE = "Disposable", _("Disposable")
    SERVICES = "Services", _("Services")
    EQUIPMENT = "Equipment", _("Equipment")
    OTHER = "Other", _("Other")


class Allergen(models.TextChoices):
    GLUTEN = "Gluten", _("Gluten")
    CRUSTACEANS = "Crustaceans", _("Crustaceans")
    EGGS = "Eggs", _("Eggs")
    FISH = "Fish", _("Fish")
    PEANUTS = "Peanuts", _("Peanuts")
    SOYBEANS = "Soybeans", _("Soybeans")
    MILK = "Milk", _("Milk")
    NUTS = "Nuts", _("Nuts")
    CELERY = "Celery", _("Celery")
    MUSTARD = "Mustard", _("Mustard")
    SESAME = "Sesame", _("Sesame")
    SULPHUR_DIOXIDE = "Sulphur dioxide", _("Sulphur dioxide")
    LUPIN = "Lupin", _("Lupin")
    MOLLUSCS = "Molluscs", _("Molluscs")


class BudgetImpact(models.TextChoices):
    VERY_LOW = "Very Low", _("Very Low")
    LOW = "Low", _("Low")
    MEDIUM = "Medium", _("Medium")
    HIGH = "High", _("High")
    VERY_HIGH = "Very High", _("Very High")


class InventorySchedule(models.TextChoices):
    DAILY = "daily", _("Daily")
    WEEKLY = "weekly", _("Weekly")
    MONTHLY = "monthly", _("Monthly")


ONE_TIME_PURCHASE_SUPPLIER = "One Time Purchase"


class Supplier(models.Model):
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="suppliers")
    trade_name = models.CharField(max_length=255)
    legal_name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone_number = models.CharField(max_length=50, blank=True)
    tax_number = models.CharField(max_length=100, blank=True)
    currently_in_use = models.BooleanField(default=True)
    address = models.JSONField(default=dict, blank=True)
    contact_person = models.CharField(max_length=255, blank=True)
    image_url = models.URLField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["trade_name"]
        constraints = [
            models.UniqueConstraint(fields=["business", "legal_name"], name="unique_supplier_legal_name_per_business"),
        ]

    def __str__(self):
        return self.trade_name

    @property
    def is_one_time_purchase(self):
        return self.trade_name == ONE_TIME_PURCHASE_SUPPLIER


class SupplierGood(models.Model):
    """
    A good bought from a supplier, priced per measurement unit.
    Business goods consume supplier goods as ingredients.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="supplier_goods")
    supplier = models.ForeignKey(Supplier, on_delete=models.CASCADE, related_name="goods")
    name = models.CharField(max_length=255)
    keyword = models.CharField(max_length=100, blank=True)
    main_category = models.CharField(max_length=20, choices=MainCategory.choices)
    sub_category = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    currently_in_use = models.BooleanField(default=True)
    allergens = models.JSONField(default=list, blank=True)
    budget_impact = models.CharField(max_length=10, choices=BudgetImpact.choices, default=BudgetImpact.MEDIUM)
    inventory_schedule = models.CharField(
        max_length=10, choices=InventorySchedule.choices, default=InventorySchedule.MONTHLY
    )
    measurement_unit = models.CharField(max_length=10, choices=MeasurementUnit.choices)
    price_per_measurement_unit = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal("0"))
    par_level = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal("0"))
    minimum_quantity_required = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal("0"))
    image_url = models.URLField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["business", "supplier", "name"], name="unique_supplier_good_name"),
        ]

    def __str__(self):
        return f"{self.name} ({self.measurement_unit})"
