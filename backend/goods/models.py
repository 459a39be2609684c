from decimal import Decimal

from django.db import models

from measurements.units import MeasurementUnit
from suppliers.models import MainCategory


class BusinessGood(models.Model):
    """
    A sellable item.

    A good is composed either of ingredients (supplier goods with quantities)
    or of other business goods (a set menu), never both. ``cost_price`` and
    ``allergens`` are derived from the composition by GoodsCostCalculator and
    are not accepted as input.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="business_goods")
    name = models.CharField(max_length=255)
    keyword = models.CharField(max_length=100, blank=True)
    main_category = models.CharField(max_length=20, choices=MainCategory.choices)
    sub_category = models.CharField(max_length=100, blank=True)
    on_menu = models.BooleanField(default=True)
    available = models.BooleanField(default=True)
    selling_price = models.DecimalField(max_digits=12, decimal_places=2)
    cost_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    allergens = models.JSONField(default=list, blank=True)
    description = models.TextField(blank=True)
    delivery_time = models.PositiveIntegerField(null=True, blank=True, help_text="Minutes")
    image_url = models.URLField(blank=True)
    set_menu = models.ManyToManyField(
        "self",
        symmetrical=False,
        blank=True,
        related_name="included_in_set_menus",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["business", "name"], name="unique_business_good_name"),
        ]

    def __str__(self):
        return self.name

    @property
    def is_set_menu(self):
        return self.set_menu.exists()


class BusinessGoodIngredient(models.Model):
    """One supplier good consumed by a business good, in the recipe's own unit."""
    business_good = models.ForeignKey(BusinessGood, on_delete=models.CASCADE, related_name="ingredients")
    supplier_good = models.ForeignKey(
        "suppliers.SupplierGood", on_delete=models.PROTECT, related_name="ingredient_usages"
    )
    measurement_unit = models.CharField(max_length=10, choices=MeasurementUnit.choices)
    required_quantity = models.DecimalField(max_digits=12, decimal_places=4)
    cost_of_required_quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["business_good", "supplier_good"], name="unique_ingredient_per_business_good"
            ),
        ]

    def __str__(self):
        return f"{self.required_quantity} {self.measurement_unit} {self.supplier_good}"
