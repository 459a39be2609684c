"""
Measurement units - shared reference data.

Units are canonical: a gram is a gram for every business. Each unit belongs
to a family (weight, volume, count) and carries its size in the family's base
unit (grams, milliliters, units). Volume sizes are US customary measures.
"""
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class UnitCategory(models.TextChoices):
    """Categories for measurement units."""
    WEIGHT = "weight", _("Weight")
    VOLUME = "volume", _("Volume")
    COUNT = "count", _("Count")


class MeasurementUnit(models.TextChoices):
    UNIT = "unit", _("Unit")
    MILLIGRAM = "mg", _("Milligram")
    GRAM = "g", _("Gram")
    KILOGRAM = "kg", _("Kilogram")
    OUNCE = "oz", _("Ounce")
    POUND = "lb", _("Pound")
    MILLILITER = "ml", _("Milliliter")
    LITER = "l", _("Liter")
    KILOLITER = "kl", _("Kiloliter")
    TEASPOON = "tsp", _("Teaspoon")
    TABLESPOON = "Tbs", _("Tablespoon")
    FLUID_OUNCE = "fl-oz", _("Fluid ounce")
    CUP = "cup", _("Cup")
    PINT = "pnt", _("Pint")
    QUART = "qt", _("Quart")
    GALLON = "gal", _("Gallon")


# unit -> (category, size in the category's base unit)
_UNIT_SIZES = {
    MeasurementUnit.UNIT: (UnitCategory.COUNT, Decimal("1")),
    # Weight, base gram
    MeasurementUnit.MILLIGRAM: (UnitCategory.WEIGHT, Decimal("0.001")),
    MeasurementUnit.GRAM: (UnitCategory.WEIGHT, Decimal("1")),
    MeasurementUnit.KILOGRAM: (UnitCategory.WEIGHT, Decimal("1000")),
    MeasurementUnit.OUNCE: (UnitCategory.WEIGHT, Decimal("28.349523125")),
    MeasurementUnit.POUND: (UnitCategory.WEIGHT, Decimal("453.59237")),
    # Volume, base milliliter
    MeasurementUnit.MILLILITER: (UnitCategory.VOLUME, Decimal("1")),
    MeasurementUnit.LITER: (UnitCategory.VOLUME, Decimal("1000")),
    MeasurementUnit.KILOLITER: (UnitCategory.VOLUME, Decimal("1000000")),
    MeasurementUnit.TEASPOON: (UnitCategory.VOLUME, Decimal("4.92892159375")),
    MeasurementUnit.TABLESPOON: (UnitCategory.VOLUME, Decimal("14.78676478125")),
    MeasurementUnit.FLUID_OUNCE: (UnitCategory.VOLUME, Decimal("29.5735295625")),
    MeasurementUnit.CUP: (UnitCategory.VOLUME, Decimal("236.5882365")),
    MeasurementUnit.PINT: (UnitCategory.VOLUME, Decimal("473.176473")),
    MeasurementUnit.QUART: (UnitCategory.VOLUME, Decimal("946.352946")),
    MeasurementUnit.GALLON: (UnitCategory.VOLUME, Decimal("3785.411784")),
}


# Keyed by plain string code
UNIT_TABLE = {unit.value: entry for unit, entry in _UNIT_SIZES.items()}


# Common spellings clients send, mapped to canonical codes
UNIT_STRING_MAPPINGS = {
    "units": "unit",
    "each": "unit",
    "gram": "g",
    "grams": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "ounce": "oz",
    "ounces": "oz",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
    "liter": "l",
    "litre": "l",
    "liters": "l",
    "milliliter": "ml",
    "tbsp": "Tbs",
    "tbs": "Tbs",
    "fl_oz": "fl-oz",
    "fl oz": "fl-oz",
    "cups": "cup",
    "pint": "pnt",
    "gallon": "gal",
}
