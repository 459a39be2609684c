"""
Composition of a business good: ingredients or a set menu, never both.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Tuple, Union

from core_backend.exceptions import ValidationError


@dataclass(frozen=True)
class IngredientLine:
    supplier_good_id: int
    measurement_unit: str
    required_quantity: Decimal


@dataclass(frozen=True)
class Ingredients:
    lines: Tuple[IngredientLine, ...]


@dataclass(frozen=True)
class SetMenu:
    member_ids: Tuple[int, ...]


Composition = Union[Ingredients, SetMenu]


def _pk(value):
    return getattr(value, "pk", value)


def parse_ingredient_lines(entries):
    """
    Validate raw ingredient entries.

    Each entry needs a supplier good, a measurement unit and a positive
    required quantity.
    """
    if not isinstance(entries, (list, tuple)) or not entries:
        raise ValidationError("Ingredients must be a non-empty array!")

    lines = []
    seen = set()
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError("Each ingredient must be an object!")
        supplier_good = entry.get("supplier_good")
        unit = entry.get("measurement_unit")
        quantity = entry.get("required_quantity")
        if supplier_good in (None, "") or not unit or quantity in (None, ""):
            raise ValidationError(
                "Ingredient supplier_good, measurement_unit and required_quantity are required!"
            )
        try:
            quantity = Decimal(str(quantity))
        except InvalidOperation:
            raise ValidationError(f"Invalid required_quantity: {quantity}")
        if quantity <= 0:
            raise ValidationError("Ingredient required_quantity must be greater than 0!")
        supplier_good_id = _pk(supplier_good)
        if supplier_good_id in seen:
            raise ValidationError("Duplicate supplier good in ingredients!")
        seen.add(supplier_good_id)
        lines.append(IngredientLine(supplier_good_id, str(unit), quantity))
    return Ingredients(tuple(lines))


def parse_composition(ingredients=None, set_menu=None) -> Composition:
    """
    Build a Composition from request data.

    Raises:
        ValidationError: If both or neither of ingredients and set menu are
            supplied.
    """
    has_ingredients = bool(ingredients)
    has_set_menu = bool(set_menu)

    if has_ingredients and has_set_menu:
        raise ValidationError("Only one of ingredients or setMenu can be assigned!")
    if not has_ingredients and not has_set_menu:
        raise ValidationError("One of ingredients or setMenu must be assigned!")

    if has_ingredients:
        return parse_ingredient_lines(ingredients)

    member_ids = tuple(dict.fromkeys(_pk(member) for member in set_menu))
    return SetMenu(member_ids)
