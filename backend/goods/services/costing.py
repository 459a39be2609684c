"""
Cost and allergen calculation for business goods.

Ingredient goods cost the sum of their ingredient lines, each priced in the
supplier good's own unit (converting the recipe quantity when units differ).
Set menus cost the sum of their members' cost prices. Allergens are the
deduplicated union of everything a good is made of.

Set menus may contain other set menus. Expansion and cost resolution walk
that tree and reject cycles instead of recursing forever.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Set

from core_backend.exceptions import NotFoundError, ValidationError
from measurements.conversion import ConversionService
from suppliers.models import SupplierGood
from goods.composition import Ingredients, SetMenu
from goods.models import BusinessGood

CENTS = Decimal("0.01")


class CyclicSetMenuError(ValidationError):
    """Raised when a set menu directly or transitively contains itself."""
    pass


def round_money(value) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass
class IngredientCostResult:
    """Result of costing a single ingredient line."""
    supplier_good_id: int
    supplier_good_name: str
    measurement_unit: str
    required_quantity: Decimal
    quantity_in_supplier_unit: Decimal
    supplier_unit: str
    cost_of_required_quantity: Decimal


@dataclass
class GoodCostBreakdown:
    """Derived cost price and allergens of a composition."""
    cost_price: Decimal
    allergens: List[str] = field(default_factory=list)
    ingredients: List[IngredientCostResult] = field(default_factory=list)


@dataclass(frozen=True)
class ConsumedQuantity:
    """Quantity of a supplier good consumed by selling one unit of a good."""
    supplier_good_id: int
    measurement_unit: str
    quantity: Decimal


def _union_allergens(*allergen_lists):
    merged = OrderedDict()
    for allergens in allergen_lists:
        for allergen in allergens or []:
            merged[allergen] = True
    return list(merged)


class GoodsCostCalculator:
    """
    Computes the derived fields of a business good from its composition.

    Usage:
        breakdown = GoodsCostCalculator.calculate(business, composition)
        good.cost_price = breakdown.cost_price
        good.allergens = breakdown.allergens
    """

    @staticmethod
    def calculate(business, composition, good=None) -> GoodCostBreakdown:
        if isinstance(composition, Ingredients):
            return GoodsCostCalculator.calculate_ingredients(business, composition)
        if isinstance(composition, SetMenu):
            return GoodsCostCalculator.calculate_set_menu(business, composition, good=good)
        raise ValidationError(f"Unsupported composition: {composition!r}")

    @staticmethod
    def calculate_ingredients(business, composition: Ingredients) -> GoodCostBreakdown:
        ids = [line.supplier_good_id for line in composition.lines]
        supplier_goods = SupplierGood.objects.filter(business=business, pk__in=ids).in_bulk()

        missing = [str(pk) for pk in ids if int(pk) not in supplier_goods]
        if missing:
            raise NotFoundError(f"Supplier good(s) not found: {', '.join(missing)}")

        results = []
        for line in composition.lines:
            supplier_good = supplier_goods[int(line.supplier_good_id)]
            unit = ConversionService.normalize_unit(line.measurement_unit)
            quantity = line.required_quantity
            if unit != supplier_good.measurement_unit:
                quantity = ConversionService.convert(quantity, unit, supplier_good.measurement_unit)
            results.append(
                IngredientCostResult(
                    supplier_good_id=supplier_good.pk,
                    supplier_good_name=supplier_good.name,
                    measurement_unit=unit,
                    required_quantity=line.required_quantity,
                    quantity_in_supplier_unit=quantity,
                    supplier_unit=supplier_good.measurement_unit,
                    cost_of_required_quantity=round_money(
                        quantity * supplier_good.price_per_measurement_unit
                    ),
                )
            )

        return GoodCostBreakdown(
            cost_price=sum((r.cost_of_required_quantity for r in results), Decimal("0")),
            allergens=_union_allergens(*(supplier_goods[int(pk)].allergens for pk in ids)),
            ingredients=results,
        )

    @staticmethod
    def calculate_set_menu(business, composition: SetMenu, good=None) -> GoodCostBreakdown:
        members = BusinessGood.objects.filter(business=business, pk__in=composition.member_ids).in_bulk()

        missing = [str(pk) for pk in composition.member_ids if int(pk) not in members]
        if missing:
            raise NotFoundError(f"Business good(s) not found for set menu: {', '.join(missing)}")

        if good is not None and good.pk is not None:
            GoodsCostCalculator.assert_no_cycle(good.pk, composition.member_ids)

        ordered = [members[int(pk)] for pk in composition.member_ids]
        return GoodsCostCalculator.breakdown_from_members(ordered)

    @staticmethod
    def breakdown_from_members(members) -> GoodCostBreakdown:
        return GoodCostBreakdown(
            cost_price=sum((member.cost_price for member in members), Decimal("0")),
            allergens=_union_allergens(*(member.allergens for member in members)),
        )

    @staticmethod
    def assert_no_cycle(good_id, member_ids):
        """
        Reject a set menu whose members (transitively) include ``good_id``.

        Raises:
            CyclicSetMenuError: If ``good_id`` is reachable from ``member_ids``.
        """
        frontier = [int(pk) for pk in member_ids]
        seen: Set[int] = set()
        while frontier:
            current = frontier.pop()
            if current == int(good_id):
                raise CyclicSetMenuError(
                    f"Set menu cannot contain itself (business good {good_id})"
                )
            if current in seen:
                continue
            seen.add(current)
            frontier.extend(
                BusinessGood.set_menu.through.objects.filter(from_businessgood_id=current)
                .values_list("to_businessgood_id", flat=True)
            )


class IngredientExpander:
    """
    Flattens business goods into the supplier-good quantities they consume.

    Set menus are expanded through their members, recursively.
    """

    @staticmethod
    def expand(goods, _visited: Optional[Set[int]] = None) -> List[ConsumedQuantity]:
        """
        Expand business goods (instances, repeated once per unit sold) into a
        flat list of consumed supplier-good quantities.

        Raises:
            CyclicSetMenuError: If a set menu contains itself.
        """
        consumed = []
        for good in goods:
            consumed.extend(IngredientExpander._expand_one(good, _visited or set()))
        return consumed

    @staticmethod
    def _expand_one(good, visited) -> List[ConsumedQuantity]:
        if good.pk in visited:
            raise CyclicSetMenuError(
                f"Cyclic set menu detected: business good {good.name} (ID: {good.pk})"
            )
        visited = visited | {good.pk}  # New set so sibling branches stay independent

        members = list(good.set_menu.all())
        if members:
            consumed = []
            for member in members:
                consumed.extend(IngredientExpander._expand_one(member, visited))
            return consumed

        return [
            ConsumedQuantity(
                supplier_good_id=ingredient.supplier_good_id,
                measurement_unit=ingredient.measurement_unit,
                quantity=ingredient.required_quantity,
            )
            for ingredient in good.ingredients.all()
        ]

    @staticmethod
    def totals_by_supplier_good(goods) -> Dict[int, Decimal]:
        """
        Sum consumed quantities per supplier good, in each supplier good's
        own measurement unit.
        """
        consumed = IngredientExpander.expand(goods)
        if not consumed:
            return {}

        supplier_goods = SupplierGood.objects.filter(
            pk__in={item.supplier_good_id for item in consumed}
        ).in_bulk()

        totals: Dict[int, Decimal] = OrderedDict()
        for item in consumed:
            supplier_good = supplier_goods[item.supplier_good_id]
            quantity = item.quantity
            if item.measurement_unit != supplier_good.measurement_unit:
                quantity = ConversionService.convert(
                    quantity, item.measurement_unit, supplier_good.measurement_unit
                )
            totals[item.supplier_good_id] = totals.get(item.supplier_good_id, Decimal("0")) + quantity
        return totals
