import logging

from django.db import transaction

from core_backend.exceptions import ConflictError
from goods.composition import Ingredients, SetMenu, parse_composition
from goods.models import BusinessGood, BusinessGoodIngredient
from .costing import GoodsCostCalculator

logger = logging.getLogger(__name__)


class BusinessGoodService:
    """
    Creates and updates business goods, keeping their derived cost price and
    allergens consistent with their composition.
    """

    @staticmethod
    def _apply_composition(good, composition):
        """Persist ``composition`` on ``good`` and refresh its derived fields."""
        breakdown = GoodsCostCalculator.calculate(good.business, composition, good=good)

        good.ingredients.all().delete()
        if isinstance(composition, Ingredients):
            good.set_menu.clear()
            BusinessGoodIngredient.objects.bulk_create(
                [
                    BusinessGoodIngredient(
                        business_good=good,
                        supplier_good_id=line.supplier_good_id,
                        measurement_unit=line.measurement_unit,
                        required_quantity=line.required_quantity,
                        cost_of_required_quantity=line.cost_of_required_quantity,
                    )
                    for line in breakdown.ingredients
                ]
            )
        elif isinstance(composition, SetMenu):
            good.set_menu.set(composition.member_ids)

        good.cost_price = breakdown.cost_price
        good.allergens = breakdown.allergens
        good.save(update_fields=["cost_price", "allergens", "updated_at"])

    @staticmethod
    def refresh_dependent_set_menus(good, _visited=None):
        """Recompute every set menu that (transitively) includes ``good``."""
        _visited = _visited or set()
        for parent in good.included_in_set_menus.all():
            if parent.pk in _visited:
                continue
            _visited.add(parent.pk)
            breakdown = GoodsCostCalculator.breakdown_from_members(list(parent.set_menu.all()))
            parent.cost_price = breakdown.cost_price
            parent.allergens = breakdown.allergens
            parent.save(update_fields=["cost_price", "allergens", "updated_at"])
            BusinessGoodService.refresh_dependent_set_menus(parent, _visited)

    @staticmethod
    @transaction.atomic
    def create_business_good(data, ingredients=None, set_menu=None):
        """
        Create a business good. Exactly one of ``ingredients`` and
        ``set_menu`` must be given.
        """
        composition = parse_composition(ingredients=ingredients, set_menu=set_menu)

        if BusinessGood.objects.filter(business=data["business"], name=data["name"]).exists():
            raise ConflictError(f"Business good {data['name']} already exists!")

        good = BusinessGood.objects.create(**data)
        BusinessGoodService._apply_composition(good, composition)
        logger.info(f"Business good {good.name} created with cost {good.cost_price}")
        return good

    @staticmethod
    @transaction.atomic
    def update_business_good(good, data, ingredients=None, set_menu=None, partial=False):
        """
        Update a business good.

        A full update must carry exactly one composition. A partial update may
        leave the composition untouched, but if it names one it must name
        exactly one.
        """
        composition_given = ingredients is not None or set_menu is not None
        composition = None
        if composition_given or not partial:
            composition = parse_composition(ingredients=ingredients, set_menu=set_menu)

        name = data.get("name")
        if name and BusinessGood.objects.filter(business=good.business, name=name).exclude(pk=good.pk).exists():
            raise ConflictError(f"Business good {name} already exists!")

        for field, value in data.items():
            setattr(good, field, value)
        good.save()

        if composition is not None:
            BusinessGoodService._apply_composition(good, composition)
            BusinessGoodService.refresh_dependent_set_menus(good)
        return good

    @staticmethod
    @transaction.atomic
    def delete_business_good(good):
        """Delete a business good that no set menu and no order references."""
        if good.included_in_set_menus.exists():
            raise ConflictError("Business good is part of a set menu and cannot be deleted!")
        if good.orders.exists():
            raise ConflictError("Business good has orders, mark it unavailable instead!")
        good.delete()
        logger.info(f"Business good {good.name} deleted")
