import logging

from django.db import transaction

from core_backend.exceptions import ConflictError, ValidationError
from measurements.conversion import ConversionService
from .models import Allergen, Supplier, SupplierGood, ONE_TIME_PURCHASE_SUPPLIER

logger = logging.getLogger(__name__)


def validate_allergens(allergens):
    if allergens in (None, []):
        return []
    if not isinstance(allergens, list):
        raise ValidationError("Allergens must be an array!")
    invalid = [value for value in allergens if value not in Allergen.values]
    if invalid:
        raise ValidationError(f"Invalid allergen(s): {', '.join(map(str, invalid))}")
    return list(dict.fromkeys(allergens))


class SupplierService:

    @staticmethod
    def get_one_time_purchase_supplier(business):
        """
        Return the business's synthetic supplier for ad hoc purchases,
        creating it on first use.
        """
        supplier, created = Supplier.objects.get_or_create(
            business=business,
            trade_name=ONE_TIME_PURCHASE_SUPPLIER,
            defaults={
                "legal_name": ONE_TIME_PURCHASE_SUPPLIER,
                "currently_in_use": True,
            },
        )
        if created:
            logger.info(f"Created one time purchase supplier for business {business.pk}")
        return supplier

    @staticmethod
    def delete_supplier(supplier):
        if supplier.goods.filter(ingredient_usages__isnull=False).exists():
            raise ConflictError("Supplier has goods used by business goods and cannot be deleted!")
        if supplier.purchases.exists():
            raise ConflictError("Supplier has purchases and cannot be deleted!")
        supplier.delete()


class SupplierGoodService:

    @staticmethod
    @transaction.atomic
    def create_supplier_good(data):
        """
        Create a supplier good and, when it is in use, add it to the
        business's current inventory.
        """
        from inventory.services import InventoryService

        data = dict(data)
        data["allergens"] = validate_allergens(data.get("allergens"))
        data["measurement_unit"] = ConversionService.normalize_unit(data["measurement_unit"])
        if data["supplier"].business_id != data["business"].pk:
            raise ValidationError("Supplier does not belong to this business!")

        supplier_good = SupplierGood.objects.create(**data)
        if supplier_good.currently_in_use:
            InventoryService.add_supplier_good_to_current_inventory(supplier_good)
        logger.info(f"Supplier good {supplier_good.name} created")
        return supplier_good

    @staticmethod
    @transaction.atomic
    def update_supplier_good(supplier_good, data):
        if "allergens" in data:
            data["allergens"] = validate_allergens(data["allergens"])
        if "measurement_unit" in data:
            data["measurement_unit"] = ConversionService.normalize_unit(data["measurement_unit"])
        for field, value in data.items():
            setattr(supplier_good, field, value)
        supplier_good.save()
        return supplier_good

    @staticmethod
    @transaction.atomic
    def delete_supplier_good(supplier_good):
        """Delete a supplier good unless a business good uses it as an ingredient."""
        if supplier_good.ingredient_usages.exists():
            raise ConflictError("Supplier good is in use in some business goods!")
        if supplier_good.purchase_items.exists():
            raise ConflictError("Supplier good has purchases and cannot be deleted!")
        supplier_good.delete()
        logger.info(f"Supplier good {supplier_good.name} deleted")
