import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from core_backend.utils.accumulators import to_decimal
from .models import Inventory, InventoryCount, InventoryGood

logger = logging.getLogger(__name__)

PERCENT_PLACES = Decimal("0.0001")


class Direction:
    ADD = "add"
    REMOVE = "remove"

    ALL = (ADD, REMOVE)


def deviation_percent(system_count, counted_quantity) -> Decimal:
    """Deviation of a physical count from the system count, in percent."""
    system_count = to_decimal(system_count)
    divisor = system_count or Decimal("1")
    value = (system_count - to_decimal(counted_quantity)) / divisor * 100
    return value.quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)


def _average_of_nonzero(values) -> Decimal:
    non_zero = [to_decimal(v) for v in values if v]
    if not non_zero:
        return Decimal("0")
    return (sum(non_zero, Decimal("0")) / len(non_zero)).quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)


class InventoryService:
    """
    Monthly inventories and the dynamic system count of supplier goods.

    Sales remove the supplier goods a business good is made of, cancelled
    orders and purchases add them back, and physical counts reset the count.
    """

    @staticmethod
    def get_open_inventory(business, lock=False):
        """Return the business's open (not final) inventory, or None."""
        queryset = Inventory.objects.filter(business=business, set_final_count=False)
        if lock:
            queryset = queryset.select_for_update()
        return queryset.order_by("-period").first()

    @staticmethod
    def require_open_inventory(business, lock=False):
        inventory = InventoryService.get_open_inventory(business, lock=lock)
        if inventory is None:
            raise NotFoundError(f"No open inventory found for business {business.pk}!")
        return inventory

    @staticmethod
    def update_dynamic_count(business, goods, direction):
        """
        Add or remove the supplier goods consumed by ``goods``.

        ``goods`` holds business good instances, one entry per unit sold. Set
        menus are expanded through their members and quantities converted to
        each supplier good's unit. One increment is applied per supplier good.
        Runs inside the caller's transaction.

        Returns:
            dict mapping supplier good id to the applied (unsigned) quantity.

        Raises:
            ValidationError: Unknown direction or cyclic set menu.
            NotFoundError: The business has no open inventory.
        """
        from goods.services import IngredientExpander

        if direction not in Direction.ALL:
            raise ValidationError(f"Invalid inventory direction: {direction}")

        totals = IngredientExpander.totals_by_supplier_good(goods)
        if not totals:
            return totals

        inventory = InventoryService.require_open_inventory(business)
        for supplier_good_id, quantity in totals.items():
            delta = quantity if direction == Direction.ADD else -quantity
            updated = InventoryGood.objects.filter(
                inventory=inventory, supplier_good_id=supplier_good_id
            ).update(dynamic_system_count=F("dynamic_system_count") + delta)
            if not updated:
                InventoryGood.objects.create(
                    inventory=inventory,
                    supplier_good_id=supplier_good_id,
                    dynamic_system_count=delta,
                )
                logger.warning(
                    f"Supplier good {supplier_good_id} was missing from inventory {inventory.pk}, added"
                )

        logger.info(
            f"Inventory {inventory.pk}: {direction} {len(totals)} supplier good(s) for {len(goods)} business good(s)"
        )
        return totals

    @staticmethod
    def adjust_supplier_good(business, supplier_good_id, quantity):
        """
        Apply a signed quantity to one supplier good of the open inventory.

        Used by purchases, where the inventory good must already exist.
        """
        inventory = InventoryService.require_open_inventory(business)
        updated = InventoryGood.objects.filter(
            inventory=inventory, supplier_good_id=supplier_good_id
        ).update(dynamic_system_count=F("dynamic_system_count") + to_decimal(quantity))
        if not updated:
            raise NotFoundError(f"Supplier good {supplier_good_id} is not in the current inventory!")

    @staticmethod
    @transaction.atomic
    def create_inventory(business, today=None):
        """
        Open the inventory of the current month.

        The previous inventory becomes final and the last physical count of
        each supplier good seeds the new dynamic system count.

        Raises:
            ConflictError: This month's inventory already exists.
        """
        from suppliers.models import SupplierGood

        today = today or timezone.localdate()
        period = today.replace(day=1)
        if Inventory.objects.filter(business=business, period=period).exists():
            raise ConflictError("Inventory for the current month already exists!")

        previous = (
            Inventory.objects.select_for_update()
            .filter(business=business, period__lt=period)
            .order_by("-period")
            .first()
        )
        last_counts = {}
        if previous is not None:
            previous.set_final_count = True
            previous.save(update_fields=["set_final_count", "updated_at"])
            for inventory_good in previous.inventory_goods.prefetch_related("monthly_counts"):
                counts = list(inventory_good.monthly_counts.all())
                if counts:
                    last_counts[inventory_good.supplier_good_id] = counts[0].current_count_quantity

        inventory = Inventory.objects.create(business=business, period=period)
        InventoryGood.objects.bulk_create(
            InventoryGood(
                inventory=inventory,
                supplier_good_id=supplier_good_id,
                dynamic_system_count=last_counts.get(supplier_good_id, Decimal("0")),
            )
            for supplier_good_id in SupplierGood.objects.filter(
                business=business, currently_in_use=True
            ).values_list("pk", flat=True)
        )
        logger.info(f"Inventory {inventory.period:%Y-%m} created for business {business.pk}")
        return inventory

    @staticmethod
    def _get_editable_inventory_good(inventory_good_id, lock=True):
        queryset = InventoryGood.objects.select_related("inventory", "supplier_good")
        if lock:
            queryset = queryset.select_for_update()
        inventory_good = queryset.get(pk=inventory_good_id)
        if inventory_good.inventory.set_final_count:
            raise ValidationError("Inventory already set as final count! Cannot update!")
        return inventory_good

    @staticmethod
    @transaction.atomic
    def add_count(inventory_good, current_count_quantity, counted_by=None, comments=""):
        """
        Record a physical count of an inventory good.

        The count's deviation is measured against the current system count,
        the good's average deviation is recomputed and the system count is
        reset to the counted quantity.
        """
        inventory_good = InventoryService._get_editable_inventory_good(inventory_good.pk)
        counted = to_decimal(current_count_quantity)
        if counted < 0:
            raise ValidationError("Current count quantity cannot be negative!")

        system_count = inventory_good.dynamic_system_count
        count = InventoryCount.objects.create(
            inventory_good=inventory_good,
            counted_date=timezone.now(),
            current_count_quantity=counted,
            system_count_at_count=system_count,
            quantity_needed=inventory_good.supplier_good.par_level - counted,
            counted_by=counted_by,
            deviation_percent=deviation_percent(system_count, counted),
            comments=comments or "",
        )

        inventory_good.average_deviation_percent = _average_of_nonzero(
            inventory_good.monthly_counts.values_list("deviation_percent", flat=True)
        )
        inventory_good.dynamic_system_count = counted
        inventory_good.save(update_fields=["average_deviation_percent", "dynamic_system_count"])
        logger.info(
            f"Count {counted} recorded for supplier good {inventory_good.supplier_good_id} "
            f"(system {system_count}, deviation {count.deviation_percent}%)"
        )
        return count

    @staticmethod
    @transaction.atomic
    def reedit_count(count, current_count_quantity, reason, reedited_by=None, comments=None):
        """
        Correct a recorded count, keeping its original values under ``reedited``.

        When the corrected count is the latest one, the system count moves by
        the same difference.
        """
        if not reason:
            raise ValidationError("A reason is required to re-edit a count!")

        inventory_good = InventoryService._get_editable_inventory_good(count.inventory_good_id)
        counted = to_decimal(current_count_quantity)
        if counted < 0:
            raise ValidationError("Current count quantity cannot be negative!")
        if counted == count.current_count_quantity:
            return count

        original = {
            "currentCountQuantity": count.current_count_quantity,
            "deviationPercent": count.deviation_percent,
            "dynamicSystemCount": count.system_count_at_count,
        }
        difference = counted - count.current_count_quantity
        is_latest = inventory_good.monthly_counts.first().pk == count.pk

        count.current_count_quantity = counted
        count.quantity_needed = inventory_good.supplier_good.par_level - counted
        count.deviation_percent = deviation_percent(count.system_count_at_count, counted)
        if comments is not None:
            count.comments = comments
        count.reedited = {
            "reeditedBy": reedited_by.pk if reedited_by else None,
            "date": timezone.now(),
            "reason": reason,
            "originalValues": original,
        }
        count.save()

        inventory_good.average_deviation_percent = _average_of_nonzero(
            inventory_good.monthly_counts.values_list("deviation_percent", flat=True)
        )
        if is_latest:
            inventory_good.dynamic_system_count = F("dynamic_system_count") + difference
        inventory_good.save(update_fields=["average_deviation_percent", "dynamic_system_count"])
        inventory_good.refresh_from_db(fields=["dynamic_system_count"])
        logger.info(f"Count {count.pk} re-edited: {original['currentCountQuantity']} -> {counted} ({reason})")
        return count

    @staticmethod
    def add_supplier_good_to_current_inventory(supplier_good):
        """
        Add a supplier good to its business's open inventory.

        Returns:
            The inventory good, or None when the business has no open
            inventory yet (the next monthly inventory will include it).
        """
        inventory = InventoryService.get_open_inventory(supplier_good.business)
        if inventory is None:
            logger.info(
                f"No open inventory for business {supplier_good.business_id}, "
                f"supplier good {supplier_good.pk} not added"
            )
            return None
        inventory_good, created = InventoryGood.objects.get_or_create(
            inventory=inventory, supplier_good=supplier_good
        )
        if created:
            logger.info(f"Supplier good {supplier_good.pk} added to inventory {inventory.pk}")
        return inventory_good

    @staticmethod
    @transaction.atomic
    def remove_supplier_good_from_current_inventory(supplier_good):
        """
        Remove a supplier good (and its counts) from the open inventory.

        Raises:
            NotFoundError: No open inventory, or the good is not in it.
        """
        inventory = InventoryService.require_open_inventory(supplier_good.business)
        deleted, _ = InventoryGood.objects.filter(inventory=inventory, supplier_good=supplier_good).delete()
        if not deleted:
            raise NotFoundError(f"Supplier good {supplier_good.pk} is not in the current inventory!")
        logger.info(f"Supplier good {supplier_good.pk} removed from inventory {inventory.pk}")

    @staticmethod
    @transaction.atomic
    def close_inventory(inventory):
        """Mark an inventory as final; its counts can no longer change."""
        if inventory.set_final_count:
            raise ConflictError("Inventory already set as final count!")
        inventory.set_final_count = True
        inventory.save(update_fields=["set_final_count", "updated_at"])
        logger.info(f"Inventory {inventory.pk} closed")
        return inventory
