import logging
import secrets

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from core_backend.exceptions import ConflictError, ValidationError
from core_backend.utils.accumulators import to_decimal
from inventory.services import InventoryService
from .models import Purchase, PurchaseItem

logger = logging.getLogger(__name__)


def generate_receipt_id(now=None):
    """Receipt id for purchases without a supplier receipt, e.g. ``20240315-1a2b3c``."""
    now = timezone.localtime(now or timezone.now())
    return f"{now:%Y%m%d}-{secrets.token_hex(3)}"


def validate_purchase_item(business, item):
    """
    Check one purchase item: a supplier good of the business, a non-zero
    quantity and a non-zero price. Negative values are corrections.
    """
    supplier_good = item.get("supplier_good")
    if supplier_good is None:
        raise ValidationError("Purchase item needs a supplier good!")
    if supplier_good.business_id != business.pk:
        raise ValidationError(f"Supplier good {supplier_good} does not belong to this business!")
    for field in ("quantity_purchased", "purchase_price"):
        try:
            value = to_decimal(item.get(field))
        except ArithmeticError:
            raise ValidationError(f"{field} must be a number!")
        if not value.is_finite() or value == 0:
            raise ValidationError(f"{field} must be a non-zero number!")


class PurchaseService:
    """
    Purchases and their items. Inventory follows every item change within the
    same transaction, so a failed inventory update leaves the purchase as it
    was.
    """

    @staticmethod
    def _refresh_total(purchase):
        total = purchase.items.aggregate(total=Sum("purchase_price"))["total"]
        purchase.total_amount = to_decimal(total)
        purchase.save(update_fields=["total_amount", "updated_at"])
        return purchase

    @staticmethod
    @transaction.atomic
    def create_purchase(data, items):
        """
        Create a purchase with its items and add them to the open inventory.

        Without a supplier the purchase is booked on the business's one time
        purchase supplier. A missing receipt id is generated.

        Raises:
            ValidationError: No items, an invalid item, or a supplier or
                employee of another business.
            ConflictError: The receipt id already exists in the business.
            NotFoundError: No open inventory, or an item not in it.
        """
        from suppliers.services import SupplierService

        data = dict(data)
        business = data["business"]
        if not items:
            raise ValidationError("Purchase items is not an array or it is empty!")
        for item in items:
            validate_purchase_item(business, item)

        if data.get("supplier") is None:
            data["supplier"] = SupplierService.get_one_time_purchase_supplier(business)
            data["one_time_purchase"] = True
        elif data["supplier"].business_id != business.pk:
            raise ValidationError("Supplier does not belong to this business!")
        purchased_by = data.get("purchased_by")
        if purchased_by is not None and purchased_by.business_id != business.pk:
            raise ValidationError("Employee does not belong to this business!")

        receipt_id = data.get("receipt_id") or generate_receipt_id()
        if Purchase.objects.filter(business=business, receipt_id=receipt_id).exists():
            raise ConflictError("Receipt Id already exists!")
        data["receipt_id"] = receipt_id
        data["title"] = data.get("title") or "Purchase without title!"

        purchase = Purchase.objects.create(**data)
        PurchaseItem.objects.bulk_create([PurchaseItem(purchase=purchase, **item) for item in items])
        for item in items:
            InventoryService.adjust_supplier_good(business, item["supplier_good"].pk, item["quantity_purchased"])

        PurchaseService._refresh_total(purchase)
        logger.info(f"Purchase {purchase.receipt_id} created with {len(items)} item(s)")
        return purchase

    @staticmethod
    @transaction.atomic
    def update_purchase(purchase, data):
        """Update the header fields. Items change through the item operations."""
        receipt_id = data.get("receipt_id")
        if receipt_id and receipt_id != purchase.receipt_id:
            if Purchase.objects.filter(business=purchase.business, receipt_id=receipt_id).exists():
                raise ConflictError("Receipt Id already exists!")
        for field in ("title", "purchase_date", "purchased_by", "receipt_id", "document_image_url", "comments"):
            if field in data:
                setattr(purchase, field, data[field])
        purchase.save()
        return purchase

    @staticmethod
    @transaction.atomic
    def add_item(purchase, item):
        validate_purchase_item(purchase.business, item)
        purchase_item = PurchaseItem.objects.create(purchase=purchase, **item)
        InventoryService.adjust_supplier_good(
            purchase.business, purchase_item.supplier_good_id, purchase_item.quantity_purchased
        )
        PurchaseService._refresh_total(purchase)
        return purchase_item

    @staticmethod
    @transaction.atomic
    def update_item(purchase_item, quantity_purchased=None, purchase_price=None):
        """Edit an item; the inventory moves by the quantity difference."""
        purchase_item = PurchaseItem.objects.select_for_update().get(pk=purchase_item.pk)
        purchase = purchase_item.purchase
        new_values = {
            "supplier_good": purchase_item.supplier_good,
            "quantity_purchased": purchase_item.quantity_purchased if quantity_purchased is None else quantity_purchased,
            "purchase_price": purchase_item.purchase_price if purchase_price is None else purchase_price,
        }
        validate_purchase_item(purchase.business, new_values)

        difference = to_decimal(new_values["quantity_purchased"]) - purchase_item.quantity_purchased
        purchase_item.quantity_purchased = new_values["quantity_purchased"]
        purchase_item.purchase_price = new_values["purchase_price"]
        purchase_item.save(update_fields=["quantity_purchased", "purchase_price"])
        if difference:
            InventoryService.adjust_supplier_good(purchase.business, purchase_item.supplier_good_id, difference)
        PurchaseService._refresh_total(purchase)
        return purchase_item

    @staticmethod
    @transaction.atomic
    def delete_item(purchase_item):
        purchase = purchase_item.purchase
        if purchase.items.count() == 1:
            raise ValidationError("A purchase needs at least one item! Delete the purchase instead.")
        InventoryService.adjust_supplier_good(
            purchase.business, purchase_item.supplier_good_id, -purchase_item.quantity_purchased
        )
        purchase_item.delete()
        PurchaseService._refresh_total(purchase)

    @staticmethod
    @transaction.atomic
    def delete_purchase(purchase):
        """Delete a purchase and take its quantities back out of the inventory."""
        for item in purchase.items.all():
            InventoryService.adjust_supplier_good(purchase.business, item.supplier_good_id, -item.quantity_purchased)
        receipt_id = purchase.receipt_id
        purchase.delete()
        logger.info(f"Purchase {receipt_id} deleted and inventory reverted")
