import pytest
from decimal import Decimal

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from purchases.models import Purchase
from purchases.services import PurchaseService
from suppliers.models import ONE_TIME_PURCHASE_SUPPLIER
from suppliers.services import SupplierGoodService, SupplierService


@pytest.mark.django_db
class TestCreatePurchase:

    def test_items_increase_inventory_and_total(self, business, supplier, flour, cheese, open_inventory, inventory_count):
        purchase = PurchaseService.create_purchase(
            {"business": business, "supplier": supplier, "receipt_id": "R-1"},
            [
                {"supplier_good": flour, "quantity_purchased": Decimal("10"), "purchase_price": Decimal("20.00")},
                {"supplier_good": cheese, "quantity_purchased": Decimal("2"), "purchase_price": Decimal("19.50")},
            ],
        )

        assert purchase.total_amount == Decimal("39.50")
        assert purchase.items.count() == 2
        assert inventory_count(open_inventory, flour) == Decimal("10")
        assert inventory_count(open_inventory, cheese) == Decimal("2")

    def test_without_supplier_uses_one_time_supplier(self, business, flour, open_inventory):
        purchase = PurchaseService.create_purchase(
            {"business": business},
            [{"supplier_good": flour, "quantity_purchased": Decimal("1"), "purchase_price": Decimal("2.00")}],
        )

        assert purchase.one_time_purchase is True
        assert purchase.supplier.trade_name == ONE_TIME_PURCHASE_SUPPLIER
        assert purchase.receipt_id
        assert purchase.title == "Purchase without title!"

    def test_empty_items_rejected(self, business, supplier, open_inventory):
        with pytest.raises(ValidationError):
            PurchaseService.create_purchase({"business": business, "supplier": supplier}, [])

    def test_zero_quantity_rejected(self, business, supplier, flour, open_inventory):
        with pytest.raises(ValidationError):
            PurchaseService.create_purchase(
                {"business": business, "supplier": supplier},
                [{"supplier_good": flour, "quantity_purchased": Decimal("0"), "purchase_price": Decimal("2.00")}],
            )

    def test_duplicate_receipt_conflicts(self, business, supplier, flour, open_inventory):
        item = {"supplier_good": flour, "quantity_purchased": Decimal("1"), "purchase_price": Decimal("2.00")}
        PurchaseService.create_purchase({"business": business, "supplier": supplier, "receipt_id": "R-1"}, [item])

        with pytest.raises(ConflictError):
            PurchaseService.create_purchase({"business": business, "supplier": supplier, "receipt_id": "R-1"}, [item])

    def test_without_open_inventory_nothing_is_saved(self, business, supplier, flour):
        with pytest.raises(NotFoundError):
            PurchaseService.create_purchase(
                {"business": business, "supplier": supplier, "receipt_id": "R-1"},
                [{"supplier_good": flour, "quantity_purchased": Decimal("1"), "purchase_price": Decimal("2.00")}],
            )

        assert not Purchase.objects.exists()


@pytest.mark.django_db
class TestPurchaseItems:

    @pytest.fixture
    def purchase(self, business, supplier, flour, open_inventory):
        return PurchaseService.create_purchase(
            {"business": business, "supplier": supplier, "receipt_id": "R-1"},
            [{"supplier_good": flour, "quantity_purchased": Decimal("10"), "purchase_price": Decimal("20.00")}],
        )

    def test_add_item(self, purchase, cheese, open_inventory, inventory_count):
        PurchaseService.add_item(
            purchase, {"supplier_good": cheese, "quantity_purchased": Decimal("3"), "purchase_price": Decimal("30.00")}
        )

        purchase.refresh_from_db()
        assert purchase.total_amount == Decimal("50.00")
        assert inventory_count(open_inventory, cheese) == Decimal("3")

    def test_update_item_moves_inventory_by_difference(self, purchase, flour, open_inventory, inventory_count):
        item = purchase.items.get()

        PurchaseService.update_item(item, quantity_purchased=Decimal("4"), purchase_price=Decimal("8.00"))

        purchase.refresh_from_db()
        assert purchase.total_amount == Decimal("8.00")
        assert inventory_count(open_inventory, flour) == Decimal("4")

    def test_last_item_cannot_be_deleted(self, purchase):
        with pytest.raises(ValidationError):
            PurchaseService.delete_item(purchase.items.get())

    def test_delete_purchase_reverts_inventory(self, purchase, flour, open_inventory, inventory_count):
        PurchaseService.delete_purchase(purchase)

        assert not Purchase.objects.exists()
        assert inventory_count(open_inventory, flour) == Decimal("0")

    def test_purchased_supplier_cannot_be_deleted(self, purchase, supplier, flour):
        with pytest.raises(ConflictError):
            SupplierService.delete_supplier(supplier)
        with pytest.raises(ConflictError):
            SupplierGoodService.delete_supplier_good(flour)
