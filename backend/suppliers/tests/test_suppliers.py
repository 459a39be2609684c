import pytest
from decimal import Decimal
from rest_framework import status

from core_backend.exceptions import ConflictError, ValidationError
from suppliers.models import ONE_TIME_PURCHASE_SUPPLIER, Supplier, SupplierGood
from suppliers.services import SupplierGoodService, SupplierService, validate_allergens


class TestValidateAllergens:

    def test_deduplicates(self):
        assert validate_allergens(["Gluten", "Milk", "Gluten"]) == ["Gluten", "Milk"]

    def test_empty(self):
        assert validate_allergens(None) == []

    def test_unknown_allergen_rejected(self):
        with pytest.raises(ValidationError, match="Chocolate"):
            validate_allergens(["Chocolate"])


@pytest.mark.django_db
class TestSupplierService:

    def test_one_time_purchase_supplier_is_created_once(self, business):
        first = SupplierService.get_one_time_purchase_supplier(business)
        second = SupplierService.get_one_time_purchase_supplier(business)

        assert first.pk == second.pk
        assert first.trade_name == ONE_TIME_PURCHASE_SUPPLIER

    def test_supplier_with_ingredient_goods_cannot_be_deleted(self, supplier, pizza):
        with pytest.raises(ConflictError):
            SupplierService.delete_supplier(supplier)

    def test_delete_unused_supplier(self, supplier, flour):
        SupplierService.delete_supplier(supplier)

        assert not Supplier.objects.filter(pk=supplier.pk).exists()
        assert not SupplierGood.objects.filter(pk=flour.pk).exists()


@pytest.mark.django_db
class TestSupplierGoodService:

    def _data(self, business, supplier, **overrides):
        data = {
            "business": business,
            "supplier": supplier,
            "name": "Olive oil",
            "main_category": "Food",
            "measurement_unit": "liters",
            "price_per_measurement_unit": Decimal("7.50"),
            "allergens": [],
        }
        data.update(overrides)
        return data

    def test_unit_is_normalized(self, business, supplier):
        supplier_good = SupplierGoodService.create_supplier_good(self._data(business, supplier))

        assert supplier_good.measurement_unit == "l"

    def test_supplier_of_other_business_rejected(self, business, other_business):
        foreign = Supplier.objects.create(business=other_business, trade_name="Far", legal_name="Far S.A.")

        with pytest.raises(ValidationError):
            SupplierGoodService.create_supplier_good(self._data(business, foreign))

    def test_ingredient_in_use_cannot_be_deleted(self, flour, bread):
        with pytest.raises(ConflictError):
            SupplierGoodService.delete_supplier_good(flour)

    def test_update_normalizes_unit(self, flour):
        updated = SupplierGoodService.update_supplier_good(flour, {"measurement_unit": "grams"})

        assert updated.measurement_unit == "g"


@pytest.mark.django_db
class TestSuppliersAPI:

    def test_one_time_purchase_endpoint(self, api_client, business):
        response = api_client.post(
            "/api/suppliers/one-time-purchase/", {"business": str(business.pk)}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["trade_name"] == ONE_TIME_PURCHASE_SUPPLIER

    def test_delete_supplier_in_use_conflicts(self, api_client, supplier, pizza):
        response = api_client.delete(f"/api/suppliers/{supplier.pk}/")

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_create_supplier_good(self, api_client, business, supplier):
        response = api_client.post(
            "/api/supplier-goods/",
            {
                "business": str(business.pk),
                "supplier": supplier.pk,
                "name": "Tomato",
                "main_category": "Food",
                "measurement_unit": "kg",
                "price_per_measurement_unit": "1.80",
                "allergens": [],
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["measurement_unit"] == "kg"

    def test_supplier_good_with_foreign_supplier_rejected(self, api_client, business, other_business):
        foreign = Supplier.objects.create(business=other_business, trade_name="Far", legal_name="Far S.A.")

        response = api_client.post(
            "/api/supplier-goods/",
            {
                "business": str(business.pk),
                "supplier": foreign.pk,
                "name": "Tomato",
                "main_category": "Food",
                "measurement_unit": "kg",
                "price_per_measurement_unit": "1.80",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
