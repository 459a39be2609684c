import pytest
from decimal import Decimal
from rest_framework import status

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from goods.composition import Ingredients, SetMenu, parse_composition
from goods.models import BusinessGood
from goods.services import BusinessGoodService, CyclicSetMenuError


@pytest.fixture
def rice(supplier_good_factory):
    """Rice bought per kg at 4.00."""
    return supplier_good_factory("Rice", measurement_unit="kg", price="4.00")


def ingredient(supplier_good, unit, quantity):
    return {"supplier_good": supplier_good, "measurement_unit": unit, "required_quantity": Decimal(quantity)}


class TestParseComposition:

    def test_ingredients(self):
        composition = parse_composition(ingredients=[ingredient(1, "kg", "0.5")])

        assert isinstance(composition, Ingredients)
        assert composition.lines[0].required_quantity == Decimal("0.5")

    def test_set_menu_deduplicates_members(self):
        assert parse_composition(set_menu=[3, 4, 3]) == SetMenu((3, 4))

    @pytest.mark.parametrize(
        "ingredients, set_menu",
        [(None, None), ([], []), ([ingredient(1, "kg", "1")], [2])],
    )
    def test_exactly_one_composition(self, ingredients, set_menu):
        with pytest.raises(ValidationError):
            parse_composition(ingredients=ingredients, set_menu=set_menu)

    @pytest.mark.parametrize("quantity", ["0", "-1"])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(ValidationError):
            parse_composition(ingredients=[ingredient(1, "kg", quantity)])

    def test_duplicate_ingredient_rejected(self):
        with pytest.raises(ValidationError):
            parse_composition(ingredients=[ingredient(1, "kg", "1"), ingredient(1, "g", "5")])


@pytest.mark.django_db
class TestBusinessGoodCost:

    def test_cost_in_supplier_unit(self, business_good_factory, rice):
        good = business_good_factory("Paella", ingredients=[ingredient(rice, "kg", "0.5")])

        assert good.cost_price == Decimal("2.00")
        assert good.ingredients.get().cost_of_required_quantity == Decimal("2.00")

    def test_cost_converted_from_grams(self, business_good_factory, rice):
        good = business_good_factory("Arroz negro", ingredients=[ingredient(rice, "g", "500")])

        assert good.cost_price == Decimal("2.00")

    def test_allergens_are_union_of_ingredients(self, pizza):
        assert set(pizza.allergens) == {"Gluten", "Milk"}

    def test_set_menu_sums_members(self, business_good_factory, pizza, bread):
        menu = business_good_factory("Lunch", selling_price="14.00", set_menu=[pizza, bread])

        assert menu.cost_price == pizza.cost_price + bread.cost_price
        assert set(menu.allergens) == {"Gluten", "Milk"}
        assert menu.ingredients.count() == 0

    def test_incompatible_unit_rejected(self, business_good_factory, rice):
        with pytest.raises(ValidationError):
            business_good_factory("Rice by the liter", ingredients=[ingredient(rice, "l", "1")])

    def test_foreign_supplier_good_not_found(self, business_good_factory, other_business):
        from suppliers.models import Supplier, SupplierGood

        supplier = Supplier.objects.create(business=other_business, trade_name="Far", legal_name="Far S.A.")
        foreign = SupplierGood.objects.create(
            business=other_business, supplier=supplier, name="Salt", main_category="Food",
            measurement_unit="kg", price_per_measurement_unit=Decimal("1"),
        )

        with pytest.raises(NotFoundError):
            business_good_factory("Salted", ingredients=[ingredient(foreign, "kg", "1")])


@pytest.mark.django_db
class TestBusinessGoodService:

    def test_duplicate_name_conflicts(self, business_good_factory, pizza, rice):
        with pytest.raises(ConflictError):
            business_good_factory("Pizza", ingredients=[ingredient(rice, "kg", "1")])

    def test_set_menu_cannot_contain_itself(self, business_good_factory, pizza, bread):
        lunch = business_good_factory("Lunch", set_menu=[pizza])
        dinner = business_good_factory("Dinner", set_menu=[lunch, bread])

        with pytest.raises(CyclicSetMenuError):
            BusinessGoodService.update_business_good(lunch, {}, set_menu=[dinner])

    def test_member_change_refreshes_set_menu(self, business_good_factory, pizza, bread, rice):
        lunch = business_good_factory("Lunch", set_menu=[pizza, bread])

        BusinessGoodService.update_business_good(bread, {}, ingredients=[ingredient(rice, "kg", "1")], partial=True)

        lunch.refresh_from_db()
        assert lunch.cost_price == pizza.cost_price + Decimal("4.00")

    def test_partial_update_keeps_composition(self, pizza):
        cost = pizza.cost_price

        good = BusinessGoodService.update_business_good(pizza, {"selling_price": Decimal("13.00")}, partial=True)

        assert good.selling_price == Decimal("13.00")
        assert good.cost_price == cost
        assert good.ingredients.count() == 2

    def test_member_of_set_menu_cannot_be_deleted(self, business_good_factory, pizza):
        business_good_factory("Lunch", set_menu=[pizza])

        with pytest.raises(ConflictError):
            BusinessGoodService.delete_business_good(pizza)

    def test_delete_unused_good(self, bread):
        BusinessGoodService.delete_business_good(bread)

        assert not BusinessGood.objects.filter(pk=bread.pk).exists()


@pytest.mark.django_db
class TestBusinessGoodAPI:

    def test_create_with_ingredients(self, api_client, business, rice):
        response = api_client.post(
            "/api/business-goods/",
            {
                "business": str(business.pk),
                "name": "Paella",
                "main_category": "Food",
                "selling_price": "16.00",
                "ingredients": [{"supplier_good": rice.pk, "measurement_unit": "kg", "required_quantity": "0.5"}],
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(response.data["cost_price"]) == Decimal("2.00")

    def test_create_with_both_compositions_rejected(self, api_client, business, rice, pizza):
        response = api_client.post(
            "/api/business-goods/",
            {
                "business": str(business.pk),
                "name": "Confused",
                "main_category": "Food",
                "selling_price": "16.00",
                "ingredients": [{"supplier_good": rice.pk, "measurement_unit": "kg", "required_quantity": "1"}],
                "set_menu": [pizza.pk],
            },
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Only one of ingredients or setMenu" in response.data["message"]

    def test_delete_good_in_set_menu_conflicts(self, api_client, business_good_factory, pizza):
        business_good_factory("Lunch", set_menu=[pizza])

        response = api_client.delete(f"/api/business-goods/{pizza.pk}/")

        assert response.status_code == status.HTTP_409_CONFLICT
