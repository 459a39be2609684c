"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from datetime import date
from decimal import Decimal

from django.contrib.auth.hashers import make_password
from rest_framework.test import APIClient


ADDRESS = {
    "country": "Spain",
    "state": "Barcelona",
    "city": "Barcelona",
    "street": "Carrer de Mallorca",
    "buildingNumber": "101",
    "postCode": "08036",
}


# ============================================================================
# CLIENTS
# ============================================================================

@pytest.fixture
def api_client():
    """DRF test client. The API is open; business scoping is explicit."""
    return APIClient()


@pytest.fixture
def blob_storage(tmp_path, settings):
    """Blob storage client writing into a temporary directory."""
    from django.apps import apps
    from core_backend.infrastructure.blob_storage import BlobStorageClient

    config = {"ROOT": str(tmp_path), "BASE_URL": "/media/"}
    client = BlobStorageClient.from_settings(config)
    app_config = apps.get_app_config("core_backend")
    previous = app_config.blob_storage
    app_config.blob_storage = client
    yield client
    app_config.blob_storage = previous


# ============================================================================
# BUSINESSES
# ============================================================================

def _create_business(name, subscription="Basic"):
    from business.models import Business

    slug = name.lower().replace(" ", "-")
    return Business.objects.create(
        trade_name=name,
        legal_name=f"{name} S.L.",
        email=f"info@{slug}.test",
        password=make_password("secret-pass"),
        phone_number="+34 600 000 000",
        tax_number=f"TAX-{slug}",
        subscription=subscription,
        address=dict(ADDRESS),
    )


@pytest.fixture
def business(db):
    return _create_business("Casa Lola")


@pytest.fixture
def other_business(db):
    return _create_business("Bar Pepe")


@pytest.fixture
def sales_point(business):
    from business.models import SalesPoint

    return SalesPoint.objects.create(business=business, sales_point_name="Table 1", sales_point_type="table")


@pytest.fixture
def second_sales_point(business):
    from business.models import SalesPoint

    return SalesPoint.objects.create(business=business, sales_point_name="Table 2", sales_point_type="table")


# ============================================================================
# EMPLOYEES
# ============================================================================

@pytest.fixture
def employee_factory(business):
    """Create employees of ``business`` with unique identifiers."""
    from employees.models import Employee

    counter = {"n": 0}

    def create(name=None, roles=None, on_duty=True, target_business=None, **extra):
        counter["n"] += 1
        n = counter["n"]
        values = {
            "business": target_business or business,
            "employee_name": name or f"Employee {n}",
            "email": f"employee{n}@casalola.test",
            "id_type": "National ID",
            "id_number": f"ID-{n}",
            "tax_number": f"ETAX-{n}",
            "roles": roles or ["Waiter"],
            "join_date": date(2020, 1, 1),
            "on_duty": on_duty,
            "vacation_days_per_year": 22,
            "vacation_days_left": 22,
        }
        values.update(extra)
        return Employee.objects.create(**values)

    return create


@pytest.fixture
def manager(employee_factory):
    return employee_factory(name="Marta Manager", roles=["Manager"], current_shift_role="Manager")


@pytest.fixture
def waiter(employee_factory):
    return employee_factory(name="Walter Waiter", roles=["Waiter"], current_shift_role="Waiter")


# ============================================================================
# SUPPLIERS AND GOODS
# ============================================================================

@pytest.fixture
def supplier(business):
    from suppliers.models import Supplier

    return Supplier.objects.create(business=business, trade_name="Harinas Sur", legal_name="Harinas Sur S.A.")


@pytest.fixture
def supplier_good_factory(business, supplier):
    from suppliers.models import SupplierGood

    def create(name, measurement_unit="kg", price="1.00", allergens=None, **extra):
        values = {
            "business": business,
            "supplier": supplier,
            "name": name,
            "main_category": "Food",
            "measurement_unit": measurement_unit,
            "price_per_measurement_unit": Decimal(price),
            "allergens": allergens or [],
        }
        values.update(extra)
        return SupplierGood.objects.create(**values)

    return create


@pytest.fixture
def flour(supplier_good_factory):
    """Flour bought per kg at 2.00."""
    return supplier_good_factory("Flour", measurement_unit="kg", price="2.00", allergens=["Gluten"], par_level=Decimal("20"))


@pytest.fixture
def cheese(supplier_good_factory):
    """Cheese bought per kg at 10.00."""
    return supplier_good_factory("Cheese", measurement_unit="kg", price="10.00", allergens=["Milk"], par_level=Decimal("5"))


@pytest.fixture
def business_good_factory(business):
    from goods.services import BusinessGoodService

    def create(name, selling_price="10.00", ingredients=None, set_menu=None, **extra):
        data = {
            "business": business,
            "name": name,
            "main_category": "Food",
            "selling_price": Decimal(selling_price),
        }
        data.update(extra)
        return BusinessGoodService.create_business_good(data, ingredients=ingredients, set_menu=set_menu)

    return create


@pytest.fixture
def pizza(business_good_factory, flour, cheese):
    """Pizza: 250 g flour and 100 g cheese, cost 0.50 + 1.00."""
    return business_good_factory(
        "Pizza",
        selling_price="12.00",
        ingredients=[
            {"supplier_good": flour, "measurement_unit": "g", "required_quantity": Decimal("250")},
            {"supplier_good": cheese, "measurement_unit": "g", "required_quantity": Decimal("100")},
        ],
    )


@pytest.fixture
def bread(business_good_factory, flour):
    """Bread: 500 g flour, cost 1.00."""
    return business_good_factory(
        "Bread",
        selling_price="3.00",
        ingredients=[{"supplier_good": flour, "measurement_unit": "g", "required_quantity": Decimal("500")}],
    )


# ============================================================================
# INVENTORY
# ============================================================================

@pytest.fixture
def open_inventory(business, flour, cheese):
    """Open inventory of the current month holding flour and cheese."""
    from inventory.services import InventoryService

    return InventoryService.create_inventory(business)


@pytest.fixture
def inventory_count(db):
    """Read the current dynamic system count of a supplier good."""
    from inventory.models import InventoryGood

    def read(inventory, supplier_good):
        return InventoryGood.objects.get(inventory=inventory, supplier_good=supplier_good).dynamic_system_count

    return read


# ============================================================================
# SALES
# ============================================================================

@pytest.fixture
def sales_instance(business, sales_point, waiter, open_inventory):
    """Occupied table opened by the waiter; opens the business day."""
    from sales_instances.services import SalesInstanceService

    return SalesInstanceService.open_sales_instance(business, sales_point, 2, waiter)


@pytest.fixture
def order_factory(waiter):
    """Create one order per list of goods, all in one sales group."""
    from orders.services import OrderService

    def create(sales_instance, *goods_lists, employee=None):
        return OrderService.create_orders(
            employee or waiter,
            sales_instance,
            [{"business_goods": list(goods)} for goods in goods_lists],
        )

    return create
