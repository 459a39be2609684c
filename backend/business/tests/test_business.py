import pytest
from django.contrib.auth.hashers import check_password
from rest_framework import status

from business.models import Business, SalesPoint
from business.services import BusinessService, SalesPointService, validate_address, validate_metrics
from core_backend.exceptions import ConflictError, ValidationError
from employees.models import Employee
from suppliers.models import Supplier


def business_payload(**overrides):
    payload = {
        "trade_name": "La Tasca",
        "legal_name": "La Tasca S.L.",
        "email": "hola@latasca.test",
        "password": "super-secret",
        "phone_number": "+34 611 111 111",
        "tax_number": "B-12345678",
        "subscription": "Basic",
        "address": {
            "country": "Spain",
            "state": "Madrid",
            "city": "Madrid",
            "street": "Calle Mayor",
            "buildingNumber": "1",
            "postCode": "28013",
        },
    }
    payload.update(overrides)
    return payload


class TestValidators:

    def test_address_requires_every_field(self):
        address = business_payload()["address"]
        del address["postCode"]

        with pytest.raises(ValidationError, match="postCode"):
            validate_address(address)

    def test_address_rejects_unknown_keys(self):
        address = dict(business_payload()["address"], floor="3")

        with pytest.raises(ValidationError, match="floor"):
            validate_address(address)

    def test_metrics_accept_percentages(self):
        metrics = {
            "foodCostPercentage": 30,
            "laborCostPercentage": 25.5,
            "supplierGoodWastePercentage": {"lowBudgetImpact": 5, "veryHighBudgetImpact": 1},
        }

        assert validate_metrics(metrics) == metrics

    @pytest.mark.parametrize(
        "metrics",
        [
            {"foodCostPercentage": 101},
            {"foodCostPercentage": "30"},
            {"rentPercentage": 10},
            {"supplierGoodWastePercentage": {"mediumBudgetImpact": -1}},
            {"supplierGoodWastePercentage": 5},
        ],
    )
    def test_metrics_rejected(self, metrics):
        with pytest.raises(ValidationError):
            validate_metrics(metrics)


@pytest.mark.django_db
class TestBusinessService:

    def test_password_is_hashed(self):
        business = BusinessService.create_business(business_payload())

        assert business.password != "super-secret"
        assert check_password("super-secret", business.password)

    @pytest.mark.parametrize("field", ["legal_name", "email", "tax_number"])
    def test_duplicate_identity_conflicts(self, business, field):
        payload = business_payload(**{field: getattr(business, field)})

        with pytest.raises(ConflictError):
            BusinessService.create_business(payload)

    def test_update_keeps_own_identity(self, business):
        updated = BusinessService.update_business(business, {"trade_name": "Casa Lola Nova", "email": business.email})

        assert updated.trade_name == "Casa Lola Nova"

    def test_delete_removes_owned_records(self, business, other_business, sales_point, waiter, supplier):
        kept = Supplier.objects.create(business=other_business, trade_name="Otro", legal_name="Otro S.A.")

        results = BusinessService.delete_business(business)

        assert results["employees"] == 1
        assert not Business.objects.filter(pk=business.pk).exists()
        assert not Employee.objects.filter(pk=waiter.pk).exists()
        assert not SalesPoint.objects.filter(pk=sales_point.pk).exists()
        assert Supplier.objects.filter(pk=kept.pk).exists()

    def test_deletion_plan_lists_children_before_business(self, business):
        plan = BusinessService.build_deletion_plan(business)
        names = [step.name for step in plan.steps]

        assert names[-1] == "business"
        assert names.index("orders") < names.index("business_goods")
        assert names.index("purchases") < names.index("supplier_goods")


@pytest.mark.django_db
class TestSalesPointService:

    def test_live_sales_instance_blocks_delete(self, sales_instance, sales_point, blob_storage):
        with pytest.raises(ConflictError):
            SalesPointService.delete_sales_point(sales_point, storage=blob_storage)

    def test_delete_removes_qr_code(self, sales_point, blob_storage):
        url = blob_storage.upload(b"qr", "qr-codes", filename="table-1.png")
        sales_point.qr_code = url
        sales_point.save(update_fields=["qr_code"])

        SalesPointService.delete_sales_point(sales_point, storage=blob_storage)

        assert not SalesPoint.objects.filter(pk=sales_point.pk).exists()
        assert not blob_storage.storage.exists("qr-codes/table-1.png")

    def test_self_ordering_point_gets_qr_code(self, business, blob_storage, settings):
        settings.SELF_ORDER_BASE_URL = "https://order.example.com/selfOrder/"
        targets = []

        def render(url):
            targets.append(url)
            return b"png"

        sales_point = SalesPointService.create_sales_point(
            {"business": business, "sales_point_name": "Terrace 1", "self_ordering": True},
            storage=blob_storage,
            render_qr=render,
        )

        assert targets[0].startswith("https://order.example.com/selfOrder/")
        path = blob_storage.path_from_url(sales_point.qr_code)
        assert path == f"{business.pk}/sales-point-qr-codes/{sales_point.pk}.png"
        assert blob_storage.storage.exists(path)

    def test_no_qr_code_without_self_ordering(self, business, blob_storage):
        sales_point = SalesPointService.create_sales_point(
            {"business": business, "sales_point_name": "Bar 1", "self_ordering": False},
            storage=blob_storage,
            render_qr=lambda url: b"png",
        )

        assert sales_point.qr_code == ""

    def test_duplicate_name_conflicts(self, sales_point, blob_storage):
        with pytest.raises(ConflictError):
            SalesPointService.create_sales_point(
                {"business": sales_point.business, "sales_point_name": sales_point.sales_point_name},
                storage=blob_storage,
            )


@pytest.mark.django_db
class TestBusinessAPI:

    def test_create_business(self, api_client):
        response = api_client.post("/api/businesses/", business_payload(), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert "password" not in response.data
        assert response.data["subscription"] == "Basic"

    def test_duplicate_business_is_conflict(self, api_client, business):
        response = api_client.post(
            "/api/businesses/", business_payload(email=business.email), format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_invalid_address_is_bad_request(self, api_client):
        response = api_client.post(
            "/api/businesses/", business_payload(address={"country": "Spain"}), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "required" in response.data["message"]

    def test_delete_business(self, api_client, business, sales_point):
        response = api_client.delete(f"/api/businesses/{business.pk}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["deleted"]["sales_points"] == 1

    def test_scan_records_timestamp(self, api_client, sales_point):
        response = api_client.post(f"/api/sales-points/{sales_point.pk}/scan/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["qr_last_scanned"] is not None

    def test_create_self_ordering_sales_point(self, api_client, business, blob_storage):
        from django.apps import apps

        app_config = apps.get_app_config("core_backend")
        previous = app_config.qr_renderer
        app_config.qr_renderer = lambda url: b"png"
        try:
            response = api_client.post(
                "/api/sales-points/",
                {"business": str(business.pk), "sales_point_name": "Terrace 2", "self_ordering": True},
                format="json",
            )
        finally:
            app_config.qr_renderer = previous

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["qr_code"].endswith(".png")
