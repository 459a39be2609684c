import logging
import uuid

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.db import transaction
from django.db.models import Q

from core_backend.exceptions import ConflictError, ValidationError
from core_backend.utils.cleanup import CleanupPlan
from .models import Business, SalesPoint

logger = logging.getLogger(__name__)


REQUIRED_ADDRESS_FIELDS = ("country", "state", "city", "street", "buildingNumber", "postCode")
OPTIONAL_ADDRESS_FIELDS = ("region", "additionalDetails", "coordinates")

COST_METRIC_KEYS = (
    "foodCostPercentage",
    "beverageCostPercentage",
    "laborCostPercentage",
    "fixedCostPercentage",
)
WASTE_METRIC_KEYS = (
    "veryLowBudgetImpact",
    "lowBudgetImpact",
    "mediumBudgetImpact",
    "highBudgetImpact",
    "veryHighBudgetImpact",
)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_address(address):
    """
    Validate a business/supplier address object.

    Raises:
        ValidationError: If the address is not an object, misses a required
            field or carries unknown keys.
    """
    if not isinstance(address, dict) or not address:
        raise ValidationError("Address must be a non-empty object!")

    missing = [field for field in REQUIRED_ADDRESS_FIELDS if not address.get(field)]
    if missing:
        raise ValidationError(f"{', '.join(missing)} on address are required!")

    allowed = set(REQUIRED_ADDRESS_FIELDS) | set(OPTIONAL_ADDRESS_FIELDS)
    unknown = [key for key in address if key not in allowed]
    if unknown:
        raise ValidationError(f"Invalid address key(s): {', '.join(unknown)}")
    return address


def validate_metrics(metrics):
    """
    Validate business cost metrics.

    Cost keys are percentages in [0, 100]; ``supplierGoodWastePercentage`` is
    an object with one percentage per budget impact level.
    """
    if not isinstance(metrics, dict):
        raise ValidationError("Metrics must be an object!")

    valid_keys = set(COST_METRIC_KEYS) | {"supplierGoodWastePercentage"}
    for key, value in metrics.items():
        if key not in valid_keys:
            raise ValidationError(f"Invalid key: {key}")
        if key == "supplierGoodWastePercentage":
            continue
        if not _is_number(value) or value < 0 or value > 100:
            raise ValidationError(f"{key} must be a number between 0 and 100")

    waste = metrics.get("supplierGoodWastePercentage")
    if waste is not None:
        if not isinstance(waste, dict):
            raise ValidationError("supplierGoodWastePercentage must be an object!")
        for key, value in waste.items():
            if key not in WASTE_METRIC_KEYS:
                raise ValidationError(f"Invalid key: {key}")
            if not _is_number(value) or value < 0 or value > 100:
                raise ValidationError(f"{key} must be a number between 0 and 100")
    return metrics


class BusinessService:
    """
    Business lifecycle: creation with uniqueness checks and cascading deletion.
    """

    @staticmethod
    def _check_duplicates(legal_name, email, tax_number, exclude_id=None):
        duplicates = Business.objects.filter(
            Q(legal_name=legal_name) | Q(email=email) | Q(tax_number=tax_number)
        )
        if exclude_id is not None:
            duplicates = duplicates.exclude(pk=exclude_id)
        if duplicates.exists():
            raise ConflictError(f"Business {legal_name}, {email} or {tax_number} already exists!")

    @staticmethod
    @transaction.atomic
    def create_business(data):
        """
        Create a business from validated serializer data.

        The raw password is hashed; address and metrics are validated.
        """
        validate_address(data.get("address"))
        if data.get("metrics"):
            validate_metrics(data["metrics"])

        BusinessService._check_duplicates(data["legal_name"], data["email"], data["tax_number"])

        data = dict(data)
        data["password"] = make_password(data["password"])
        business = Business.objects.create(**data)
        logger.info(f"Business {business.legal_name} created ({business.id})")
        return business

    @staticmethod
    @transaction.atomic
    def update_business(business, data):
        if "address" in data:
            validate_address(data["address"])
        if data.get("metrics"):
            validate_metrics(data["metrics"])

        BusinessService._check_duplicates(
            data.get("legal_name", business.legal_name),
            data.get("email", business.email),
            data.get("tax_number", business.tax_number),
            exclude_id=business.pk,
        )

        for field, value in data.items():
            if field == "password":
                value = make_password(value)
            setattr(business, field, value)
        business.save()
        return business

    @staticmethod
    def build_deletion_plan(business):
        """
        List every collection a business owns, in deletion order.

        Rows referencing others through protected keys come first
        (orders before goods and employees, purchases before supplier goods).
        """
        from orders.models import Order
        from sales_instances.models import SalesInstance
        from reports.models import DailySalesReport, MonthlyBusinessReport
        from schedules.models import Schedule
        from inventory.models import Inventory
        from purchases.models import Purchase
        from promotions.models import Promotion
        from goods.models import BusinessGood
        from suppliers.models import Supplier, SupplierGood
        from printers.models import Printer
        from employees.models import Employee
        from customers.models import Customer
        from notifications.models import Notification

        plan = CleanupPlan(label=f"delete business {business.pk}")
        (
            plan.delete_queryset("orders", Order.objects.filter(business=business))
            .delete_queryset("sales_instances", SalesInstance.objects.filter(business=business))
            .delete_queryset("daily_sales_reports", DailySalesReport.objects.filter(business=business))
            .delete_queryset("monthly_business_reports", MonthlyBusinessReport.objects.filter(business=business))
            .delete_queryset("schedules", Schedule.objects.filter(business=business))
            .delete_queryset("inventories", Inventory.objects.filter(business=business))
            .delete_queryset("purchases", Purchase.objects.filter(business=business))
            .delete_queryset("promotions", Promotion.objects.filter(business=business))
            .delete_queryset("business_goods", BusinessGood.objects.filter(business=business))
            .delete_queryset("supplier_goods", SupplierGood.objects.filter(business=business))
            .delete_queryset("suppliers", Supplier.objects.filter(business=business))
            .delete_queryset("sales_points", SalesPoint.objects.filter(business=business))
            .delete_queryset("notifications", Notification.objects.filter(business=business))
            .delete_queryset("printers", Printer.objects.filter(business=business))
            .delete_queryset("employees", Employee.objects.filter(business=business))
            .delete_queryset("customers", Customer.objects.filter(business=business))
            .delete_queryset("business", Business.objects.filter(pk=business.pk))
        )
        return plan

    @staticmethod
    def delete_business(business):
        """Delete a business and everything it owns in one transaction."""
        results = BusinessService.build_deletion_plan(business).run()
        logger.info(f"Business {business.pk} deleted")
        return results


class SalesPointService:

    @staticmethod
    def self_order_url():
        """Target a self-ordering QR code points to; unique per sales point."""
        return f"{settings.SELF_ORDER_BASE_URL.rstrip('/')}/{uuid.uuid4().hex}"

    @staticmethod
    @transaction.atomic
    def create_sales_point(data, storage, render_qr=None):
        """
        Create a sales point. Self-ordering points get a QR code image,
        rendered by ``render_qr(url) -> bytes`` and stored in ``storage``.

        Raises:
            ConflictError: The business already has a sales point with this name.
        """
        business = data["business"]
        name = data["sales_point_name"]
        if SalesPoint.objects.filter(business=business, sales_point_name=name).exists():
            raise ConflictError(f"Sales point {name} already exists!")

        sales_point = SalesPoint.objects.create(**data)
        if sales_point.self_ordering and render_qr is not None:
            target = SalesPointService.self_order_url()
            sales_point.qr_code = storage.upload(
                render_qr(target),
                f"{business.pk}/sales-point-qr-codes",
                filename=f"{sales_point.pk}.png",
            )
            sales_point.save(update_fields=["qr_code", "updated_at"])
        logger.info(f"Sales point {name} created for business {business.pk}")
        return sales_point

    @staticmethod
    def delete_sales_point(sales_point, storage):
        """
        Delete a sales point and its stored QR code image.

        Sales points with live (non-closed) sales instances cannot be deleted.
        """
        from sales_instances.models import SalesInstance, SalesInstanceStatus

        if SalesInstance.objects.filter(sales_point=sales_point).exclude(
            status=SalesInstanceStatus.CLOSED
        ).exists():
            raise ConflictError("Sales point has open sales instances!")

        qr_code = sales_point.qr_code
        with transaction.atomic():
            sales_point.delete()
        if qr_code:
            storage.delete(qr_code)
        logger.info(f"Sales point {sales_point.sales_point_name} deleted")
