import logging
import random

from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from orders.models import Order
from .models import SalesGroup, SalesInstance, SalesInstanceStatus

logger = logging.getLogger(__name__)

WEEKDAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def generate_order_code(now=None):
    """
    Code of a batch of orders: day and month, weekday abbreviation and a
    random four digit number, e.g. ``0503Tue4821``.
    """
    now = timezone.localtime(now or timezone.now())
    return f"{now:%d%m}{WEEKDAY_ABBREVIATIONS[now.weekday()]}{random.randint(1000, 9999)}"


class SalesInstanceService:
    """
    Opening, updating, closing and transferring sales instances.

    A sales instance that ends up Occupied without any order is deleted
    rather than kept as an empty record.
    """

    @staticmethod
    @transaction.atomic
    def open_sales_instance(business, sales_point, guests, opened_by, status=SalesInstanceStatus.OCCUPIED,
                            client_name=""):
        """
        Open a sales instance on ``sales_point`` for the current business day.

        The business day is the open daily sales report, created when this is
        the first instance of the day. The opening employee joins the report.

        Raises:
            ValidationError: Missing guests, or a sales point or employee of
                another business.
            ConflictError: The sales point already has a live instance today.
        """
        from reports.services import DailySalesReportService

        if not guests or guests < 1:
            raise ValidationError("Guests must be at least 1!")
        if sales_point.business_id != business.pk:
            raise ValidationError("Sales point does not exist in this business!")
        if opened_by.business_id != business.pk:
            raise ValidationError("Employee does not belong to this business!")
        if status == SalesInstanceStatus.CLOSED:
            raise ValidationError("A sales instance cannot be opened as Closed!")

        report = DailySalesReportService.get_or_create_open_report(business)
        if SalesInstance.objects.filter(
            business=business,
            sales_point=sales_point,
            daily_reference_number=report.daily_reference_number,
        ).exclude(status=SalesInstanceStatus.CLOSED).exists():
            raise ConflictError("SalesInstance already exists and it is not closed!")

        DailySalesReportService.add_employee(report, opened_by)
        sales_instance = SalesInstance.objects.create(
            business=business,
            daily_reference_number=report.daily_reference_number,
            sales_point=sales_point,
            guests=guests,
            status=status,
            opened_by=opened_by,
            responsible_by=opened_by,
            client_name=client_name or "",
        )
        logger.info(f"Sales instance {sales_instance.pk} opened on {sales_point} by {opened_by}")
        return sales_instance

    @staticmethod
    @transaction.atomic
    def update_sales_instance(sales_instance, data):
        """
        Update status, guests, responsible employee or client name.

        Returns:
            The updated instance, or None when an Occupied instance without
            orders was deleted instead.

        Raises:
            ConflictError: The instance is closed.
        """
        from reports.services import DailySalesReportService

        sales_instance = SalesInstance.objects.select_for_update().get(pk=sales_instance.pk)
        if sales_instance.is_closed:
            raise ConflictError("Closed sales instances cannot be updated!")
        new_status = data.get("status")
        if (
            sales_instance.status == SalesInstanceStatus.OCCUPIED
            and not sales_instance.orders.exists()
            and new_status != SalesInstanceStatus.RESERVED
        ):
            sales_instance.delete()
            logger.info("Empty occupied sales instance deleted on update")
            return None

        responsible_by = data.get("responsible_by")
        if responsible_by is not None:
            if responsible_by.business_id != sales_instance.business_id:
                raise ValidationError("Employee does not belong to this business!")
            if responsible_by.pk != sales_instance.responsible_by_id:
                report = DailySalesReportService.get_open_report(sales_instance.business)
                if report is not None:
                    DailySalesReportService.add_employee(report, responsible_by)

        for field in ("status", "guests", "responsible_by", "client_name"):
            if data.get(field) not in (None, ""):
                setattr(sales_instance, field, data[field])
        sales_instance.save()
        return sales_instance

    @staticmethod
    @transaction.atomic
    def close_sales_instance(sales_instance, closed_by):
        """
        Close a sales instance whose orders are all settled.

        An instance without sales groups is deleted instead.

        Returns:
            The closed instance, or None when it was deleted.

        Raises:
            ConflictError: The instance still has open orders.
        """
        sales_instance = SalesInstance.objects.select_for_update().get(pk=sales_instance.pk)
        if not sales_instance.sales_groups.exists():
            sales_instance.delete()
            logger.info("Sales instance with no orders deleted on close")
            return None

        if sales_instance.orders.filter(billing_status=Order.BillingStatus.OPEN).exists():
            logger.warning(f"Close rejected for sales instance {sales_instance.pk}: open orders")
            raise ConflictError("Sales instance cant be closed because it still has open orders!")

        sales_instance.status = SalesInstanceStatus.CLOSED
        sales_instance.closed_at = timezone.now()
        sales_instance.closed_by = closed_by
        sales_instance.save(update_fields=["status", "closed_at", "closed_by", "updated_at"])
        logger.info(f"Sales instance {sales_instance.pk} closed")
        return sales_instance

    @staticmethod
    def close_if_settled(sales_instance_id):
        """
        Close the instance when none of its orders is open. The responsible
        employee closes it. Runs inside the caller's transaction.
        """
        sales_instance = SalesInstance.objects.select_for_update().get(pk=sales_instance_id)
        if sales_instance.is_closed:
            return False
        if sales_instance.orders.filter(billing_status=Order.BillingStatus.OPEN).exists():
            return False
        sales_instance.status = SalesInstanceStatus.CLOSED
        sales_instance.closed_at = timezone.now()
        sales_instance.closed_by_id = sales_instance.responsible_by_id
        sales_instance.save(update_fields=["status", "closed_at", "closed_by", "updated_at"])
        logger.info(f"Sales instance {sales_instance.pk} closed automatically, all orders settled")
        return True

    @staticmethod
    def delete_sales_instance(sales_instance):
        """Delete a sales instance that has no orders attached."""
        if sales_instance.orders.exists():
            raise ConflictError("Sales instance has orders and cannot be deleted!")
        sales_instance.delete()

    @staticmethod
    @transaction.atomic
    def transfer_orders(order_ids, from_instance, to_instance=None, sales_point=None, employee=None):
        """
        Move open orders to another sales instance.

        The target is either an existing instance (``to_instance``) or a new
        one opened on ``sales_point``. Sales groups move with their orders and
        merge into a target group with the same order code; emptied origin
        groups are dropped. An origin left without orders is deleted.

        Returns:
            The target sales instance.
        """
        if (to_instance is None) == (sales_point is None):
            raise ValidationError("Provide either a target sales instance or a sales point, not both!")
        order_ids = list(dict.fromkeys(order_ids or []))
        if not order_ids:
            raise ValidationError("At least one order is required!")

        if to_instance is None:
            to_instance = SalesInstanceService.open_sales_instance(
                from_instance.business,
                sales_point,
                guests=from_instance.guests,
                opened_by=employee or from_instance.responsible_by,
            )

        if from_instance.pk == to_instance.pk:
            raise ValidationError("Origin and target sales instance are the same!")
        # Both rows locked in one statement in pk order
        locked = {
            instance.pk: instance
            for instance in SalesInstance.objects.select_for_update()
            .filter(pk__in=[from_instance.pk, to_instance.pk])
            .order_by("pk")
        }
        if len(locked) != 2:
            raise NotFoundError("Sales instance not found!")
        from_instance, to_instance = locked[from_instance.pk], locked[to_instance.pk]
        if from_instance.business_id != to_instance.business_id:
            raise ValidationError("Sales instances belong to different businesses!")
        if from_instance.is_closed or to_instance.is_closed:
            raise ConflictError("Orders can only be transferred between open sales instances!")

        orders = list(
            Order.objects.select_for_update()
            .filter(pk__in=order_ids, sales_instance=from_instance)
            .select_related("sales_group")
        )
        if len(orders) != len(order_ids):
            raise ValidationError("Some orders do not belong to the origin sales instance!")
        if any(not order.is_open for order in orders):
            raise ConflictError("Only open orders can be transferred!")

        origin_groups = {}
        target_groups = {}
        for order in orders:
            origin = order.sales_group
            code = origin.order_code if origin else generate_order_code()
            if code not in target_groups:
                target_groups[code], created = SalesGroup.objects.get_or_create(
                    sales_instance=to_instance,
                    order_code=code,
                    defaults={"created_at": origin.created_at if origin else timezone.now()},
                )
            if origin is not None:
                origin_groups[origin.pk] = origin
            order.sales_instance = to_instance
            order.sales_group = target_groups[code]
        Order.objects.bulk_update(orders, ["sales_instance", "sales_group"])

        for group in origin_groups.values():
            if not group.orders.exists():
                group.delete()

        if to_instance.status != SalesInstanceStatus.OCCUPIED:
            to_instance.status = SalesInstanceStatus.OCCUPIED
            to_instance.save(update_fields=["status", "updated_at"])

        if from_instance.status == SalesInstanceStatus.OCCUPIED and not from_instance.orders.exists():
            from_instance.delete()
            logger.info("Origin sales instance left empty after transfer, deleted")

        logger.info(f"Transferred {len(orders)} order(s) to sales instance {to_instance.pk}")
        return to_instance
