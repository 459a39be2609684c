import logging

from django.db import transaction

from core_backend.exceptions import ValidationError
from .models import PrintConfiguration

logger = logging.getLogger(__name__)


class PrintConfigurationService:
    """
    Print configurations of a printer. A printer may hold several, but two of
    its configurations never cover the same main/sub category.
    """

    @staticmethod
    def _validate(printer, data, exclude_id=None):
        main_category = data["main_category"]
        sub_categories = list(dict.fromkeys(data.get("sub_categories") or []))
        if any(not isinstance(sub, str) or not sub for sub in sub_categories):
            raise ValidationError("Sub categories must be non-empty strings!")

        sales_points = list(data.get("sales_points") or [])
        if not sales_points:
            raise ValidationError("At least one sales point is required!")
        employees = list(data.get("excluded_employees") or [])
        for related in sales_points + employees:
            if related.business_id != printer.business_id:
                raise ValidationError(f"{related} does not belong to the printer business!")

        existing = printer.configurations.all()
        if exclude_id is not None:
            existing = existing.exclude(pk=exclude_id)
        if any(config.overlaps(main_category, sub_categories) for config in existing):
            raise ValidationError("A combination of this main category and sub categories already exists!")
        return main_category, sub_categories, sales_points, employees

    @staticmethod
    @transaction.atomic
    def add_configuration(printer, data):
        main_category, sub_categories, sales_points, employees = PrintConfigurationService._validate(printer, data)
        configuration = PrintConfiguration.objects.create(
            printer=printer, main_category=main_category, sub_categories=sub_categories
        )
        configuration.sales_points.set(sales_points)
        configuration.excluded_employees.set(employees)
        logger.info(f"Print configuration {main_category} added to printer {printer.pk}")
        return configuration

    @staticmethod
    @transaction.atomic
    def update_configuration(configuration, data):
        merged = {
            "main_category": configuration.main_category,
            "sub_categories": configuration.sub_categories,
            "sales_points": list(configuration.sales_points.all()),
            "excluded_employees": list(configuration.excluded_employees.all()),
        }
        merged.update(data)
        main_category, sub_categories, sales_points, employees = PrintConfigurationService._validate(
            configuration.printer, merged, exclude_id=configuration.pk
        )
        configuration.main_category = main_category
        configuration.sub_categories = sub_categories
        configuration.save()
        configuration.sales_points.set(sales_points)
        configuration.excluded_employees.set(employees)
        return configuration


class PrintRoutingService:

    @staticmethod
    def route_order(order):
        """
        Decide which printer prints each good of ``order``.

        A good goes to every printer whose configuration matches it; a
        disconnected printer hands its jobs to its backup.

        Returns:
            dict with ``printers`` (one entry per target printer with the
            goods and quantities it prints) and ``unrouted`` (goods no
            configuration matches).
        """
        sales_point_id = order.sales_instance.sales_point_id
        configurations = list(
            PrintConfiguration.objects.filter(printer__business_id=order.business_id)
            .select_related("printer__backup_printer")
            .prefetch_related("sales_points", "excluded_employees")
        )

        targets = {}
        unrouted = []
        for line in order.lines.select_related("business_good"):
            good = line.business_good
            job = {"businessGoodId": good.pk, "name": good.name, "quantity": line.quantity}
            printers = {
                config.printer.resolve_target()
                for config in configurations
                if config.matches(good, sales_point_id, order.created_by_id)
            }
            if not printers:
                unrouted.append(job)
                continue
            for printer in printers:
                targets.setdefault(printer, []).append(job)

        if unrouted:
            logger.warning(f"Order {order.pk} has {len(unrouted)} good(s) without a printer")
        return {
            "printers": [
                {"printer": printer.pk, "ip_address": printer.ip_address, "port": printer.port, "goods": jobs}
                for printer, jobs in sorted(targets.items(), key=lambda item: item[0].pk)
            ],
            "unrouted": unrouted,
        }
