from django.db import models

from suppliers.models import MainCategory


class Printer(models.Model):
    """
    Network printer orders are routed to. A backup printer takes over when
    this one is disconnected.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="printers")
    printer_alias = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True)
    ip_address = models.GenericIPAddressField(unique=True)
    port = models.PositiveIntegerField(default=9100)
    connected = models.BooleanField(default=False)
    backup_printer = models.ForeignKey(
        "self", on_delete=models.SET_NULL, null=True, blank=True, related_name="backed_up_printers"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["printer_alias"]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "printer_alias"],
                name="unique_printer_alias_per_business",
            ),
        ]

    def __str__(self):
        return f"{self.printer_alias} ({self.ip_address})"

    def resolve_target(self):
        """The printer that should receive jobs right now."""
        if not self.connected and self.backup_printer and self.backup_printer.connected:
            return self.backup_printer
        return self


class PrintConfiguration(models.Model):
    """
    Which orders a printer prints: goods of ``main_category`` (narrowed to
    ``sub_categories`` when given) sold at ``sales_points``, unless the order
    was taken by one of the ``excluded_employees``.
    """
    printer = models.ForeignKey(Printer, on_delete=models.CASCADE, related_name="configurations")
    main_category = models.CharField(max_length=20, choices=MainCategory.choices)
    sub_categories = models.JSONField(default=list, blank=True)
    sales_points = models.ManyToManyField("business.SalesPoint", related_name="print_configurations")
    excluded_employees = models.ManyToManyField(
        "employees.Employee", blank=True, related_name="excluded_print_configurations"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["printer", "main_category", "id"]

    def __str__(self):
        subs = ", ".join(self.sub_categories) or "all"
        return f"{self.printer.printer_alias}: {self.main_category} ({subs})"

    def overlaps(self, main_category, sub_categories):
        """
        True when this configuration already covers part of ``main_category``
        / ``sub_categories``. An empty sub-category list covers the whole
        main category.
        """
        if self.main_category != main_category:
            return False
        if not self.sub_categories or not sub_categories:
            return True
        return bool(set(self.sub_categories) & set(sub_categories))

    def matches(self, good, sales_point_id, employee_id):
        if good.main_category != self.main_category:
            return False
        if self.sub_categories and good.sub_category not in self.sub_categories:
            return False
        if sales_point_id not in {point.pk for point in self.sales_points.all()}:
            return False
        return employee_id not in {employee.pk for employee in self.excluded_employees.all()}
