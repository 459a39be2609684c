from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from customers.models import IdType


class EmployeeRole(models.TextChoices):
    GENERAL_MANAGER = "General Manager", _("General Manager")
    MANAGER = "Manager", _("Manager")
    ASSISTANT_MANAGER = "Assistant Manager", _("Assistant Manager")
    MOD = "MoD", _("Manager on Duty")
    ADMIN = "Admin", _("Admin")
    OPERATOR = "Operator", _("Operator")
    EMPLOYEE = "Employee", _("Employee")
    CASHIER = "Cashier", _("Cashier")
    FLOOR_STAFF = "Floor Staff", _("Floor Staff")
    BARTENDER = "Bartender", _("Bartender")
    BARISTA = "Barista", _("Barista")
    WAITER = "Waiter", _("Waiter")
    HEAD_CHEF = "Head Chef", _("Head Chef")
    SOUS_CHEF = "Sous Chef", _("Sous Chef")
    LINE_COOKS = "Line Cooks", _("Line Cooks")
    KITCHEN_PORTER = "Kitchen Porter", _("Kitchen Porter")
    CLEANER = "Cleaner", _("Cleaner")
    SECURITY = "Security", _("Security")
    HOST = "Host", _("Host")
    RUNNER = "Runner", _("Runner")
    SUPERVISOR = "Supervisor", _("Supervisor")
    OTHER = "Other", _("Other")


# Roles allowed to run business-wide sales reports
MANAGEMENT_ROLES = frozenset({
    EmployeeRole.GENERAL_MANAGER.value,
    EmployeeRole.MANAGER.value,
    EmployeeRole.ASSISTANT_MANAGER.value,
    EmployeeRole.MOD.value,
    EmployeeRole.ADMIN.value,
})


class PayFrequency(models.TextChoices):
    HOURLY = "Hourly", _("Hourly")
    DAILY = "Daily", _("Daily")
    WEEKLY = "Weekly", _("Weekly")
    MONTHLY = "Monthly", _("Monthly")


class Employee(models.Model):
    """
    A person working for a business.

    Name, email, tax number and ID number are unique within a business.
    ``roles`` holds EmployeeRole values; ``current_shift_role`` is the one
    the employee works as right now.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="employees")
    employee_name = models.CharField(max_length=150)
    email = models.EmailField()
    phone_number = models.CharField(max_length=50, blank=True)
    id_type = models.CharField(max_length=20, choices=IdType.choices)
    id_number = models.CharField(max_length=50)
    tax_number = models.CharField(max_length=100)
    roles = models.JSONField(default=list)
    current_shift_role = models.CharField(max_length=50, choices=EmployeeRole.choices, blank=True)
    address = models.JSONField(default=dict, blank=True)
    image_url = models.URLField(blank=True)

    join_date = models.DateField()
    terminated_date = models.DateField(null=True, blank=True)
    active = models.BooleanField(default=True)
    on_duty = models.BooleanField(default=False)

    vacation_days_per_year = models.PositiveIntegerField(default=0)
    vacation_days_left = models.IntegerField(default=0)
    contract_hours_week = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("40"))

    # Salary structure
    pay_frequency = models.CharField(max_length=10, choices=PayFrequency.choices, default=PayFrequency.MONTHLY)
    gross_salary = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    net_salary = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["employee_name"]
        constraints = [
            models.UniqueConstraint(fields=["business", "employee_name"], name="unique_employee_name_per_business"),
            models.UniqueConstraint(fields=["business", "email"], name="unique_employee_email_per_business"),
            models.UniqueConstraint(fields=["business", "tax_number"], name="unique_employee_tax_number_per_business"),
            models.UniqueConstraint(fields=["business", "id_number"], name="unique_employee_id_number_per_business"),
        ]
        indexes = [
            models.Index(fields=["business", "active", "on_duty"]),
        ]

    def __str__(self):
        return self.employee_name

    @property
    def is_manager(self):
        return bool(MANAGEMENT_ROLES.intersection(self.roles or []))
