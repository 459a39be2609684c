import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from core_backend.exceptions import ConflictError, ValidationError
from .models import Employee, EmployeeRole, PayFrequency

logger = logging.getLogger(__name__)


def calculate_vacation_proportional(join_date, vacation_days_per_year, today=None):
    """
    Vacation days an employee is entitled to for the current year.

    Someone who joined this year gets the share of the yearly allowance that
    is left after their join date; anyone else gets the full allowance.
    """
    if not vacation_days_per_year:
        return 0
    today = today or timezone.localdate()
    if join_date.year != today.year:
        return vacation_days_per_year

    day_of_year = (join_date - date(join_date.year, 1, 1)).days + 1
    proportion_passed = Decimal(day_of_year) / Decimal(365)
    remaining = Decimal(vacation_days_per_year) * (1 - proportion_passed)
    return max(int(remaining.quantize(Decimal("1"), rounding=ROUND_HALF_UP)), 0)


def validate_salary(pay_frequency, gross_salary, net_salary):
    if pay_frequency not in PayFrequency.values:
        raise ValidationError(f"Invalid pay frequency: {pay_frequency}")
    for name, value in (("grossSalary", gross_salary), ("netSalary", net_salary)):
        if value is None:
            raise ValidationError(f"{name} must have a value!")
        if Decimal(value) < 0:
            raise ValidationError(f"{name} must be a positive number!")
    if Decimal(net_salary) > Decimal(gross_salary):
        raise ValidationError("netSalary cannot be higher than grossSalary!")


def validate_roles(roles):
    if not isinstance(roles, list) or not roles:
        raise ValidationError("Employee must have at least one role!")
    invalid = [role for role in roles if role not in EmployeeRole.values]
    if invalid:
        raise ValidationError(f"Invalid role(s): {', '.join(map(str, invalid))}")


class EmployeeService:

    @staticmethod
    def _check_duplicates(business, data, exclude_id=None):
        lookups = Q()
        for field in ("employee_name", "email", "tax_number", "id_number"):
            if data.get(field):
                lookups |= Q(**{field: data[field]})
        if not lookups:
            return
        duplicates = Employee.objects.filter(lookups, business=business)
        if exclude_id is not None:
            duplicates = duplicates.exclude(pk=exclude_id)
        if duplicates.exists():
            raise ConflictError(
                "Employee with the same name, email, tax number or id number already exists!"
            )

    @staticmethod
    @transaction.atomic
    def create_employee(data):
        validate_roles(data.get("roles"))
        validate_salary(
            data.get("pay_frequency", PayFrequency.MONTHLY),
            data.get("gross_salary", 0),
            data.get("net_salary", 0),
        )
        EmployeeService._check_duplicates(data["business"], data)

        data = dict(data)
        data["vacation_days_left"] = calculate_vacation_proportional(
            data["join_date"], data.get("vacation_days_per_year", 0)
        )
        employee = Employee.objects.create(**data)
        logger.info(f"Employee {employee.employee_name} created for business {employee.business_id}")
        return employee

    @staticmethod
    @transaction.atomic
    def update_employee(employee, data):
        if "roles" in data:
            validate_roles(data["roles"])
        if {"pay_frequency", "gross_salary", "net_salary"} & set(data):
            validate_salary(
                data.get("pay_frequency", employee.pay_frequency),
                data.get("gross_salary", employee.gross_salary),
                data.get("net_salary", employee.net_salary),
            )
        current_role = data.get("current_shift_role")
        roles = data.get("roles", employee.roles)
        if current_role and current_role not in roles:
            raise ValidationError("Current shift role must be one of the employee roles!")

        EmployeeService._check_duplicates(employee.business, data, exclude_id=employee.pk)

        for field, value in data.items():
            setattr(employee, field, value)
        if data.get("terminated_date"):
            employee.active = False
            employee.on_duty = False
        employee.save()
        return employee
