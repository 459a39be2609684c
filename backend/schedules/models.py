from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from employees.models import EmployeeRole


class Schedule(models.Model):
    """
    The staffing plan of one business day. Totals are derived from the
    entries and recomputed on every entry change.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="schedules")
    date = models.DateField()
    week_number = models.PositiveSmallIntegerField(help_text=_("ISO week number of the date"))
    total_employees_scheduled = models.PositiveIntegerField(default=0)
    total_employees_vacation = models.PositiveIntegerField(default=0)
    total_day_employees_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    comments = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Schedule")
        verbose_name_plural = _("Schedules")
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(fields=["business", "date"], name="unique_schedule_per_business_date"),
        ]

    def __str__(self):
        return f"{self.business} {self.date:%Y-%m-%d}"


class ScheduleEntry(models.Model):
    """One shift, or one vacation day, of an employee within a schedule."""
    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name="entries")
    employee = models.ForeignKey("employees.Employee", on_delete=models.CASCADE, related_name="schedule_entries")
    role = models.CharField(max_length=50, choices=EmployeeRole.choices)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    vacation = models.BooleanField(default=False)

    shift_hours = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal("0"))
    week_hours_left = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal("0"))
    employee_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        verbose_name_plural = _("Schedule entries")
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["employee", "start_time"]),
        ]

    def __str__(self):
        return f"{self.employee} {self.start_time:%H:%M}-{self.end_time:%H:%M}"
