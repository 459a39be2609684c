import calendar
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import IntegrityError, transaction
from django.db.models import F

from core_backend.exceptions import ConflictError, ValidationError
from employees.models import Employee, PayFrequency
from .models import Schedule, ScheduleEntry

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
SECONDS_PER_HOUR = Decimal("3600")
WORKING_DAYS_PER_WEEK = 5


def weekdays_in_month(year, month):
    """Monday to Friday days of a calendar month."""
    days = calendar.monthrange(year, month)[1]
    return sum(1 for day in range(1, days + 1) if calendar.weekday(year, month, day) < 5)


def shift_hours(start_time, end_time) -> Decimal:
    seconds = Decimal(str((end_time - start_time).total_seconds()))
    return (seconds / SECONDS_PER_HOUR).quantize(CENTS, rounding=ROUND_HALF_UP)


def shift_cost(employee, hours, on_date) -> Decimal:
    """
    Cost of one shift from the employee's salary.

    Monthly salaries spread over the weekdays of the month, weekly ones over
    five working days; daily salaries are paid per shift and hourly ones per
    hour worked.
    """
    gross = employee.gross_salary
    if employee.pay_frequency == PayFrequency.MONTHLY:
        cost = gross / weekdays_in_month(on_date.year, on_date.month)
    elif employee.pay_frequency == PayFrequency.WEEKLY:
        cost = gross / WORKING_DAYS_PER_WEEK
    elif employee.pay_frequency == PayFrequency.DAILY:
        cost = gross
    else:
        cost = gross * hours
    return cost.quantize(CENTS, rounding=ROUND_HALF_UP)


def is_overlapping(start_time, end_time, ranges):
    """True when the new range shares any time with one of ``ranges``."""
    return any(start_time < existing_end and end_time > existing_start for existing_start, existing_end in ranges)


class ScheduleService:

    @staticmethod
    def create_schedule(business, date, comments=""):
        """
        Raises:
            ConflictError: The business already has a schedule for the date.
        """
        if Schedule.objects.filter(business=business, date=date).exists():
            raise ConflictError(f"Schedule for {date:%Y-%m-%d} already exists!")
        try:
            with transaction.atomic():
                schedule = Schedule.objects.create(
                    business=business, date=date, week_number=date.isocalendar()[1], comments=comments
                )
        except IntegrityError:
            raise ConflictError(f"Schedule for {date:%Y-%m-%d} already exists!")
        logger.info(f"Schedule {date:%Y-%m-%d} created for business {business.pk}")
        return schedule

    @staticmethod
    def refresh_totals(schedule):
        """Recompute distinct employee counts and the day's labor cost."""
        entries = list(schedule.entries.all())
        schedule.total_employees_scheduled = len({entry.employee_id for entry in entries if not entry.vacation})
        schedule.total_employees_vacation = len({entry.employee_id for entry in entries if entry.vacation})
        schedule.total_day_employees_cost = sum((entry.employee_cost for entry in entries), Decimal("0.00"))
        schedule.save(update_fields=[
            "total_employees_scheduled",
            "total_employees_vacation",
            "total_day_employees_cost",
            "updated_at",
        ])
        return schedule

    @staticmethod
    def refresh_week_hours(employee, schedule):
        """
        Set ``week_hours_left`` on every entry the employee has in the ISO
        week of ``schedule``: contract hours minus all hours scheduled that week.
        """
        year, week, _weekday = schedule.date.isocalendar()
        week_entries = ScheduleEntry.objects.filter(
            employee=employee,
            schedule__business_id=schedule.business_id,
            schedule__date__iso_year=year,
            schedule__week_number=week,
        )
        scheduled = sum((entry.shift_hours for entry in week_entries), Decimal("0"))
        week_entries.update(week_hours_left=employee.contract_hours_week - scheduled)

    @staticmethod
    def _validate_entry(schedule, employee, start_time, end_time, vacation, exclude_id=None):
        if employee.business_id != schedule.business_id:
            raise ValidationError("Employee does not belong to this business!")
        if start_time >= end_time:
            raise ValidationError("Shift start time must be before its end time!")

        others = schedule.entries.filter(employee=employee)
        if exclude_id is not None:
            others = others.exclude(pk=exclude_id)
        if vacation and others.filter(vacation=True).exists():
            raise ValidationError("Employee is already on vacation in this schedule!")
        ranges = [(entry.start_time, entry.end_time) for entry in others]
        if is_overlapping(start_time, end_time, ranges):
            raise ValidationError("Employee is already scheduled in that time range!")

    @staticmethod
    def _take_vacation_day(employee):
        employee.refresh_from_db(fields=["vacation_days_left"])
        if employee.vacation_days_left <= 0:
            raise ValidationError(f"{employee.employee_name} has no vacation days left!")
        Employee.objects.filter(pk=employee.pk).update(vacation_days_left=F("vacation_days_left") - 1)

    @staticmethod
    def _return_vacation_day(employee_id):
        Employee.objects.filter(pk=employee_id).update(vacation_days_left=F("vacation_days_left") + 1)

    @staticmethod
    @transaction.atomic
    def add_entry(schedule, employee, role, start_time, end_time, vacation=False):
        """
        Schedule a shift for an employee.

        Raises:
            ValidationError: The range is empty or overlaps another shift of
                the employee in this schedule, a second vacation entry, no
                vacation days left, or an employee of another business.
        """
        schedule = Schedule.objects.select_for_update().get(pk=schedule.pk)
        ScheduleService._validate_entry(schedule, employee, start_time, end_time, vacation)
        if vacation:
            ScheduleService._take_vacation_day(employee)

        hours = shift_hours(start_time, end_time)
        entry = ScheduleEntry.objects.create(
            schedule=schedule,
            employee=employee,
            role=role,
            start_time=start_time,
            end_time=end_time,
            vacation=vacation,
            shift_hours=hours,
            employee_cost=shift_cost(employee, hours, schedule.date),
        )
        ScheduleService.refresh_week_hours(employee, schedule)
        ScheduleService.refresh_totals(schedule)
        logger.info(f"Schedule {schedule.pk}: added {employee.employee_name} {start_time:%H:%M}-{end_time:%H:%M}")
        entry.refresh_from_db()
        return entry

    @staticmethod
    @transaction.atomic
    def update_entry(entry, data):
        """Change role, time range or vacation flag of an entry."""
        schedule = Schedule.objects.select_for_update().get(pk=entry.schedule_id)
        employee = entry.employee
        start_time = data.get("start_time", entry.start_time)
        end_time = data.get("end_time", entry.end_time)
        vacation = data.get("vacation", entry.vacation)
        ScheduleService._validate_entry(schedule, employee, start_time, end_time, vacation, exclude_id=entry.pk)

        if vacation and not entry.vacation:
            ScheduleService._take_vacation_day(employee)
        elif entry.vacation and not vacation:
            ScheduleService._return_vacation_day(employee.pk)

        entry.role = data.get("role", entry.role)
        entry.start_time = start_time
        entry.end_time = end_time
        entry.vacation = vacation
        entry.shift_hours = shift_hours(start_time, end_time)
        entry.employee_cost = shift_cost(employee, entry.shift_hours, schedule.date)
        entry.save()

        ScheduleService.refresh_week_hours(employee, schedule)
        ScheduleService.refresh_totals(schedule)
        entry.refresh_from_db()
        return entry

    @staticmethod
    @transaction.atomic
    def remove_entry(entry):
        schedule = Schedule.objects.select_for_update().get(pk=entry.schedule_id)
        employee = entry.employee
        if entry.vacation:
            ScheduleService._return_vacation_day(employee.pk)
        entry.delete()
        ScheduleService.refresh_week_hours(employee, schedule)
        ScheduleService.refresh_totals(schedule)
        logger.info(f"Schedule {schedule.pk}: removed entry of {employee.employee_name}")
        return schedule

    @staticmethod
    @transaction.atomic
    def delete_schedule(schedule):
        """Delete a schedule, giving back the vacation days it booked."""
        entries = list(schedule.entries.select_related("employee"))
        for entry in entries:
            if entry.vacation:
                ScheduleService._return_vacation_day(entry.employee_id)
        employees = {entry.employee_id: entry.employee for entry in entries}
        schedule.delete()

        # Remaining shifts of the same week get their hours back.
        for employee in employees.values():
            ScheduleService.refresh_week_hours(employee, schedule)
