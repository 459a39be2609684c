from django.contrib import admin
from .models import Schedule, ScheduleEntry


class ScheduleEntryInline(admin.TabularInline):
    model = ScheduleEntry
    extra = 0
    readonly_fields = ("shift_hours", "week_hours_left", "employee_cost")


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = (
        "business",
        "date",
        "week_number",
        "total_employees_scheduled",
        "total_employees_vacation",
        "total_day_employees_cost",
    )
    list_filter = ("week_number",)
    date_hierarchy = "date"
    inlines = [ScheduleEntryInline]
