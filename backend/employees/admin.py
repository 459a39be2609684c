from django.contrib import admin
from .models import Employee


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("employee_name", "business", "email", "active", "on_duty", "pay_frequency")
    list_filter = ("active", "on_duty", "pay_frequency")
    search_fields = ("employee_name", "email", "tax_number")
