from django.contrib import admin
from .models import PrintConfiguration, Printer


class PrintConfigurationInline(admin.TabularInline):
    model = PrintConfiguration
    extra = 0
    filter_horizontal = ("sales_points", "excluded_employees")


@admin.register(Printer)
class PrinterAdmin(admin.ModelAdmin):
    list_display = ("printer_alias", "business", "ip_address", "port", "connected")
    list_filter = ("connected",)
    inlines = [PrintConfigurationInline]
