from django.contrib import admin
from .models import Supplier, SupplierGood


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("trade_name", "business", "currently_in_use")
    list_filter = ("currently_in_use",)
    search_fields = ("trade_name", "legal_name")


@admin.register(SupplierGood)
class SupplierGoodAdmin(admin.ModelAdmin):
    list_display = ("name", "supplier", "measurement_unit", "price_per_measurement_unit", "budget_impact")
    list_filter = ("main_category", "budget_impact", "currently_in_use")
    search_fields = ("name", "keyword")
