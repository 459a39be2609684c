from django.contrib import admin
from .models import Business, SalesPoint


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ("trade_name", "legal_name", "email", "subscription", "created_at")
    list_filter = ("subscription",)
    search_fields = ("trade_name", "legal_name", "email", "tax_number")
    exclude = ("password",)


@admin.register(SalesPoint)
class SalesPointAdmin(admin.ModelAdmin):
    list_display = ("sales_point_name", "business", "sales_point_type", "self_ordering")
    list_filter = ("self_ordering",)
    search_fields = ("sales_point_name",)
