from django.contrib import admin
from .models import SalesGroup, SalesInstance


class SalesGroupInline(admin.TabularInline):
    model = SalesGroup
    extra = 0
    readonly_fields = ("order_code", "created_at")


@admin.register(SalesInstance)
class SalesInstanceAdmin(admin.ModelAdmin):
    list_display = ("sales_point", "business", "status", "guests", "responsible_by", "daily_reference_number")
    list_filter = ("status", "business")
    search_fields = ("client_name", "sales_point__sales_point_name")
    inlines = [SalesGroupInline]
