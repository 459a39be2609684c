from django.contrib import admin
from .models import Order, OrderGood


class OrderGoodInline(admin.TabularInline):
    model = OrderGood
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Order model. Orders are read here; changes go
    through the API so inventory and reports stay consistent.
    """

    list_display = (
        "id",
        "business",
        "sales_instance",
        "billing_status",
        "order_status",
        "order_net_price",
        "order_tips",
        "created_at",
    )
    list_filter = ("billing_status", "order_status", "business")
    search_fields = ("sales_group__order_code", "comments")
    readonly_fields = ("payment_methods", "order_gross_price", "order_cost_price", "created_at", "updated_at")
    inlines = [OrderGoodInline]
