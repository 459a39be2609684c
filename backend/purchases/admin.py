from django.contrib import admin
from .models import Purchase, PurchaseItem


class PurchaseItemInline(admin.TabularInline):
    model = PurchaseItem
    extra = 0


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ("receipt_id", "business", "supplier", "purchase_date", "total_amount", "one_time_purchase")
    list_filter = ("one_time_purchase", "purchase_date")
    search_fields = ("receipt_id", "title", "supplier__trade_name")
    readonly_fields = ("total_amount",)
    inlines = [PurchaseItemInline]
