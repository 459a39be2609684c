from django.contrib import admin
from .models import Inventory, InventoryGood, InventoryCount


class InventoryGoodInline(admin.TabularInline):
    model = InventoryGood
    extra = 0
    readonly_fields = ("dynamic_system_count", "average_deviation_percent")


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ("business", "period", "set_final_count", "created_at")
    list_filter = ("set_final_count",)
    inlines = [InventoryGoodInline]


@admin.register(InventoryCount)
class InventoryCountAdmin(admin.ModelAdmin):
    list_display = ("inventory_good", "counted_date", "current_count_quantity", "deviation_percent", "counted_by")
    readonly_fields = ("reedited",)
