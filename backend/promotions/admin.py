from django.contrib import admin
from .models import Promotion


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    list_display = ("promotion_name", "business", "period_start", "period_end", "active_promotion")
    list_filter = ("active_promotion",)
    search_fields = ("promotion_name",)
    filter_horizontal = ("business_goods_to_apply",)
