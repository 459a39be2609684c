from django.contrib import admin
from .models import BusinessGood, BusinessGoodIngredient


class BusinessGoodIngredientInline(admin.TabularInline):
    model = BusinessGoodIngredient
    extra = 0
    readonly_fields = ("cost_of_required_quantity",)


@admin.register(BusinessGood)
class BusinessGoodAdmin(admin.ModelAdmin):
    list_display = ("name", "business", "main_category", "selling_price", "cost_price", "available")
    list_filter = ("main_category", "on_menu", "available")
    search_fields = ("name", "keyword")
    readonly_fields = ("cost_price", "allergens")
    filter_horizontal = ("set_menu",)
    inlines = [BusinessGoodIngredientInline]
